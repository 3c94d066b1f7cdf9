"""
Completion score service.
Scores a habit over a date window and grades it against its thresholds.
"""
from datetime import date, datetime, timedelta
from typing import Optional
from sqlalchemy.orm import Session

from habitarcade.repositories.habit_repository import HabitRepository
from habitarcade.repositories.habit_entry_repository import HabitEntryRepository
from habitarcade.repositories.settings_repository import SettingsRepository
from habitarcade.services.date_service import DateService
from habitarcade.constants import (
    HABIT_STATUS_COMPLETE, HABIT_STATUS_EXTRA, HABIT_STATUS_PARTIAL,
    HABIT_STATUS_EXEMPT, HABIT_STATUS_NA, HABIT_STATUS_SKIP, HABIT_STATUS_EMPTY,
    SCORE_DEFAULT_DAYS, SCORE_LEVEL_ON_TARGET, SCORE_LEVEL_WARNING, SCORE_LEVEL_BELOW,
    DEFAULT_TARGET_PERCENTAGE, DEFAULT_WARNING_PERCENTAGE
)
from habitarcade.exceptions import HabitNotFoundException, ValidationException

COMPLETED_STATUSES = {HABIT_STATUS_COMPLETE, HABIT_STATUS_EXTRA}
EXCLUDED_STATUSES = {HABIT_STATUS_EXEMPT, HABIT_STATUS_NA, HABIT_STATUS_SKIP, HABIT_STATUS_EMPTY}


def score_level(percentage: int, target_percentage: int, warning_percentage: int) -> str:
    if percentage >= target_percentage:
        return SCORE_LEVEL_ON_TARGET
    if percentage >= warning_percentage:
        return SCORE_LEVEL_WARNING
    return SCORE_LEVEL_BELOW


class ScoreService:
    """Service for habit completion scores"""

    def __init__(self, db: Session):
        self.db = db
        self.habit_repo = HabitRepository()
        self.entry_repo = HabitEntryRepository()
        self.settings_repo = SettingsRepository()
        self.date_service = DateService()

    def score(
        self,
        habit_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        now: Optional[datetime] = None
    ) -> dict:
        """
        Completion percentage of a habit over [start_date, end_date].

        complete/extra count as 1 and partial as 0.5. exempt, na, skip and
        empty days (including days with no entry) are left out of the
        denominator. Future days are ignored; today counts only once logged.

        Raises:
            HabitNotFoundException: If the habit does not exist or is deleted
            ValidationException: If start_date is after end_date
        """
        habit = self.habit_repo.get_active_by_id(self.db, habit_id)
        if not habit:
            raise HabitNotFoundException(habit_id)

        settings = self.settings_repo.get(self.db)
        today = self.date_service.get_effective_date(settings.day_boundary_hour, now)
        end_date = end_date or today
        start_date = start_date or end_date - timedelta(days=SCORE_DEFAULT_DAYS - 1)
        if start_date > end_date:
            raise ValidationException("start_date", "must not be after end_date")

        last_day = min(end_date, today)
        entries = self.entry_repo.get_range(self.db, habit_id, start_date, last_day)
        statuses = {entry.date: entry.status for entry in entries}

        completed = 0
        partial = 0
        counted_days = 0
        for day in self.date_service.date_range(start_date, last_day + timedelta(days=1)):
            status = statuses.get(day, HABIT_STATUS_EMPTY)
            if status in EXCLUDED_STATUSES:
                continue
            counted_days += 1
            if status in COMPLETED_STATUSES:
                completed += 1
            elif status == HABIT_STATUS_PARTIAL:
                partial += 1

        percentage = round((completed + partial * 0.5) / counted_days * 100) if counted_days else 0

        target = habit.target_percentage if habit.target_percentage is not None else DEFAULT_TARGET_PERCENTAGE
        warning = habit.warning_percentage if habit.warning_percentage is not None else DEFAULT_WARNING_PERCENTAGE

        return {
            "habit_id": habit_id,
            "start_date": start_date,
            "end_date": end_date,
            "percentage": percentage,
            "level": score_level(percentage, target, warning),
            "completed": completed,
            "partial": partial,
            "counted_days": counted_days,
            "target_percentage": target,
            "warning_percentage": warning,
        }
