"""
Habit management service.
Handles habit CRUD, soft delete, entry logging and the effective "today".
"""
import logging
from datetime import datetime, date
from typing import List, Optional
from sqlalchemy.orm import Session

from habitarcade.models import Habit, HabitEntry
from habitarcade.schemas import HabitCreate, HabitUpdate
from habitarcade.repositories.habit_repository import HabitRepository
from habitarcade.repositories.habit_entry_repository import HabitEntryRepository
from habitarcade.repositories.settings_repository import SettingsRepository
from habitarcade.services.date_service import DateService
from habitarcade.services.hierarchy_service import habit_hierarchy_validator
from habitarcade.constants import (
    HABIT_STATUSES, HABIT_STATUS_COMPLETE, HABIT_STATUS_PARTIAL, HABIT_STATUS_EMPTY
)
from habitarcade.exceptions import HabitNotFoundException, ValidationException

logger = logging.getLogger("habitarcade.habits")

# Fields a client may explicitly clear with null
NULLABLE_HABIT_FIELDS = {"category_id", "parent_habit_id", "icon", "icon_color", "daily_target"}


def validate_status(status: str, field: str = "status") -> str:
    """Reject unknown habit statuses"""
    if status not in HABIT_STATUSES:
        raise ValidationException(field, f"unknown status '{status}'", code="INVALID_STATUS")
    return status


class HabitService:
    """Service for habit management"""

    def __init__(self, db: Session):
        self.db = db
        self.habit_repo = HabitRepository()
        self.entry_repo = HabitEntryRepository()
        self.settings_repo = SettingsRepository()
        self.date_service = DateService()

    def get_habits(self, include_deleted: bool = False, category_id: Optional[int] = None) -> List[Habit]:
        """List habits"""
        return self.habit_repo.get_all(self.db, include_deleted, category_id)

    def get_habit(self, habit_id: int) -> Habit:
        """Get habit by ID (deleted habits included)"""
        habit = self.habit_repo.get_by_id(self.db, habit_id)
        if not habit:
            raise HabitNotFoundException(habit_id)
        return habit

    def get_active_habit(self, habit_id: int) -> Habit:
        """Get a non-deleted habit by ID"""
        habit = self.habit_repo.get_active_by_id(self.db, habit_id)
        if not habit:
            raise HabitNotFoundException(habit_id)
        return habit

    def create_habit(self, habit_data: HabitCreate) -> Habit:
        """Create a new habit; the parent reference is validated first"""
        habit_hierarchy_validator(self.db).ensure_valid(None, habit_data.parent_habit_id)

        habit = Habit(**habit_data.model_dump())
        habit = self.habit_repo.create(self.db, habit)
        logger.info(f"Created habit {habit.id} '{habit.name}'")
        return habit

    def update_habit(self, habit_id: int, habit_update: HabitUpdate) -> Habit:
        """
        Partially update a habit.

        A parent_habit_id present in the payload (including an explicit null)
        goes through the hierarchy validator before anything is written.
        """
        habit = self.get_active_habit(habit_id)
        update_data = {
            key: value
            for key, value in habit_update.model_dump(exclude_unset=True).items()
            if value is not None or key in NULLABLE_HABIT_FIELDS
        }

        if "parent_habit_id" in update_data:
            habit_hierarchy_validator(self.db).ensure_valid(habit_id, update_data["parent_habit_id"])

        for key, value in update_data.items():
            setattr(habit, key, value)
        return self.habit_repo.update(self.db, habit)

    def delete_habit(self, habit_id: int) -> Habit:
        """Soft delete a habit; its entries are kept"""
        habit = self.get_habit(habit_id)
        habit.is_deleted = True
        habit.deleted_at = datetime.now()
        logger.info(f"Soft-deleted habit {habit_id}")
        return self.habit_repo.update(self.db, habit)

    def restore_habit(self, habit_id: int) -> Habit:
        """
        Restore a soft-deleted habit.

        The parent graph may have changed while the habit was deleted. If its
        stored parent no longer validates (parent gone, or now a child itself)
        the habit is restored as a root.

        Raises:
            HabitNotFoundException: If the habit does not exist
        """
        habit = self.get_habit(habit_id)
        if habit.is_deleted:
            check = habit_hierarchy_validator(self.db).validate(habit_id, habit.parent_habit_id)
            if not check.ok:
                logger.warning(
                    f"Restoring habit {habit_id} as a root: parent {habit.parent_habit_id} {check.reason}"
                )
                habit.parent_habit_id = None
        habit.is_deleted = False
        habit.deleted_at = None
        return self.habit_repo.update(self.db, habit)

    def log_entry(
        self,
        habit_id: int,
        entry_date: Optional[date] = None,
        status: Optional[str] = None,
        count: Optional[int] = None,
        notes: Optional[str] = None
    ) -> HabitEntry:
        """
        Create or update the entry of a habit for a date.

        entry_date defaults to the effective today. For count-based habits a
        missing status is derived from count and daily_target.

        Raises:
            HabitNotFoundException: If the habit does not exist or is deleted
            ValidationException: If the status is unknown
        """
        habit = self.get_active_habit(habit_id)

        if entry_date is None:
            settings = self.settings_repo.get(self.db)
            entry_date = self.date_service.get_effective_date(settings.day_boundary_hour)

        if status is not None:
            validate_status(status)
        elif count is not None and habit.daily_target:
            status = self._status_from_count(count, habit.daily_target)

        return self.entry_repo.upsert(self.db, habit.id, entry_date, status, count, notes)

    @staticmethod
    def _status_from_count(count: int, daily_target: int) -> str:
        """complete at target, partial below it, empty at zero"""
        if count >= daily_target:
            return HABIT_STATUS_COMPLETE
        if count > 0:
            return HABIT_STATUS_PARTIAL
        return HABIT_STATUS_EMPTY

    def get_entries(
        self,
        habit_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None
    ) -> List[HabitEntry]:
        """Entries of a habit in an inclusive date range, newest first"""
        self.get_habit(habit_id)
        return self.entry_repo.get_range(self.db, habit_id, start_date, end_date)

    def get_today(self, now: Optional[datetime] = None) -> dict:
        """Effective today and the local time window it covers"""
        settings = self.settings_repo.get(self.db)
        tz = self.date_service.get_timezone()
        if now is None:
            now = self.date_service.now(tz)
        effective_date = self.date_service.resolve_effective_date(now, settings.day_boundary_hour, tz)
        day_start, day_end = self.date_service.get_day_range(effective_date, settings.day_boundary_hour)
        return {
            "effective_date": effective_date,
            "day_boundary_hour": settings.day_boundary_hour,
            "server_time": now,
            "day_starts_at": day_start,
            "day_ends_at": day_end,
        }
