"""
Parent/child rollup service.
Derives a parent habit's daily status from its children's entries.
The derived status is computed on read and never stored.
"""
from datetime import date, timedelta
from typing import Dict, List, Optional
from sqlalchemy.orm import Session

from habitarcade.repositories.habit_repository import HabitRepository
from habitarcade.repositories.habit_entry_repository import HabitEntryRepository
from habitarcade.services.date_service import DateService
from habitarcade.constants import (
    HABIT_STATUS_EMPTY, HABIT_STATUS_COMPLETE, HABIT_STATUS_MISSED, HABIT_STATUS_PARTIAL
)
from habitarcade.exceptions import HabitNotFoundException


def derive_status(child_statuses: List[Optional[str]]) -> str:
    """
    Combine child statuses for one date (None = child has no entry).

    - nobody logged: empty
    - every child complete: complete
    - some child missed and nobody pending: missed
    - anything else: partial
    """
    pending = [s for s in child_statuses if s is None or s == HABIT_STATUS_EMPTY]
    if len(pending) == len(child_statuses):
        return HABIT_STATUS_EMPTY
    if all(s == HABIT_STATUS_COMPLETE for s in child_statuses):
        return HABIT_STATUS_COMPLETE
    if HABIT_STATUS_MISSED in child_statuses and not pending:
        return HABIT_STATUS_MISSED
    return HABIT_STATUS_PARTIAL


class RollupService:
    """Service for derived parent habit statuses"""

    def __init__(self, db: Session):
        self.db = db
        self.habit_repo = HabitRepository()
        self.entry_repo = HabitEntryRepository()
        self.date_service = DateService()

    def _child_ids(self, parent_habit_id: int) -> List[int]:
        if not self.habit_repo.get_active_by_id(self.db, parent_habit_id):
            raise HabitNotFoundException(parent_habit_id)
        return [child.id for child in self.habit_repo.get_children(self.db, parent_habit_id)]

    def rollup(self, parent_habit_id: int, target_date: date) -> str:
        """Derived status of a parent habit on a date"""
        child_ids = self._child_ids(parent_habit_id)
        entries = self.entry_repo.get_for_habits_on_date(self.db, child_ids, target_date)
        by_child = {entry.habit_id: entry.status for entry in entries}
        return derive_status([by_child.get(child_id) for child_id in child_ids])

    def rollup_range(self, parent_habit_id: int, start_date: date, end_date: date) -> Dict[date, str]:
        """Derived statuses for every date in [start_date, end_date]"""
        child_ids = self._child_ids(parent_habit_id)
        entries = self.entry_repo.get_for_habits_in_range(self.db, child_ids, start_date, end_date)

        statuses = {}
        for entry in entries:
            statuses[(entry.habit_id, entry.date)] = entry.status

        return {
            day: derive_status([statuses.get((child_id, day)) for child_id in child_ids])
            for day in self.date_service.date_range(start_date, end_date + timedelta(days=1))
        }
