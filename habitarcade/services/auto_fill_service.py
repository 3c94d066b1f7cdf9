"""
Auto-fill service.
Backfills past days that have no habit entry with a sentinel status
("missed" by default) without touching entries that already exist.

Candidates are the dates in [start, today), where today is the effective
date under the day boundary hour. Today itself is never filled.

Runs are idempotent: a second run over the same window finds every date
present and writes nothing. Work is committed per habit, so a failure for
one habit keeps what was written for the others and the whole run can
simply be retried.

Known window: a user write landing between the existence check and the
sentinel upsert for the same (habit, date) is overwritten by the sentinel.
"""
import logging
from datetime import date, datetime, timedelta
from typing import Callable, Iterable, List, Optional, Sequence
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from habitarcade.models import Habit, HabitEntry
from habitarcade.repositories.habit_repository import HabitRepository
from habitarcade.repositories.habit_entry_repository import HabitEntryRepository
from habitarcade.repositories.settings_repository import SettingsRepository
from habitarcade.services.date_service import DateService
from habitarcade.services.habit_service import validate_status
from habitarcade.constants import (
    AUTO_FILL_DEFAULT_DAYS, AUTO_FILL_BATCH_SIZE, AUTO_FILL_ENTRIES_PREVIEW,
    HABIT_STATUS_MISSED
)
from habitarcade.exceptions import HabitNotFoundException, ReconciliationInvariantError

logger = logging.getLogger("habitarcade.auto_fill")


class AutoFillResult:
    """
    Outcome of one auto-fill run.

    Only the first max_entries written entries are kept (all when None);
    filled always counts every write.
    """

    def __init__(self, today: date, max_entries: Optional[int] = None):
        self.today = today
        self.max_entries = max_entries
        self.filled = 0
        self.entries: List[HabitEntry] = []
        self.habits_processed = 0
        self.failed_habit_ids: List[int] = []

    def record(self, written: List[HabitEntry]) -> None:
        self.filled += len(written)
        if self.max_entries is None:
            self.entries.extend(written)
        else:
            self.entries.extend(written[:max(self.max_entries - len(self.entries), 0)])


class AutoFillService:
    """Service for reconciling missed habit days"""

    def __init__(self, db: Session, batch_size: int = AUTO_FILL_BATCH_SIZE):
        self.db = db
        self.batch_size = max(1, batch_size)
        self.habit_repo = HabitRepository()
        self.entry_repo = HabitEntryRepository()
        self.settings_repo = SettingsRepository()
        self.date_service = DateService()

    def default_window_start(self, today: date) -> date:
        """Start of the default look-back window"""
        return today - timedelta(days=AUTO_FILL_DEFAULT_DAYS)

    def default_start_for(self, habit: Habit, today: date, day_boundary_hour: int) -> date:
        """
        Later of the habit's effective creation date and the default window start.

        Habits are never backfilled before they existed.
        """
        window_start = self.default_window_start(today)
        if habit.created_at is None:
            return window_start

        created = self.date_service.resolve_effective_date(
            habit.created_at, day_boundary_hour, self.date_service.get_timezone()
        )
        return max(created, window_start)

    def fill(
        self,
        habits: Sequence[Habit],
        today: date,
        start_for: Callable[[Habit], date],
        status: str = HABIT_STATUS_MISSED,
        max_entries: Optional[int] = None
    ) -> AutoFillResult:
        """
        Write the sentinel status for every past date without an entry.

        Args:
            habits: Habits to reconcile
            today: Effective today (exclusive end of every window)
            start_for: Inclusive window start for a habit
            status: Sentinel status to write
            max_entries: Keep at most this many written entries

        Returns:
            AutoFillResult with the filled count, written entries and the
            ids of habits whose writes failed
        """
        validate_status(status)
        result = AutoFillResult(today, max_entries)

        for batch_start in range(0, len(habits), self.batch_size):
            batch = habits[batch_start:batch_start + self.batch_size]
            batch_filled = result.filled
            for habit in batch:
                self._fill_habit(habit, start_for(habit), today, status, result)
            logger.info(
                f"Auto-fill batch {batch_start // self.batch_size + 1}: "
                f"{len(batch)} habits, {result.filled - batch_filled} entries"
            )

        result.habits_processed = len(habits)
        return result

    def _fill_habit(
        self,
        habit: Habit,
        start: date,
        today: date,
        status: str,
        result: AutoFillResult
    ) -> None:
        """Reconcile one habit and commit; a database error skips the habit"""
        habit_id = habit.id
        candidates = self.date_service.date_range(start, today)
        if not candidates:
            return

        try:
            present = self.entry_repo.existing_dates(self.db, habit_id, candidates)
            missing = [d for d in candidates if d not in present]
            self._check_window(habit_id, missing, present, start, today)

            written = [
                self.entry_repo.upsert(self.db, habit_id, d, status=status, commit=False)
                for d in missing
            ]
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            result.failed_habit_ids.append(habit_id)
            logger.error(f"Auto-fill failed for habit {habit_id}, skipped: {e}")
            return

        result.record(written)

    @staticmethod
    def _check_window(
        habit_id: int,
        missing: Iterable[date],
        present: set,
        start: date,
        today: date
    ) -> None:
        """Refuse to write outside [start, today) or over an existing entry"""
        for d in missing:
            if not start <= d < today:
                raise ReconciliationInvariantError(
                    f"Habit {habit_id}: {d} is outside the window [{start}, {today})"
                )
            if d in present:
                raise ReconciliationInvariantError(
                    f"Habit {habit_id}: {d} already has an entry"
                )

    def fill_habit(
        self,
        habit_id: int,
        start_date: Optional[date] = None,
        status: str = HABIT_STATUS_MISSED,
        now: Optional[datetime] = None
    ) -> dict:
        """
        Auto-fill missed days for a single habit.

        Args:
            habit_id: Habit to reconcile
            start_date: Inclusive start; defaults to the later of the
                habit's creation date and 30 days before today
            status: Sentinel status
            now: Override for the current moment

        Raises:
            HabitNotFoundException: If the habit does not exist or is deleted
            ValidationException: If the status is unknown
        """
        validate_status(status)
        habit = self.habit_repo.get_active_by_id(self.db, habit_id)
        if not habit:
            raise HabitNotFoundException(habit_id)

        day_boundary_hour = self.settings_repo.get(self.db).day_boundary_hour
        today = self.date_service.get_effective_date(day_boundary_hour, now)
        start = start_date or self.default_start_for(habit, today, day_boundary_hour)

        result = self.fill([habit], today, lambda _: start, status)
        logger.info(f"Auto-filled {result.filled} entries for habit {habit_id} [{start}, {today})")

        return {
            "message": f"Auto-filled {result.filled} entries with status '{status}'",
            "filled": result.filled,
            "date_range": {"start": start, "end": today},
            "entries": result.entries,
            "failed_habit_ids": result.failed_habit_ids,
        }

    def fill_all(
        self,
        start_date: Optional[date] = None,
        habit_ids: Optional[List[int]] = None,
        status: str = HABIT_STATUS_MISSED,
        now: Optional[datetime] = None
    ) -> dict:
        """
        Auto-fill missed days for all active habits (or the given habit_ids).

        With start_date every habit uses it as-is. Without it each habit uses
        the same rule as fill_habit; the reported range starts at the default
        window start.
        """
        validate_status(status)
        day_boundary_hour = self.settings_repo.get(self.db).day_boundary_hour
        today = self.date_service.get_effective_date(day_boundary_hour, now)
        habits = self.habit_repo.get_active(self.db, habit_ids or None)

        range_start = start_date or self.default_window_start(today)

        def start_for(habit: Habit) -> date:
            if start_date is not None:
                return start_date
            return self.default_start_for(habit, today, day_boundary_hour)

        result = self.fill(habits, today, start_for, status, AUTO_FILL_ENTRIES_PREVIEW)
        if result.failed_habit_ids:
            logger.warning(
                f"Auto-fill finished with {len(result.failed_habit_ids)} failed habits: "
                f"{result.failed_habit_ids}"
            )
        logger.info(
            f"Auto-filled {result.filled} entries across {result.habits_processed} habits "
            f"[{range_start}, {today})"
        )

        message = (
            f"Auto-filled {result.filled} entries with status '{status}'"
            if habits else "No habits to process"
        )
        return {
            "message": message,
            "filled": result.filled,
            "date_range": {"start": range_start, "end": today},
            "habits_processed": result.habits_processed,
            "entries": [
                {"habit_id": entry.habit_id, "date": entry.date}
                for entry in result.entries
            ],
            "failed_habit_ids": result.failed_habit_ids,
        }
