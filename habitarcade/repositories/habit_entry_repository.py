"""
Habit entry repository - Data access layer for HabitEntry model.
Enforces one entry per (habit_id, date) through an atomic upsert.
"""
from datetime import date, datetime
from typing import Iterable, List, Optional, Set
from sqlalchemy.orm import Session
from sqlalchemy import and_
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from habitarcade.models import HabitEntry
from habitarcade.constants import HABIT_STATUS_EMPTY
from habitarcade.exceptions import DatabaseException

_UPSERT_INSERTS = {
    "sqlite": sqlite_insert,
    "postgresql": postgresql_insert,
}


class HabitEntryRepository:
    """Repository for HabitEntry data access"""

    @staticmethod
    def get(db: Session, habit_id: int, entry_date: date) -> Optional[HabitEntry]:
        """Get the entry for a habit on a date"""
        return db.query(HabitEntry).filter(
            and_(HabitEntry.habit_id == habit_id, HabitEntry.date == entry_date)
        ).first()

    @staticmethod
    def get_range(
        db: Session,
        habit_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None
    ) -> List[HabitEntry]:
        """Get entries for a habit within an inclusive date range, newest first"""
        query = db.query(HabitEntry).filter(HabitEntry.habit_id == habit_id)
        if start_date is not None:
            query = query.filter(HabitEntry.date >= start_date)
        if end_date is not None:
            query = query.filter(HabitEntry.date <= end_date)
        return query.order_by(HabitEntry.date.desc()).all()

    @staticmethod
    def get_for_habits_on_date(db: Session, habit_ids: Iterable[int], entry_date: date) -> List[HabitEntry]:
        """Get entries of several habits for a single date"""
        habit_ids = list(habit_ids)
        if not habit_ids:
            return []
        return db.query(HabitEntry).filter(
            and_(HabitEntry.habit_id.in_(habit_ids), HabitEntry.date == entry_date)
        ).all()

    @staticmethod
    def get_for_habits_in_range(
        db: Session,
        habit_ids: Iterable[int],
        start_date: date,
        end_date: date
    ) -> List[HabitEntry]:
        """Get entries of several habits within an inclusive date range"""
        habit_ids = list(habit_ids)
        if not habit_ids:
            return []
        return db.query(HabitEntry).filter(
            and_(
                HabitEntry.habit_id.in_(habit_ids),
                HabitEntry.date >= start_date,
                HabitEntry.date <= end_date
            )
        ).all()

    @staticmethod
    def existing_dates(db: Session, habit_id: int, dates: Iterable[date]) -> Set[date]:
        """
        Return the subset of dates that already have an entry for habit_id.

        Any status counts, including "empty": an existing row is never a gap.
        """
        candidates = set(dates)
        if not candidates:
            return set()

        rows = db.query(HabitEntry.date).filter(
            and_(
                HabitEntry.habit_id == habit_id,
                HabitEntry.date >= min(candidates),
                HabitEntry.date <= max(candidates)
            )
        ).all()
        return {row[0] for row in rows} & candidates

    @staticmethod
    def upsert(
        db: Session,
        habit_id: int,
        entry_date: date,
        status: Optional[str] = None,
        count: Optional[int] = None,
        notes: Optional[str] = None,
        commit: bool = True
    ) -> HabitEntry:
        """
        Insert or update the entry for (habit_id, entry_date) in one statement.

        On conflict only the supplied fields and updated_at change. A new
        entry gets status "empty" when no status is supplied.

        Args:
            db: Database session
            habit_id: Habit the entry belongs to
            entry_date: Effective date of the entry
            status: New status (None = leave unchanged)
            count: New count (None = leave unchanged)
            notes: New notes (None = leave unchanged)
            commit: Commit the session; False leaves it to the caller

        Returns:
            The stored entry

        Raises:
            DatabaseException: If the database has no native upsert support
        """
        dialect = db.get_bind().dialect.name
        insert_for_dialect = _UPSERT_INSERTS.get(dialect)
        if insert_for_dialect is None:
            raise DatabaseException("upsert", f"unsupported database dialect '{dialect}'")

        now = datetime.now()
        changes = {"updated_at": now}
        if status is not None:
            changes["status"] = status
        if count is not None:
            changes["count"] = count
        if notes is not None:
            changes["notes"] = notes

        stmt = insert_for_dialect(HabitEntry).values(
            habit_id=habit_id,
            date=entry_date,
            status=status or HABIT_STATUS_EMPTY,
            count=count if count is not None else 0,
            notes=notes,
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["habit_id", "date"],
            set_=changes,
        )
        db.execute(stmt)

        if commit:
            db.commit()

        return db.query(HabitEntry).populate_existing().filter(
            and_(HabitEntry.habit_id == habit_id, HabitEntry.date == entry_date)
        ).one()
