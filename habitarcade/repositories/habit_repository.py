"""
Habit repository - Data access layer for Habit model.
"""
from typing import List, Optional, Iterable
from sqlalchemy.orm import Session
from sqlalchemy import and_

from habitarcade.models import Habit


class HabitRepository:
    """Repository for Habit data access"""

    @staticmethod
    def get_by_id(db: Session, habit_id: int) -> Optional[Habit]:
        """Get habit by ID (deleted ones included)"""
        return db.query(Habit).filter(Habit.id == habit_id).first()

    @staticmethod
    def get_active_by_id(db: Session, habit_id: int) -> Optional[Habit]:
        """Get a non-deleted habit by ID"""
        return db.query(Habit).filter(
            and_(Habit.id == habit_id, Habit.is_deleted == False)
        ).first()

    @staticmethod
    def get_all(
        db: Session,
        include_deleted: bool = False,
        category_id: Optional[int] = None
    ) -> List[Habit]:
        """Get habits ordered by sort_order"""
        query = db.query(Habit)
        if not include_deleted:
            query = query.filter(Habit.is_deleted == False)
        if category_id is not None:
            query = query.filter(Habit.category_id == category_id)
        return query.order_by(Habit.sort_order, Habit.id).all()

    @staticmethod
    def get_active(db: Session, habit_ids: Optional[Iterable[int]] = None) -> List[Habit]:
        """Get non-deleted, active habits, optionally limited to habit_ids"""
        query = db.query(Habit).filter(
            and_(Habit.is_deleted == False, Habit.is_active == True)
        )
        if habit_ids is not None:
            query = query.filter(Habit.id.in_(list(habit_ids)))
        return query.order_by(Habit.id).all()

    @staticmethod
    def get_children(db: Session, parent_habit_id: int) -> List[Habit]:
        """Get non-deleted children of a habit"""
        return db.query(Habit).filter(
            and_(
                Habit.parent_habit_id == parent_habit_id,
                Habit.is_deleted == False
            )
        ).order_by(Habit.sort_order, Habit.id).all()

    @staticmethod
    def has_children(db: Session, habit_id: int) -> bool:
        """Check whether any non-deleted habit points at habit_id"""
        return db.query(Habit.id).filter(
            and_(
                Habit.parent_habit_id == habit_id,
                Habit.is_deleted == False
            )
        ).first() is not None

    @staticmethod
    def get_parent_id(db: Session, habit_id: int) -> Optional[int]:
        """Get the parent_habit_id of a habit (None if root or missing)"""
        row = db.query(Habit.parent_habit_id).filter(Habit.id == habit_id).first()
        return row[0] if row else None

    @staticmethod
    def create(db: Session, habit: Habit) -> Habit:
        """Create a new habit"""
        db.add(habit)
        db.commit()
        db.refresh(habit)
        return habit

    @staticmethod
    def update(db: Session, habit: Habit) -> Habit:
        """Update existing habit"""
        db.commit()
        db.refresh(habit)
        return habit
