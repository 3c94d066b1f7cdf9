"""
Task repository - Data access layer for Task model.
"""
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import and_

from habitarcade.models import Task


class TaskRepository:
    """Repository for Task data access"""

    @staticmethod
    def get_by_id(db: Session, task_id: int) -> Optional[Task]:
        """Get task by ID (deleted ones included)"""
        return db.query(Task).filter(Task.id == task_id).first()

    @staticmethod
    def get_active_by_id(db: Session, task_id: int) -> Optional[Task]:
        """Get a non-deleted task by ID"""
        return db.query(Task).filter(
            and_(Task.id == task_id, Task.is_deleted == False)
        ).first()

    @staticmethod
    def get_all(
        db: Session,
        include_deleted: bool = False,
        parent_task_id: Optional[int] = None,
        skip: int = 0,
        limit: int = 100
    ) -> List[Task]:
        """Get tasks with pagination"""
        query = db.query(Task)
        if not include_deleted:
            query = query.filter(Task.is_deleted == False)
        if parent_task_id is not None:
            query = query.filter(Task.parent_task_id == parent_task_id)
        return query.order_by(Task.sort_order, Task.id).offset(skip).limit(limit).all()

    @staticmethod
    def get_parent_id(db: Session, task_id: int) -> Optional[int]:
        """Get the parent_task_id of a task (None if root or missing)"""
        row = db.query(Task.parent_task_id).filter(Task.id == task_id).first()
        return row[0] if row else None

    @staticmethod
    def has_children(db: Session, task_id: int) -> bool:
        """Check whether any non-deleted task points at task_id"""
        return db.query(Task.id).filter(
            and_(Task.parent_task_id == task_id, Task.is_deleted == False)
        ).first() is not None

    @staticmethod
    def create(db: Session, task: Task) -> Task:
        """Create a new task"""
        db.add(task)
        db.commit()
        db.refresh(task)
        return task

    @staticmethod
    def update(db: Session, task: Task) -> Task:
        """Update existing task"""
        db.commit()
        db.refresh(task)
        return task
