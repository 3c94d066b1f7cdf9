"""
Task management service.
Every write that sets parent_task_id is validated before the row is touched.
"""
from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session

from habitarcade.models import Task
from habitarcade.schemas import TaskCreate, TaskUpdate
from habitarcade.repositories.task_repository import TaskRepository
from habitarcade.services.hierarchy_service import task_hierarchy_validator
from habitarcade.constants import TASK_STATUS_COMPLETE
from habitarcade.exceptions import TaskNotFoundException

# Fields a client may explicitly clear with null
NULLABLE_TASK_FIELDS = {"description", "planned_date", "priority", "parent_task_id"}


class TaskService:
    """Service for task management"""

    def __init__(self, db: Session):
        self.db = db
        self.task_repo = TaskRepository()

    def get_task(self, task_id: int) -> Task:
        """Get task by ID"""
        task = self.task_repo.get_by_id(self.db, task_id)
        if not task:
            raise TaskNotFoundException(task_id)
        return task

    def get_tasks(
        self,
        include_deleted: bool = False,
        parent_task_id: Optional[int] = None,
        skip: int = 0,
        limit: int = 100
    ) -> List[Task]:
        """Get tasks with pagination"""
        return self.task_repo.get_all(self.db, include_deleted, parent_task_id, skip, limit)

    def create_task(self, task_data: TaskCreate) -> Task:
        """Create a new task"""
        task_hierarchy_validator(self.db).ensure_valid(None, task_data.parent_task_id)

        task = Task(**task_data.model_dump())
        if task.status == TASK_STATUS_COMPLETE:
            task.completed_at = datetime.now()
        return self.task_repo.create(self.db, task)

    def update_task(self, task_id: int, task_update: TaskUpdate) -> Task:
        """
        Partially update a task.

        Raises:
            TaskNotFoundException: If the task does not exist
            ParentNotFoundException: If the new parent does not exist
            HierarchyValidationException: For self, cyclic or nested parents
        """
        task = self.get_task(task_id)
        update_data = {
            key: value
            for key, value in task_update.model_dump(exclude_unset=True).items()
            if value is not None or key in NULLABLE_TASK_FIELDS
        }

        if "parent_task_id" in update_data:
            task_hierarchy_validator(self.db).ensure_valid(task_id, update_data["parent_task_id"])

        if "status" in update_data:
            task.completed_at = datetime.now() if update_data["status"] == TASK_STATUS_COMPLETE else None

        for key, value in update_data.items():
            setattr(task, key, value)
        return self.task_repo.update(self.db, task)

    def delete_task(self, task_id: int) -> Task:
        """Soft delete a task"""
        task = self.get_task(task_id)
        task.is_deleted = True
        task.deleted_at = datetime.now()
        return self.task_repo.update(self.db, task)
