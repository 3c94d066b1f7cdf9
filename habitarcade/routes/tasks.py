"""
Tasks HTTP routes.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional

from habitarcade.database import get_db
from habitarcade.schemas import TaskCreate, TaskUpdate, TaskResponse
from habitarcade.services.task_service import TaskService
from habitarcade.routes.errors import CLIENT_ERRORS, to_http_exception

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


@router.get("", response_model=List[TaskResponse])
def get_tasks(
    include_deleted: bool = False,
    parent_task_id: Optional[int] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db)
):
    """Get tasks, optionally the children of one parent"""
    return TaskService(db).get_tasks(include_deleted, parent_task_id, skip, limit)


@router.get("/{task_id}", response_model=TaskResponse)
def get_task(task_id: int, db: Session = Depends(get_db)):
    """Get a specific task"""
    try:
        return TaskService(db).get_task(task_id)
    except CLIENT_ERRORS as e:
        raise to_http_exception(e)


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(task: TaskCreate, db: Session = Depends(get_db)):
    """Create a new task"""
    try:
        return TaskService(db).create_task(task)
    except CLIENT_ERRORS as e:
        raise to_http_exception(e)


@router.put("/{task_id}", response_model=TaskResponse)
def update_task(task_id: int, task_update: TaskUpdate, db: Session = Depends(get_db)):
    """Update a task"""
    try:
        return TaskService(db).update_task(task_id, task_update)
    except CLIENT_ERRORS as e:
        raise to_http_exception(e)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(task_id: int, db: Session = Depends(get_db)):
    """Soft delete a task"""
    try:
        TaskService(db).delete_task(task_id)
    except CLIENT_ERRORS as e:
        raise to_http_exception(e)
