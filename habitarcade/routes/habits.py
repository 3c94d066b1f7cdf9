"""
Habits HTTP routes.
"""
from fastapi import APIRouter, Depends, Query, HTTPException, status
from sqlalchemy.orm import Session
from datetime import date
from typing import List, Optional

from habitarcade.database import get_db
from habitarcade.schemas import (
    HabitCreate, HabitUpdate, HabitResponse,
    HabitEntryUpsert, HabitEntryResponse, EffectiveTodayResponse,
    AutoFillRequest, AutoFillResponse, HabitAutoFillRequest, HabitAutoFillResponse,
    RollupResponse, HabitScoreResponse
)
from habitarcade.services.habit_service import HabitService
from habitarcade.services.auto_fill_service import AutoFillService
from habitarcade.services.rollup_service import RollupService
from habitarcade.services.score_service import ScoreService
from habitarcade.routes.errors import CLIENT_ERRORS, to_http_exception

router = APIRouter(prefix="/api/habits", tags=["habits"])


@router.get("", response_model=List[HabitResponse])
def get_habits(
    include_deleted: bool = False,
    category_id: Optional[int] = None,
    db: Session = Depends(get_db)
):
    """List habits (optionally by category)"""
    return HabitService(db).get_habits(include_deleted, category_id)


@router.get("/today", response_model=EffectiveTodayResponse)
def get_today(db: Session = Depends(get_db)):
    """Get the effective "today" based on the day boundary hour"""
    return HabitService(db).get_today()


@router.post("/auto-fill-missed", response_model=AutoFillResponse)
def auto_fill_missed(request: AutoFillRequest, db: Session = Depends(get_db)):
    """Fill past days without an entry for all active habits (or habit_ids)"""
    try:
        return AutoFillService(db).fill_all(request.start_date, request.habit_ids, request.status)
    except CLIENT_ERRORS as e:
        raise to_http_exception(e)


@router.get("/{habit_id}", response_model=HabitResponse)
def get_habit(habit_id: int, db: Session = Depends(get_db)):
    """Get a specific habit"""
    try:
        return HabitService(db).get_habit(habit_id)
    except CLIENT_ERRORS as e:
        raise to_http_exception(e)


@router.post("", response_model=HabitResponse, status_code=status.HTTP_201_CREATED)
def create_habit(habit: HabitCreate, db: Session = Depends(get_db)):
    """Create a new habit"""
    try:
        return HabitService(db).create_habit(habit)
    except CLIENT_ERRORS as e:
        raise to_http_exception(e)


@router.put("/{habit_id}", response_model=HabitResponse)
def update_habit(habit_id: int, habit_update: HabitUpdate, db: Session = Depends(get_db)):
    """Update a habit"""
    try:
        return HabitService(db).update_habit(habit_id, habit_update)
    except CLIENT_ERRORS as e:
        raise to_http_exception(e)


@router.delete("/{habit_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_habit(habit_id: int, db: Session = Depends(get_db)):
    """Soft delete a habit"""
    try:
        HabitService(db).delete_habit(habit_id)
    except CLIENT_ERRORS as e:
        raise to_http_exception(e)


@router.patch("/{habit_id}/restore", response_model=HabitResponse)
def restore_habit(habit_id: int, db: Session = Depends(get_db)):
    """Restore a soft-deleted habit"""
    try:
        return HabitService(db).restore_habit(habit_id)
    except CLIENT_ERRORS as e:
        raise to_http_exception(e)


@router.post("/{habit_id}/entries", response_model=HabitEntryResponse, status_code=status.HTTP_201_CREATED)
def upsert_entry(habit_id: int, entry: HabitEntryUpsert, db: Session = Depends(get_db)):
    """Create or update the habit entry for a date"""
    try:
        return HabitService(db).log_entry(habit_id, entry.date, entry.status, entry.count, entry.notes)
    except CLIENT_ERRORS as e:
        raise to_http_exception(e)


@router.get("/{habit_id}/entries", response_model=List[HabitEntryResponse])
def get_entries(
    habit_id: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db)
):
    """Get entries for an inclusive date range"""
    try:
        return HabitService(db).get_entries(habit_id, start_date, end_date)
    except CLIENT_ERRORS as e:
        raise to_http_exception(e)


@router.post("/{habit_id}/auto-fill-missed", response_model=HabitAutoFillResponse)
def auto_fill_missed_for_habit(
    habit_id: int,
    request: HabitAutoFillRequest,
    db: Session = Depends(get_db)
):
    """Fill past days without an entry for a single habit"""
    try:
        return AutoFillService(db).fill_habit(habit_id, request.start_date, request.status)
    except CLIENT_ERRORS as e:
        raise to_http_exception(e)


@router.get("/{habit_id}/rollup", response_model=RollupResponse)
def get_rollup(
    habit_id: int,
    target_date: Optional[date] = Query(None, alias="date"),
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db)
):
    """Derived status of a parent habit for a date or an inclusive range"""
    service = RollupService(db)
    try:
        if target_date is not None:
            return {"habit_id": habit_id, "statuses": {target_date: service.rollup(habit_id, target_date)}}
        if start_date is None or end_date is None:
            raise HTTPException(status_code=400, detail="Provide date, or start_date and end_date")
        if start_date > end_date:
            raise HTTPException(status_code=400, detail="start_date must not be after end_date")
        return {"habit_id": habit_id, "statuses": service.rollup_range(habit_id, start_date, end_date)}
    except CLIENT_ERRORS as e:
        raise to_http_exception(e)


@router.get("/{habit_id}/score", response_model=HabitScoreResponse)
def get_score(
    habit_id: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db)
):
    """Completion score over a window (default: last 30 days)"""
    try:
        return ScoreService(db).score(habit_id, start_date, end_date)
    except CLIENT_ERRORS as e:
        raise to_http_exception(e)
