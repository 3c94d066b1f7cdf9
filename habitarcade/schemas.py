from pydantic import BaseModel, Field
from datetime import datetime, date
from datetime import date as DateType
from typing import Dict, List, Optional

from habitarcade.constants import (
    DEFAULT_DAY_BOUNDARY_HOUR, DEFAULT_WEEK_START_DAY, DEFAULT_THEME,
    DEFAULT_TARGET_PERCENTAGE, DEFAULT_WARNING_PERCENTAGE, HABIT_STATUS_MISSED
)

STATUS_PATTERN = r"^[a-z_]{1,20}$"


# Habit schemas
class HabitBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    category_id: Optional[int] = None
    parent_habit_id: Optional[int] = None
    icon: Optional[str] = Field(None, max_length=100)
    icon_color: Optional[str] = Field(None, max_length=20)
    is_active: bool = True
    sort_order: int = 0
    daily_target: Optional[int] = Field(None, ge=1, le=100)  # Count-based habits
    target_percentage: int = Field(default=DEFAULT_TARGET_PERCENTAGE, ge=0, le=100)
    warning_percentage: int = Field(default=DEFAULT_WARNING_PERCENTAGE, ge=0, le=100)


class HabitCreate(HabitBase):
    pass


class HabitUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    category_id: Optional[int] = None
    parent_habit_id: Optional[int] = None
    icon: Optional[str] = Field(None, max_length=100)
    icon_color: Optional[str] = Field(None, max_length=20)
    is_active: Optional[bool] = None
    sort_order: Optional[int] = None
    daily_target: Optional[int] = Field(None, ge=1, le=100)
    target_percentage: Optional[int] = Field(None, ge=0, le=100)
    warning_percentage: Optional[int] = Field(None, ge=0, le=100)


class HabitResponse(HabitBase):
    id: int
    is_deleted: bool = False
    deleted_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# Habit entry schemas
class HabitEntryUpsert(BaseModel):
    date: Optional[DateType] = None  # Defaults to the effective today
    status: Optional[str] = Field(None, pattern=STATUS_PATTERN)
    count: Optional[int] = Field(None, ge=0)
    notes: Optional[str] = None


class HabitEntryResponse(BaseModel):
    id: int
    habit_id: int
    date: date
    status: str
    count: int = 0
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class EffectiveTodayResponse(BaseModel):
    effective_date: date
    day_boundary_hour: int
    server_time: datetime
    day_starts_at: datetime
    day_ends_at: datetime


# Auto-fill schemas
class AutoFillRequest(BaseModel):
    start_date: Optional[date] = None
    habit_ids: Optional[List[int]] = None
    status: str = Field(default=HABIT_STATUS_MISSED, pattern=STATUS_PATTERN)


class HabitAutoFillRequest(BaseModel):
    start_date: Optional[date] = None
    status: str = Field(default=HABIT_STATUS_MISSED, pattern=STATUS_PATTERN)


class DateRange(BaseModel):
    start: date
    end: date  # Exclusive: the effective today


class FilledEntryRef(BaseModel):
    habit_id: int
    date: date


class AutoFillResponse(BaseModel):
    message: str
    filled: int
    date_range: DateRange
    habits_processed: int
    entries: List[FilledEntryRef] = []
    failed_habit_ids: List[int] = []


class HabitAutoFillResponse(BaseModel):
    message: str
    filled: int
    date_range: DateRange
    entries: List[HabitEntryResponse] = []
    failed_habit_ids: List[int] = []


# Rollup and score schemas
class RollupResponse(BaseModel):
    habit_id: int
    statuses: Dict[date, str]


class HabitScoreResponse(BaseModel):
    habit_id: int
    start_date: date
    end_date: date
    percentage: int
    level: str
    completed: int
    partial: int
    counted_days: int
    target_percentage: int
    warning_percentage: int


# Task schemas
class TaskBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    planned_date: Optional[date] = None
    status: str = Field(default="pending", pattern="^(pending|complete)$")
    priority: Optional[int] = Field(None, ge=0, le=10)
    parent_task_id: Optional[int] = None
    sort_order: int = 0


class TaskCreate(TaskBase):
    pass


class TaskUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    planned_date: Optional[date] = None
    status: Optional[str] = Field(None, pattern="^(pending|complete)$")
    priority: Optional[int] = Field(None, ge=0, le=10)
    parent_task_id: Optional[int] = None
    sort_order: Optional[int] = None


class TaskResponse(TaskBase):
    id: int
    completed_at: Optional[datetime] = None
    is_deleted: bool = False
    deleted_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# Settings schemas
class SettingsBase(BaseModel):
    # Day boundary settings
    day_boundary_hour: int = Field(default=DEFAULT_DAY_BOUNDARY_HOUR, ge=0, le=23)

    week_start_day: int = Field(default=DEFAULT_WEEK_START_DAY, ge=0, le=6)
    theme: str = Field(default=DEFAULT_THEME, pattern="^(light|dark|auto)$")

    # Scheduled auto-fill
    auto_fill_enabled: bool = Field(default=False)
    auto_fill_status: str = Field(default=HABIT_STATUS_MISSED, pattern=STATUS_PATTERN)


class SettingsUpdate(BaseModel):
    day_boundary_hour: Optional[int] = Field(None, ge=0, le=23)
    week_start_day: Optional[int] = Field(None, ge=0, le=6)
    theme: Optional[str] = Field(None, pattern="^(light|dark|auto)$")
    auto_fill_enabled: Optional[bool] = None
    auto_fill_status: Optional[str] = Field(None, pattern=STATUS_PATTERN)


class SettingsResponse(SettingsBase):
    id: int
    updated_at: datetime
    effective_date: Optional[date] = None  # Current effective date based on day_boundary_hour

    class Config:
        from_attributes = True
