from sqlalchemy import (
    Column, Integer, String, Boolean, DateTime, Date, Text, ForeignKey, UniqueConstraint
)
from sqlalchemy.orm import relationship
from datetime import datetime

from habitarcade.database import Base
from habitarcade.constants import (
    DEFAULT_DAY_BOUNDARY_HOUR, DEFAULT_WEEK_START_DAY, DEFAULT_THEME,
    DEFAULT_TARGET_PERCENTAGE, DEFAULT_WARNING_PERCENTAGE,
    HABIT_STATUS_EMPTY, HABIT_STATUS_MISSED, TASK_STATUS_PENDING
)


class Habit(Base):
    __tablename__ = "habits"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    category_id = Column(Integer, nullable=True, index=True)
    # Self-reference; at most two levels (validated in HierarchyValidator)
    parent_habit_id = Column(Integer, ForeignKey("habits.id"), nullable=True, index=True)
    icon = Column(String(100), nullable=True)
    icon_color = Column(String(20), nullable=True)
    is_active = Column(Boolean, default=True)
    sort_order = Column(Integer, default=0)

    # Count-based habits (e.g. 3 glasses of water)
    daily_target = Column(Integer, nullable=True)

    # Completion score thresholds (percent)
    target_percentage = Column(Integer, default=DEFAULT_TARGET_PERCENTAGE)
    warning_percentage = Column(Integer, default=DEFAULT_WARNING_PERCENTAGE)

    # Soft delete
    is_deleted = Column(Boolean, default=False)
    deleted_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    entries = relationship(
        "HabitEntry",
        back_populates="habit",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class HabitEntry(Base):
    __tablename__ = "habit_entries"
    __table_args__ = (
        UniqueConstraint("habit_id", "date", name="uq_habit_entries_habit_date"),
    )

    id = Column(Integer, primary_key=True, index=True)
    habit_id = Column(Integer, ForeignKey("habits.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    status = Column(String(20), default=HABIT_STATUS_EMPTY, nullable=False)
    count = Column(Integer, default=0)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    habit = relationship("Habit", back_populates="entries")


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    planned_date = Column(Date, nullable=True)
    status = Column(String(20), default=TASK_STATUS_PENDING)  # pending, complete
    priority = Column(Integer, nullable=True)
    parent_task_id = Column(Integer, ForeignKey("tasks.id"), nullable=True, index=True)
    sort_order = Column(Integer, default=0)
    completed_at = Column(DateTime, nullable=True)
    is_deleted = Column(Boolean, default=False)
    deleted_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)


class Settings(Base):
    __tablename__ = "settings"

    id = Column(Integer, primary_key=True, index=True)

    # Day boundary: instants before this local hour belong to the previous date
    day_boundary_hour = Column(Integer, default=DEFAULT_DAY_BOUNDARY_HOUR)

    week_start_day = Column(Integer, default=DEFAULT_WEEK_START_DAY)  # 0 = Sunday
    theme = Column(String(10), default=DEFAULT_THEME)  # light, dark, auto

    # Scheduled auto-fill of missed days
    auto_fill_enabled = Column(Boolean, default=False)
    auto_fill_status = Column(String(20), default=HABIT_STATUS_MISSED)

    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)
