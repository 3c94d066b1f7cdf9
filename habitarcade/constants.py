"""
Application constants and environment-driven configuration.
"""
import os

# Environment configuration
DATABASE_URL = os.getenv("HABITARCADE_DATABASE_URL", "sqlite:///./habitarcade.db")

DEFAULT_LOG_DIRECTORY_PROD = "/var/log/habitarcade"
DEFAULT_LOG_DIRECTORY_DEV = "./logs"
LOG_DIR = os.getenv("HABITARCADE_LOG_DIR", DEFAULT_LOG_DIRECTORY_PROD)
LOG_FILE = os.getenv("HABITARCADE_LOG_FILE", "app.log")

# IANA timezone name used to localize "now" (empty = server local time)
TIMEZONE = os.getenv("HABITARCADE_TIMEZONE", "")

CORS_ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "HABITARCADE_CORS_ORIGINS",
        "http://localhost:5173,http://localhost:3000"
    ).split(",")
    if origin.strip()
]

SCHEDULER_ENABLED = os.getenv("HABITARCADE_SCHEDULER_ENABLED", "true").lower() in ("1", "true", "yes")

# Habit entry statuses
HABIT_STATUS_EMPTY = "empty"
HABIT_STATUS_COMPLETE = "complete"
HABIT_STATUS_MISSED = "missed"
HABIT_STATUS_PARTIAL = "partial"
HABIT_STATUS_NA = "na"
HABIT_STATUS_EXEMPT = "exempt"
HABIT_STATUS_EXTRA = "extra"
HABIT_STATUS_TRENDING = "trending"
HABIT_STATUS_PINK = "pink"
HABIT_STATUS_SKIP = "skip"

HABIT_STATUSES = (
    HABIT_STATUS_EMPTY,
    HABIT_STATUS_COMPLETE,
    HABIT_STATUS_MISSED,
    HABIT_STATUS_PARTIAL,
    HABIT_STATUS_NA,
    HABIT_STATUS_EXEMPT,
    HABIT_STATUS_EXTRA,
    HABIT_STATUS_TRENDING,
    HABIT_STATUS_PINK,
    HABIT_STATUS_SKIP,
)

# Task statuses
TASK_STATUS_PENDING = "pending"
TASK_STATUS_COMPLETE = "complete"

# Settings defaults
DEFAULT_DAY_BOUNDARY_HOUR = 6
DEFAULT_WEEK_START_DAY = 0  # Sunday
DEFAULT_THEME = "dark"

# Auto-fill
AUTO_FILL_DEFAULT_DAYS = 30
AUTO_FILL_BATCH_SIZE = 50
AUTO_FILL_ENTRIES_PREVIEW = 100
AUTO_FILL_SCHEDULE_MINUTE = 5  # Scheduler runs hourly at HH:05

# Hierarchy: parents and children only
MAX_HIERARCHY_DEPTH = 2

# Scoring
DEFAULT_TARGET_PERCENTAGE = 90
DEFAULT_WARNING_PERCENTAGE = 75
SCORE_DEFAULT_DAYS = 30
SCORE_LEVEL_ON_TARGET = "on_target"
SCORE_LEVEL_WARNING = "warning"
SCORE_LEVEL_BELOW = "below"
