"""
Date calculation service.
Handles effective dates under a configurable day boundary hour and date ranges.
"""
from datetime import datetime, timedelta, date, tzinfo
from typing import List, Optional
from zoneinfo import ZoneInfo

from habitarcade.constants import TIMEZONE
from habitarcade.exceptions import ValidationException


class DateService:
    """Service for date-related operations"""

    @staticmethod
    def get_timezone() -> Optional[tzinfo]:
        """Configured local timezone, or None for server local time"""
        return ZoneInfo(TIMEZONE) if TIMEZONE else None

    @staticmethod
    def now(tz: Optional[tzinfo] = None) -> datetime:
        """Current local time (naive when no timezone is configured)"""
        return datetime.now(tz)

    @staticmethod
    def validate_day_boundary_hour(day_boundary_hour) -> int:
        """
        Reject anything that is not an integer hour in 0..23.

        Raises:
            ValidationException: If the hour is out of range or not an int
        """
        if isinstance(day_boundary_hour, bool) or not isinstance(day_boundary_hour, int):
            raise ValidationException(
                "day_boundary_hour",
                f"must be an integer, got {day_boundary_hour!r}",
                code="INVALID_DAY_BOUNDARY_HOUR"
            )
        if not 0 <= day_boundary_hour <= 23:
            raise ValidationException(
                "day_boundary_hour",
                f"must be between 0 and 23, got {day_boundary_hour}",
                code="INVALID_DAY_BOUNDARY_HOUR"
            )
        return day_boundary_hour

    @staticmethod
    def resolve_effective_date(
        instant: datetime,
        day_boundary_hour: int,
        tz: Optional[tzinfo] = None
    ) -> date:
        """
        Get the calendar date an instant belongs to.

        If the local hour is before day_boundary_hour, the instant still
        belongs to the previous date.

        Example: with day_boundary_hour = 6, 2024-02-01 05:59 resolves to
        2024-01-31 and 2024-02-01 06:00 resolves to 2024-02-01.

        Args:
            instant: Moment to resolve. When tz is given the instant is
                converted to it; naive instants are taken as server local
                time (how created_at and other timestamps are stored).
            day_boundary_hour: Hour (0-23) at which a new day starts
            tz: Local timezone

        Returns:
            Effective date

        Raises:
            ValidationException: If day_boundary_hour is out of range
        """
        DateService.validate_day_boundary_hour(day_boundary_hour)

        local = instant
        if tz is not None:
            local = instant.astimezone(tz)

        if local.hour < day_boundary_hour:
            return local.date() - timedelta(days=1)
        return local.date()

    @staticmethod
    def get_effective_date(
        day_boundary_hour: int,
        now: Optional[datetime] = None,
        tz: Optional[tzinfo] = None
    ) -> date:
        """
        Get the effective current date.

        Args:
            day_boundary_hour: Hour (0-23) at which a new day starts
            now: Override for the current moment (tests, replays)
            tz: Local timezone, defaults to the configured one

        Returns:
            Effective "today"
        """
        if tz is None:
            tz = DateService.get_timezone()
        if now is None:
            now = DateService.now(tz)
        return DateService.resolve_effective_date(now, day_boundary_hour, tz)

    @staticmethod
    def date_range(start_date: date, end_exclusive: date) -> List[date]:
        """
        Ascending list of dates from start_date up to, not including, end_exclusive.

        Returns an empty list when start_date >= end_exclusive.
        """
        days = (end_exclusive - start_date).days
        return [start_date + timedelta(days=offset) for offset in range(max(days, 0))]

    @staticmethod
    def get_day_range(target_date: date, day_boundary_hour: int = 0) -> tuple[datetime, datetime]:
        """
        Get the local datetime range covered by an effective date.

        Args:
            target_date: Effective date
            day_boundary_hour: Hour at which the day starts

        Returns:
            Tuple of (day_start, day_end) datetimes, end exclusive
        """
        DateService.validate_day_boundary_hour(day_boundary_hour)
        day_start = datetime.combine(target_date, datetime.min.time()) + timedelta(hours=day_boundary_hour)
        return day_start, day_start + timedelta(days=1)
