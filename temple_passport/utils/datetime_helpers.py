"""
Standardized Date/Time Handling Utilities

Centralized functions for date/time operations so that:
1. All event and transaction timestamps are stored in UTC
2. Check-in calendar dates are derived in the user's local timezone
3. Naive datetimes are never mixed with aware ones

CRITICAL RULES:
- Always store timestamps as UTC (use ensure_utc())
- Always derive streak dates from local_date(), never from the UTC date
"""

import logging
from datetime import datetime, date, timedelta
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from temple_passport import config

logger = logging.getLogger(__name__)


def resolve_timezone(tz_name: Optional[str]) -> ZoneInfo:
    """
    Resolve an IANA timezone name, falling back to the configured default

    Args:
        tz_name: IANA timezone (e.g. "Asia/Taipei"); None uses the default

    Returns:
        ZoneInfo object
    """
    if not tz_name:
        tz_name = config.DEFAULT_TIMEZONE
        logger.debug(f"No timezone given, using {tz_name}")

    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        logger.error(f"Invalid timezone '{tz_name}': {e}")
        return ZoneInfo(config.DEFAULT_TIMEZONE)


def now_utc() -> datetime:
    """
    Get current datetime in UTC (timezone-aware)
    """
    return datetime.now(ZoneInfo("UTC"))


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Ensure datetime is in UTC

    Args:
        dt: Datetime (can be None, naive, or aware)

    Returns:
        Datetime in UTC, or None if input was None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        # Assume UTC for naive datetimes
        logger.warning(f"Received naive datetime, assuming UTC: {dt}")
        return dt.replace(tzinfo=ZoneInfo("UTC"))

    return dt.astimezone(ZoneInfo("UTC"))


def to_local(dt: datetime, tz_name: Optional[str]) -> datetime:
    """Convert a datetime (assumed UTC if naive) to the given local timezone"""
    return ensure_utc(dt).astimezone(resolve_timezone(tz_name))


def local_date(dt: datetime, tz_name: Optional[str]) -> date:
    """
    Calendar date of a timestamp in the user's timezone

    A check-in at 07:30 in Taipei (UTC+8) belongs to that Taipei date
    even though it is still the previous day in UTC.
    """
    return to_local(dt, tz_name).date()


def local_hour(dt: datetime, tz_name: Optional[str]) -> int:
    """Hour of day (0-23) of a timestamp in the user's timezone"""
    return to_local(dt, tz_name).hour


def days_back(day: date, count: int) -> list[date]:
    """
    The `count` calendar days ending at `day`, newest first

    Example:
        days_back(date(2024, 3, 3), 3) -> [Mar 3, Mar 2, Mar 1]
    """
    return [day - timedelta(days=offset) for offset in range(count)]
