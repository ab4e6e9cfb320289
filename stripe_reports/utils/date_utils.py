"""Date and timezone utilities"""

from datetime import date, datetime, time, timedelta
from typing import List, Tuple

import pytz

DISPLAY_FORMAT = "%Y-%m-%d %H:%M:%S"


def generate_date_range(start: date, end: date) -> List[date]:
    """Generate list of dates from start to end (inclusive)"""
    days = (end - start).days + 1
    return [start + timedelta(days=i) for i in range(days)]


def get_timezone(name: str) -> pytz.BaseTzInfo:
    """Resolve an IANA zone name. Raises pytz.UnknownTimeZoneError."""
    return pytz.timezone(name)


def day_bounds(start: date, end: date, timezone: str) -> Tuple[int, int]:
    """
    Unix-time bounds covering whole local days from start to end.

    The lower bound is local midnight of `start`, the upper bound is the last
    second of `end`, both inclusive.
    """
    tz = get_timezone(timezone)
    start_dt = tz.localize(datetime.combine(start, time.min))
    end_dt = tz.localize(datetime.combine(end, time(23, 59, 59)))
    return int(start_dt.timestamp()), int(end_dt.timestamp())


def local_date_key(timestamp: int, timezone: str) -> str:
    """Calendar date (YYYY-MM-DD) of a Unix timestamp in the given zone"""
    return datetime.fromtimestamp(timestamp, tz=get_timezone(timezone)).strftime("%Y-%m-%d")


def format_timestamp(timestamp: int | None, timezone: str = "UTC") -> str:
    """Render a Unix timestamp for display; empty string when absent"""
    if not timestamp:
        return ""
    return datetime.fromtimestamp(timestamp, tz=get_timezone(timezone)).strftime(DISPLAY_FORMAT)
