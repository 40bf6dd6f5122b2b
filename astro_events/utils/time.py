"""
UTC time helpers shared by the scanner, metrics engine and exporters.
"""

from collections.abc import Iterator, Sequence
from datetime import datetime, timedelta, timezone
from typing import Optional

from ..errors import TimeRangeError, TimezoneError

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def is_utc(ts: datetime) -> bool:
    """True when ``ts`` is timezone-aware with a zero UTC offset."""
    if ts.tzinfo is None:
        return False
    return ts.utcoffset() == timedelta(0)


def ensure_utc(ts: datetime, field: str = "timestamp") -> datetime:
    """
    Validate that a timestamp is UTC.

    Args:
        ts: Timestamp to check
        field: Name used in the error message

    Returns:
        The same timestamp

    Raises:
        TimezoneError: If the timestamp is naive or has a non-zero offset
    """
    if not isinstance(ts, datetime):
        raise TimezoneError(f"{field} must be a datetime, got {type(ts).__name__}")
    if not is_utc(ts):
        raise TimezoneError(f"{field} must be timezone-aware UTC", timestamp=ts)
    return ts


def validate_time_range(start_utc: datetime, end_utc: datetime) -> None:
    """Require UTC bounds with ``end_utc`` strictly after ``start_utc``."""
    ensure_utc(start_utc, "start_utc")
    ensure_utc(end_utc, "end_utc")
    if end_utc <= start_utc:
        raise TimeRangeError("end_utc must be after start_utc", start=start_utc, end=end_utc)


def time_grid(start_utc: datetime, end_utc: datetime, step: timedelta) -> Iterator[datetime]:
    """
    Iterate a fixed time grid from ``start_utc`` to ``end_utc`` inclusive.

    Raises:
        TimeRangeError: If ``step`` is not positive
    """
    if step <= timedelta(0):
        raise TimeRangeError("step must be positive", start=start_utc, end=end_utc)

    t = start_utc
    while t <= end_utc:
        yield t
        t = t + step


def midpoint(start_utc: datetime, end_utc: datetime) -> datetime:
    """Midpoint of an interval."""
    return start_utc + (end_utc - start_utc) / 2


def median_timestamp(timestamps: Sequence[datetime]) -> Optional[datetime]:
    """Element at ``len // 2`` of an ascending sequence, None if empty."""
    if not timestamps:
        return None
    return timestamps[len(timestamps) // 2]


def from_unix(value: int) -> datetime:
    """
    Convert a Unix timestamp to UTC.

    Values above 10^10 are taken as milliseconds, anything else as seconds.
    """
    if value > 10_000_000_000:
        return _EPOCH + timedelta(milliseconds=value)
    return _EPOCH + timedelta(seconds=value)


def format_utc(ts: Optional[datetime]) -> str:
    """ISO8601 rendering used by exporters; empty string for None."""
    if ts is None:
        return ""
    return ts.isoformat()
