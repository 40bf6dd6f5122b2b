"""
Tests for UTC time helpers.

Verifies that naive and offset timestamps are refused, grids include both
ends, and Unix epochs in seconds or milliseconds map to the same instant.
"""

from datetime import datetime, timedelta, timezone

import pytest

from astro_events.errors import TimeRangeError, TimezoneError
from astro_events.utils.time import (
    ensure_utc,
    format_utc,
    from_unix,
    is_utc,
    median_timestamp,
    midpoint,
    time_grid,
    validate_time_range,
)

UTC_TS = datetime(2024, 1, 1, tzinfo=timezone.utc)


class TestEnsureUtc:
    """Test ensure_utc function."""

    def test_accepts_utc(self):
        assert ensure_utc(UTC_TS) is UTC_TS

    def test_rejects_naive(self):
        """Should reject timestamps without tzinfo."""
        with pytest.raises(TimezoneError):
            ensure_utc(datetime(2024, 1, 1))

    def test_rejects_offset(self):
        """Should reject non-zero offsets."""
        ts = datetime(2024, 1, 1, tzinfo=timezone(timedelta(hours=2)))
        assert not is_utc(ts)
        with pytest.raises(TimezoneError):
            ensure_utc(ts, "start_utc")

    def test_rejects_non_datetime(self):
        with pytest.raises(TimezoneError):
            ensure_utc("2024-01-01")


class TestTimeRange:
    """Test interval validation and grids."""

    def test_end_must_follow_start(self):
        """Equal bounds are rejected."""
        with pytest.raises(TimeRangeError):
            validate_time_range(UTC_TS, UTC_TS)

    def test_grid_includes_end(self):
        """Both endpoints are on the grid."""
        grid = list(time_grid(UTC_TS, UTC_TS + timedelta(hours=2), timedelta(hours=1)))
        assert grid == [UTC_TS + timedelta(hours=h) for h in range(3)]

    def test_grid_stops_before_overshoot(self):
        """The last point never passes the end."""
        grid = list(time_grid(UTC_TS, UTC_TS + timedelta(minutes=90), timedelta(hours=1)))
        assert grid[-1] == UTC_TS + timedelta(hours=1)

    def test_non_positive_step(self):
        """Should reject zero and negative steps."""
        with pytest.raises(TimeRangeError):
            list(time_grid(UTC_TS, UTC_TS + timedelta(hours=1), timedelta(0)))


class TestHelpers:
    """Test midpoint, median and conversions."""

    def test_midpoint(self):
        assert midpoint(UTC_TS, UTC_TS + timedelta(hours=4)) == UTC_TS + timedelta(hours=2)

    def test_median_timestamp(self):
        """Element at len // 2; None when empty."""
        stamps = [UTC_TS + timedelta(hours=h) for h in range(4)]
        assert median_timestamp(stamps) == UTC_TS + timedelta(hours=2)
        assert median_timestamp([]) is None

    def test_from_unix_units(self):
        """Seconds and milliseconds give the same instant."""
        assert from_unix(1704067200) == UTC_TS
        assert from_unix(1704067200000) == UTC_TS

    def test_format_utc(self):
        assert format_utc(UTC_TS) == "2024-01-01T00:00:00+00:00"
        assert format_utc(None) == ""
