"""Tests for period market statistics."""

from datetime import timedelta

import pytest

from astro_events.metrics import analyze_period


class TestAnalyzePeriod:
    """Test OHLCV summaries over inclusive windows."""

    def test_crafted_window(self, crafted_series, epoch):
        """Hours 1 to 3 inclusive."""
        stats = analyze_period(0, epoch + timedelta(hours=1), epoch + timedelta(hours=3), crafted_series)

        assert stats.bars == 3
        assert stats.open == 100.0
        assert stats.close == 105.0
        assert stats.change_pct == pytest.approx(5.0)
        assert stats.max_up_pct == pytest.approx(10.0)
        assert stats.max_down_pct == pytest.approx(-5.0)
        assert stats.total_volume == 50.0
        assert stats.avg_volume == pytest.approx(50.0 / 3)
        assert stats.duration_hours == 2.0

    def test_no_bars(self, crafted_series, epoch):
        """A window outside the data gives None."""
        assert analyze_period(1, epoch + timedelta(days=2), epoch + timedelta(days=3), crafted_series) is None

    def test_non_positive_open(self, make_series, epoch):
        """Zero opening price gives None."""
        series = make_series([0.0, 1.0])
        assert analyze_period(0, epoch, epoch + timedelta(hours=1), series) is None
