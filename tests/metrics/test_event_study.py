"""Tests for event-centered metrics."""

from datetime import timedelta

import pytest

from astro_events.data import PriceBar
from astro_events.errors import EmptyInputError, TimezoneError
from astro_events.metrics import compute_event_metrics, drawdown_runup, range_pct, safe_return


class TestHelpers:
    """Test the ratio helpers."""

    def test_safe_return(self):
        """Zero or negative base gives 0."""
        assert safe_return(100.0, 110.0) == pytest.approx(0.10)
        assert safe_return(0.0, 110.0) == 0.0
        assert safe_return(-1.0, 110.0) == 0.0

    def test_drawdown_runup_empty(self):
        """No bars, no excursion."""
        assert drawdown_runup([], 100.0) == (0.0, 0.0)

    def test_range_pct_non_positive_open(self, epoch):
        """Non-positive first open gives 0."""
        assert range_pct([PriceBar(epoch, 0.0, 5.0, 0.0, 1.0, 1.0)]) == 0.0


class TestComputeEventMetrics:
    """Test segment metrics on hand-checked data."""

    def test_crafted_move(self, crafted_series, epoch):
        """Two quiet bars before t0, a 5% jump after it."""
        t0 = epoch + timedelta(hours=2)
        m = compute_event_metrics(
            crafted_series, t0, timedelta(hours=2), timedelta(hours=2),
            event_start=t0, event_end=epoch + timedelta(hours=3),
        )

        assert m.return_pre == pytest.approx(0.0)
        assert m.return_post == pytest.approx(0.06)
        assert m.return_event == pytest.approx(0.05)

        assert m.max_dd_pre == pytest.approx(-0.02)
        assert m.max_ru_pre == pytest.approx(0.02)
        assert m.max_dd_post == pytest.approx(-0.05)
        assert m.max_ru_post == pytest.approx(0.10)
        assert m.max_dd_event == pytest.approx(-0.05)
        assert m.max_ru_event == pytest.approx(0.10)

        assert m.range_pre == pytest.approx(0.04)
        assert m.range_post == pytest.approx(0.15)
        assert m.range_event == pytest.approx(0.15)

        assert m.vol_pre == 20.0
        assert m.vol_post == 60.0
        assert m.vol_event == 40.0
        assert m.vol_ratio_post == pytest.approx(3.0)

    def test_flat_prices(self, flat_series, epoch):
        """A flat market has zero returns and a volume ratio of one."""
        t0 = epoch + timedelta(hours=50)
        m = compute_event_metrics(
            flat_series, t0, timedelta(hours=24), timedelta(hours=24),
            event_start=t0 - timedelta(hours=2), event_end=t0 + timedelta(hours=2),
        )

        assert m.return_pre == 0.0
        assert m.return_post == 0.0
        assert m.max_dd_post == 0.0
        assert m.range_post == 0.0
        assert m.vol_pre == 240.0
        assert m.vol_post == 240.0
        assert m.vol_event == 50.0
        assert m.vol_ratio_post == pytest.approx(1.0)

    def test_empty_windows(self, make_series, epoch):
        """Zero-length windows yield zeros everywhere."""
        series = make_series([100.0, 101.0])
        m = compute_event_metrics(series, epoch + timedelta(hours=1), timedelta(0), timedelta(0))

        assert m.return_pre == 0.0
        assert m.return_post == 0.0
        assert m.vol_pre == 0.0
        assert m.vol_ratio_post == 0.0
        assert m.return_event == 0.0
        assert m.event_start is None

    def test_pre_segment_excludes_t0(self, crafted_series, epoch):
        """The bar at t0 belongs to neither PRE nor POST."""
        t0 = epoch + timedelta(hours=3)
        m = compute_event_metrics(crafted_series, t0, timedelta(hours=1), timedelta(hours=1))
        assert m.vol_pre == 10.0
        assert m.vol_post == 30.0

    def test_reversed_event_window_ignored(self, crafted_series, epoch):
        """event_end before event_start leaves the EVENT segment empty."""
        m = compute_event_metrics(
            crafted_series, epoch + timedelta(hours=2), timedelta(hours=1), timedelta(hours=1),
            event_start=epoch + timedelta(hours=3), event_end=epoch + timedelta(hours=1),
        )
        assert m.vol_event == 0.0
        assert m.range_event == 0.0

    def test_accepts_bar_list(self, crafted_series, epoch):
        """A sorted list of bars works like a series."""
        m = compute_event_metrics(
            list(crafted_series), epoch + timedelta(hours=2), timedelta(hours=2), timedelta(hours=2)
        )
        assert m.return_post == pytest.approx(0.06)
        assert "vol_ratio_post" in m.to_dict()

    def test_empty_prices(self, epoch):
        """No bars is an input error."""
        with pytest.raises(EmptyInputError):
            compute_event_metrics([], epoch, timedelta(hours=1), timedelta(hours=1))

    def test_naive_t0(self, crafted_series):
        """t0 must be UTC."""
        with pytest.raises(TimezoneError):
            compute_event_metrics(
                crafted_series, crafted_series.first.ts.replace(tzinfo=None),
                timedelta(hours=1), timedelta(hours=1),
            )
