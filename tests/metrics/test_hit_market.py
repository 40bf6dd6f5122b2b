"""Tests for per-hit market enrichment."""

from datetime import timedelta

import pytest

from astro_events.ephemeris import Body, BodyState
from astro_events.metrics import enrich_period_hits, enrich_periods
from astro_events.search import Hit, Period


def make_period(epoch, *hours):
    hits = tuple(
        Hit(epoch + timedelta(hours=h), {Body.SUN: BodyState(100.0, 1.0)})
        for h in hours
    )
    return Period(hits[0].time_utc, hits[-1].time_utc, hits)


class TestEnrichPeriodHits:
    """Test bars and returns attached to hits."""

    def test_returns(self, make_series, epoch):
        """Return since the previous hit and since the period start."""
        prices = make_series([100.0, 110.0, 99.0])

        rows = enrich_period_hits(make_period(epoch, 0, 1, 2), prices, period_index=3)

        assert [r.period_index for r in rows] == [3, 3, 3]
        assert [r.minutes_from_start for r in rows] == [0, 60, 120]
        assert [r.bar.close for r in rows] == [100.0, 110.0, 99.0]
        assert [r.ret_prev_hit for r in rows] == pytest.approx([0.0, 0.1, -0.1])
        assert [r.ret_from_period_start for r in rows] == pytest.approx([0.0, 0.1, -0.01])

    def test_bar_at_or_before(self, make_series, epoch):
        """Hits between bars use the last bar at or before them."""
        prices = make_series([100.0, 120.0], step=timedelta(hours=2))

        rows = enrich_period_hits(make_period(epoch, 1, 3), prices)

        assert [r.bar.ts for r in rows] == [epoch, epoch + timedelta(hours=2)]
        assert rows[1].ret_from_period_start == pytest.approx(0.2)

    def test_hit_before_first_bar(self, make_series, epoch):
        """No bar means no returns; the first priced hit becomes the base."""
        prices = make_series([50.0, 55.0], start=epoch + timedelta(hours=1))

        rows = enrich_period_hits(make_period(epoch, 0, 1, 2), prices)

        assert rows[0].bar is None
        assert rows[0].ret_prev_hit is None
        assert rows[0].ret_from_period_start is None
        assert rows[1].ret_prev_hit == 0.0
        assert rows[1].ret_from_period_start == 0.0
        assert rows[2].ret_from_period_start == pytest.approx(0.1)

    def test_non_positive_base(self, make_series, epoch):
        """A zero close as base gives zero returns."""
        prices = make_series([0.0, 10.0])

        rows = enrich_period_hits(make_period(epoch, 0, 1), prices)

        assert rows[1].ret_prev_hit == 0.0
        assert rows[1].ret_from_period_start == 0.0

    def test_periods_indexed_by_position(self, make_series, epoch):
        prices = make_series([100.0] * 10)

        rows = enrich_periods([make_period(epoch, 0, 1), make_period(epoch, 5)], prices)

        assert [(r.period_index, r.hit_index) for r in rows] == [(0, 0), (0, 1), (1, 0)]
