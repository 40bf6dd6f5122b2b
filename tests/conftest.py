"""Pytest configuration and shared fixtures."""

from collections.abc import Mapping, Sequence
from datetime import datetime, timedelta, timezone

import pytest

from astro_events.data import PriceBar, PriceSeries
from astro_events.ephemeris import Body, BodyState, Ephemeris, validate_query
from astro_events.metrics import EventMetrics

EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


class LinearEphemeris(Ephemeris):
    """Bodies moving at a constant speed (deg/day) from their longitude at ``epoch``."""

    def __init__(self, motions: Mapping[Body, tuple[float, float]], epoch: datetime = EPOCH):
        self.motions = dict(motions)
        self.epoch = epoch

    def get_states(self, time_utc: datetime, bodies: Sequence[Body]) -> dict[Body, BodyState]:
        validate_query(time_utc, bodies)
        days = (time_utc - self.epoch).total_seconds() / 86400.0
        result = {}
        for body in bodies:
            lon0, speed = self.motions[body]
            result[body] = BodyState(longitude=(lon0 + speed * days) % 360.0, speed=speed)
        return result


def build_series(closes, start=EPOCH, step=timedelta(hours=1), volume=10.0):
    """Series of flat bars (open = high = low = close) at a fixed step."""
    bars = [
        PriceBar(ts=start + i * step, open=c, high=c, low=c, close=c, volume=volume)
        for i, c in enumerate(closes)
    ]
    return PriceSeries(bars)


def build_metrics(**values):
    """EventMetrics with every number zero unless given."""
    fields = dict(t0=EPOCH, event_start=None, event_end=None)
    for name in (
        "return_pre", "return_event", "return_post",
        "max_dd_pre", "max_dd_event", "max_dd_post",
        "max_ru_pre", "max_ru_event", "max_ru_post",
        "range_pre", "range_event", "range_post",
        "vol_pre", "vol_event", "vol_post", "vol_ratio_post",
    ):
        fields[name] = 0.0
    fields.update(values)
    return EventMetrics(**fields)


@pytest.fixture
def epoch() -> datetime:
    """Common UTC origin for grids and price bars."""
    return EPOCH


@pytest.fixture
def make_ephemeris():
    """Factory for deterministic linear-motion ephemerides."""
    return LinearEphemeris


@pytest.fixture
def make_series():
    """Factory for flat-bar price series."""
    return build_series


@pytest.fixture
def flat_series() -> PriceSeries:
    """30 days of hourly bars at a constant price of 100."""
    return build_series([100.0] * (30 * 24))


@pytest.fixture
def crafted_series() -> PriceSeries:
    """
    Five hourly bars with a move after the third one.

    h0 o100 h101 l99  c100 v10
    h1 o100 h102 l98  c100 v10
    h2 o100 h100 l100 c100 v10   <- t0
    h3 o100 h110 l95  c105 v30
    h4 o105 h108 l104 c106 v30
    """
    rows = [
        (100.0, 101.0, 99.0, 100.0, 10.0),
        (100.0, 102.0, 98.0, 100.0, 10.0),
        (100.0, 100.0, 100.0, 100.0, 10.0),
        (100.0, 110.0, 95.0, 105.0, 30.0),
        (105.0, 108.0, 104.0, 106.0, 30.0),
    ]
    return PriceSeries([
        PriceBar(ts=EPOCH + timedelta(hours=i), open=o, high=h, low=lo, close=c, volume=v)
        for i, (o, h, lo, c, v) in enumerate(rows)
    ])


@pytest.fixture
def make_metrics():
    """Factory for EventMetrics records."""
    return build_metrics
