"""
Event-centered metrics: returns, drawdown/run-up, range and volume per segment.

Segments around an occurrence at ``t0``:

    PRE   : [t0 - pre_window, t0)
    EVENT : [event_start, event_end]   (both ends inclusive, optional)
    POST  : (t0, t0 + post_window]

All values are fractions (0.05 = 5%). Missing bars and non-positive anchor
prices yield zeros instead of errors.
"""

from collections.abc import Sequence
from dataclasses import asdict, dataclass
from datetime import datetime, timedelta
from typing import Any, Optional, Union

from ..data.models import PriceBar
from ..data.series import PriceSeries
from ..utils.time import ensure_utc


@dataclass(frozen=True)
class EventMetrics:
    """Per-occurrence metrics record."""
    t0: datetime
    event_start: Optional[datetime]
    event_end: Optional[datetime]

    # Returns
    return_pre: float
    return_event: float
    return_post: float

    # Drawdowns (<= 0) / run-ups (>= 0)
    max_dd_pre: float
    max_dd_event: float
    max_dd_post: float
    max_ru_pre: float
    max_ru_event: float
    max_ru_post: float

    # Range volatility
    range_pre: float
    range_event: float
    range_post: float

    # Volume
    vol_pre: float
    vol_event: float
    vol_post: float
    vol_ratio_post: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def safe_return(from_price: float, to_price: float) -> float:
    """``(to - from) / from``, 0 when ``from_price <= 0``."""
    if from_price <= 0:
        return 0.0
    return (to_price - from_price) / from_price


def drawdown_runup(segment: Sequence[PriceBar], anchor_price: float) -> tuple[float, float]:
    """
    Max drawdown and run-up of ``segment`` relative to ``anchor_price``.

    Returns:
        ``(dd, ru)`` with ``dd = (min low - anchor) / anchor`` and
        ``ru = (max high - anchor) / anchor``; ``(0, 0)`` for an empty
        segment or a non-positive anchor
    """
    if not segment or anchor_price <= 0:
        return 0.0, 0.0

    min_low = min(bar.low for bar in segment)
    max_high = max(bar.high for bar in segment)

    dd = (min_low - anchor_price) / anchor_price
    ru = (max_high - anchor_price) / anchor_price
    return dd, ru


def range_pct(segment: Sequence[PriceBar]) -> float:
    """``(max high - min low) / first open``, 0 if empty or open <= 0."""
    if not segment:
        return 0.0

    first_open = segment[0].open
    if first_open <= 0:
        return 0.0

    max_high = max(bar.high for bar in segment)
    min_low = min(bar.low for bar in segment)
    return (max_high - min_low) / first_open


def compute_event_metrics(
    prices: Union[PriceSeries, Sequence[PriceBar]],
    t0: datetime,
    pre_window: timedelta,
    post_window: timedelta,
    event_start: Optional[datetime] = None,
    event_end: Optional[datetime] = None,
) -> EventMetrics:
    """
    Compute event-centered metrics for one occurrence.

    Args:
        prices: Price series, or bars sorted ascending and unique by timestamp
        t0: Representative time of the occurrence
        pre_window: Length of the PRE segment
        post_window: Length of the POST segment
        event_start: Start of the EVENT segment (optional)
        event_end: End of the EVENT segment (optional)

    Returns:
        EventMetrics record

    Raises:
        EmptyInputError: If there are no bars
        TimezoneError: If a timestamp is not UTC
    """
    series = PriceSeries.of(prices)

    ensure_utc(t0, "t0")
    if event_start is not None:
        ensure_utc(event_start, "event_start")
    if event_end is not None:
        ensure_utc(event_end, "event_end")

    pre_start = t0 - pre_window
    post_end = t0 + post_window

    pre = series.slice(pre_start, t0, include_start=True, include_end=False)
    post = series.slice(t0, post_end, include_start=False, include_end=True)

    event: Sequence[PriceBar] = ()
    if event_start is not None and event_end is not None and event_end >= event_start:
        event = series.slice(event_start, event_end, include_start=True, include_end=True)

    # Reference closes: last bar at or before each boundary
    close_at_t0 = series.close_at_or_before(t0)
    close_at_pre_start = series.close_at_or_before(pre_start)
    close_at_post_end = series.close_at_or_before(post_end)

    return_pre = safe_return(close_at_pre_start, close_at_t0)
    return_post = safe_return(close_at_t0, close_at_post_end)

    return_event = 0.0
    dd_event, ru_event = 0.0, 0.0
    if event:
        event_open = event[0].open
        return_event = safe_return(event_open, event[-1].close)
        dd_event, ru_event = drawdown_runup(event, event_open)

    dd_pre, ru_pre = drawdown_runup(pre, close_at_t0)
    dd_post, ru_post = drawdown_runup(post, close_at_t0)

    vol_pre = sum(bar.volume for bar in pre)
    vol_event = sum(bar.volume for bar in event)
    vol_post = sum(bar.volume for bar in post)
    vol_ratio_post = vol_post / vol_pre if vol_pre > 0 else 0.0

    return EventMetrics(
        t0=t0,
        event_start=event_start,
        event_end=event_end,
        return_pre=return_pre,
        return_event=return_event,
        return_post=return_post,
        max_dd_pre=dd_pre,
        max_dd_event=dd_event,
        max_dd_post=dd_post,
        max_ru_pre=ru_pre,
        max_ru_event=ru_event,
        max_ru_post=ru_post,
        range_pre=range_pct(pre),
        range_event=range_pct(event),
        range_post=range_pct(post),
        vol_pre=float(vol_pre),
        vol_event=float(vol_event),
        vol_post=float(vol_post),
        vol_ratio_post=vol_ratio_post,
    )
