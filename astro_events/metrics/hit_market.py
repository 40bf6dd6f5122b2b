"""Market bar and returns attached to every hit of a detected period."""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..data.models import PriceBar
from ..data.series import PriceSeries
from ..search.models import Period
from .event_study import safe_return


@dataclass(frozen=True)
class HitMarket:
    """Bar at or before one hit plus returns as fractions."""
    period_index: int
    hit_index: int
    minutes_from_start: int
    time_utc: datetime
    bar: Optional[PriceBar]
    ret_prev_hit: Optional[float]
    ret_from_period_start: Optional[float]


def enrich_period_hits(period: Period, prices: PriceSeries, period_index: int = 0) -> list[HitMarket]:
    """
    Pair each hit of ``period`` with its market bar.

    ``ret_prev_hit`` compares the close with the close of the previous hit
    that had a bar (0 for the first one). ``ret_from_period_start`` compares
    it with the close at or before ``period.start_utc``, or with the first
    priced hit when the series starts later. Hits without a bar get None for
    the bar and both returns.
    """
    start_bar = prices.bar_at_or_before(period.start_utc)
    start_close = start_bar.close if start_bar is not None else None
    prev_close = None
    rows = []

    for hit_index, hit in enumerate(period.hits):
        bar = prices.bar_at_or_before(hit.time_utc)
        ret_prev = ret_start = None
        if bar is not None:
            if start_close is None:
                start_close = bar.close
            ret_prev = 0.0 if prev_close is None else safe_return(prev_close, bar.close)
            ret_start = safe_return(start_close, bar.close)
            prev_close = bar.close

        rows.append(HitMarket(
            period_index=period_index,
            hit_index=hit_index,
            minutes_from_start=round((hit.time_utc - period.start_utc).total_seconds() / 60.0),
            time_utc=hit.time_utc,
            bar=bar,
            ret_prev_hit=ret_prev,
            ret_from_period_start=ret_start,
        ))

    return rows


def enrich_periods(periods: Sequence[Period], prices: PriceSeries) -> list[HitMarket]:
    """``enrich_period_hits`` over every period, indexed by position."""
    return [row for i, p in enumerate(periods) for row in enrich_period_hits(p, prices, i)]
