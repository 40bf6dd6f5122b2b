"""Market statistics over the inclusive window of a detected period."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..data.series import PriceSeries


@dataclass(frozen=True)
class PeriodMarketStats:
    """OHLCV summary of one period; percentages are x100."""
    period_index: int
    start_utc: datetime
    end_utc: datetime
    duration_hours: float

    open: float
    close: float
    high: float
    low: float

    change_pct: float
    max_up_pct: float
    max_down_pct: float

    total_volume: float
    avg_volume: float
    bars: int


def analyze_period(
    index: int,
    start_utc: datetime,
    end_utc: datetime,
    prices: PriceSeries,
) -> Optional[PeriodMarketStats]:
    """
    Summarize the bars inside ``[start_utc, end_utc]``.

    Returns:
        Stats record, or None if no bar falls inside the window or the first
        open is not positive
    """
    window = prices.slice(start_utc, end_utc, include_start=True, include_end=True)
    if not window:
        return None

    open_ = window[0].open
    if open_ <= 0:
        return None

    close = window[-1].close
    high = max(bar.high for bar in window)
    low = min(bar.low for bar in window)
    total_volume = sum(bar.volume for bar in window)

    return PeriodMarketStats(
        period_index=index,
        start_utc=start_utc,
        end_utc=end_utc,
        duration_hours=(end_utc - start_utc).total_seconds() / 3600.0,
        open=open_,
        close=close,
        high=high,
        low=low,
        change_pct=(close - open_) / open_ * 100.0,
        max_up_pct=(high - open_) / open_ * 100.0,
        max_down_pct=(low - open_) / open_ * 100.0,
        total_volume=float(total_volume),
        avg_volume=total_volume / len(window),
        bars=len(window),
    )
