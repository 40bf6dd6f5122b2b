"""
High-volatility window detection over fixed-size bar windows.
"""

from collections.abc import Sequence
from dataclasses import dataclass, replace
from datetime import datetime, timedelta

from ..data.series import PriceSeries


@dataclass(frozen=True)
class VolatilityWindow:
    """Bar window whose range reached the threshold. ``range_pct`` is x100."""
    start_utc: datetime
    end_utc: datetime
    window_bars: int
    open: float
    high: float
    low: float
    close: float
    range_pct: float
    volume: float


def find_high_volatility_windows(
    prices: PriceSeries,
    window_bars: int,
    threshold_pct: float,
    step_bars: int = 1,
) -> list[VolatilityWindow]:
    """
    Slide a window of ``window_bars`` bars and keep those with
    ``(high - low) / open * 100 >= threshold_pct``.

    The window starting at ``i`` is evaluated while ``i + window_bars < len``,
    so the last bar only ever closes a window, never starts one alone.
    Windows whose first open is not positive are skipped.
    """
    if window_bars < 1:
        raise ValueError("window_bars must be at least 1")

    step = max(1, step_bars)
    bars = prices.bars
    result = []

    i = 0
    while i + window_bars < len(bars):
        window = bars[i:i + window_bars]
        i += step

        open_ = window[0].open
        if open_ <= 0:
            continue

        high = max(bar.high for bar in window)
        low = min(bar.low for bar in window)
        pct = (high - low) / open_ * 100.0

        if pct >= threshold_pct:
            result.append(VolatilityWindow(
                start_utc=window[0].ts,
                end_utc=window[-1].ts,
                window_bars=window_bars,
                open=open_,
                high=high,
                low=low,
                close=window[-1].close,
                range_pct=pct,
                volume=float(sum(bar.volume for bar in window)),
            ))

    return result


def merge_overlapping(windows: Sequence[VolatilityWindow], max_gap: timedelta) -> list[VolatilityWindow]:
    """
    Merge windows that start within ``max_gap`` of the current window's end.

    Merged windows keep the first open, take the last close, widen high/low,
    keep the largest range and sum volumes.
    """
    if not windows:
        return []

    ordered = sorted(windows, key=lambda w: w.start_utc)
    merged = []
    current = ordered[0]

    for nxt in ordered[1:]:
        if nxt.start_utc <= current.end_utc + max_gap:
            current = replace(
                current,
                end_utc=nxt.end_utc,
                high=max(current.high, nxt.high),
                low=min(current.low, nxt.low),
                range_pct=max(current.range_pct, nxt.range_pct),
                volume=current.volume + nxt.volume,
                close=nxt.close,
            )
        else:
            merged.append(current)
            current = nxt

    merged.append(current)
    return merged
