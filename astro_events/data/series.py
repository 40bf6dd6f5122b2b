"""
Immutable, time-ordered price series with binary-search slicing.

A series is built once, after loading, and then shared read-only by every
metrics computation. All lookups are O(log n) over the bar timestamps.
"""

from bisect import bisect_left, bisect_right
from collections.abc import Iterator, Sequence
from datetime import datetime
from typing import Optional, Union

from ..errors import EmptyInputError, TemporalDataError
from ..utils.time import ensure_utc
from .models import PriceBar


class PriceSeries:
    """Ascending, de-duplicated sequence of :class:`PriceBar`."""

    def __init__(self, bars: Sequence[PriceBar]):
        """
        Args:
            bars: Bars sorted ascending and unique by timestamp

        Raises:
            EmptyInputError: If ``bars`` is empty
            TimezoneError: If a bar timestamp is not UTC
            TemporalDataError: If timestamps are not strictly ascending
        """
        if not bars:
            raise EmptyInputError("price series is empty", data_type="price_bars")

        times = []
        for bar in bars:
            ensure_utc(bar.ts, "bar.ts")
            if times and bar.ts <= times[-1]:
                raise TemporalDataError(
                    "price bars must be strictly ascending by timestamp",
                    timestamp=bar.ts,
                )
            times.append(bar.ts)

        self._bars: tuple[PriceBar, ...] = tuple(bars)
        self._times: list[datetime] = times

    @classmethod
    def of(cls, bars: Union["PriceSeries", Sequence[PriceBar]]) -> "PriceSeries":
        """Wrap a sorted bar sequence, passing existing series through."""
        if isinstance(bars, PriceSeries):
            return bars
        return cls(bars)

    def __len__(self) -> int:
        return len(self._bars)

    def __iter__(self) -> Iterator[PriceBar]:
        return iter(self._bars)

    def __getitem__(self, index: int) -> PriceBar:
        return self._bars[index]

    @property
    def bars(self) -> tuple[PriceBar, ...]:
        return self._bars

    @property
    def first(self) -> PriceBar:
        return self._bars[0]

    @property
    def last(self) -> PriceBar:
        return self._bars[-1]

    def lower_bound(self, t: datetime, include: bool) -> int:
        """First index with ``ts >= t`` (``include``) or ``ts > t``."""
        if include:
            return bisect_left(self._times, t)
        return bisect_right(self._times, t)

    def upper_bound(self, t: datetime, include: bool) -> int:
        """First index with ``ts > t`` (``include``) or ``ts >= t``."""
        if include:
            return bisect_right(self._times, t)
        return bisect_left(self._times, t)

    def slice(self, start: datetime, end: datetime,
              include_start: bool = True, include_end: bool = True) -> tuple[PriceBar, ...]:
        """
        Bars inside ``start..end`` with the requested boundary semantics.

        Returns an empty tuple when ``end < start``.
        """
        if end < start:
            return ()

        left = self.lower_bound(start, include_start)
        right = self.upper_bound(end, include_end)
        if right <= left:
            return ()
        return self._bars[left:right]

    def bar_at_or_before(self, t: datetime) -> Optional[PriceBar]:
        """Last bar with ``ts <= t``, None if ``t`` precedes all data."""
        idx = bisect_right(self._times, t) - 1
        if idx < 0:
            return None
        return self._bars[idx]

    def close_at_or_before(self, t: datetime) -> float:
        """
        Close of the last bar with ``ts <= t``.

        Falls back to the first bar when ``t`` precedes all data.
        """
        idx = bisect_right(self._times, t) - 1
        if idx < 0:
            idx = 0
        return self._bars[idx].close
