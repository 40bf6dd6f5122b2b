"""
Canonical data models for normalized price data.

This module defines immutable data structures that represent clean,
validated OHLCV bars after loading from raw files.
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class PriceBar:
    """OHLCV bar with a UTC timestamp."""
    ts: datetime       # UTC bar open time
    open: float        # Opening price
    high: float        # High price
    low: float         # Low price
    close: float       # Closing price
    volume: float      # Base volume

    @property
    def range_value(self) -> float:
        return self.high - self.low
