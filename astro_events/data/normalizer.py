"""
Price bar normalization: ordering, de-duplication and sanity checks.

Raw loaders may return bars in file order with overlapping files producing
duplicates. The metrics engine requires strictly ascending timestamps, so
every series goes through :func:`normalize_bars` first.
"""

import math
from collections.abc import Iterable

import structlog

from ..errors import MalformedDataError
from ..utils.time import ensure_utc
from .models import PriceBar
from .series import PriceSeries

logger = structlog.get_logger(__name__)


def _validate_bar(bar: PriceBar) -> None:
    """Reject NaN/inf values and negative volume."""
    for name in ("open", "high", "low", "close", "volume"):
        value = getattr(bar, name)
        if not isinstance(value, (int, float)):
            raise MalformedDataError(f"Invalid {name} type: {type(value)}", raw_data=str(bar))
        if math.isnan(value) or math.isinf(value):
            raise MalformedDataError(f"Invalid {name} value: {value}", raw_data=str(bar))

    if bar.volume < 0:
        raise MalformedDataError(f"Negative volume: {bar.volume}", raw_data=str(bar))


def normalize_bars(bars: Iterable[PriceBar], drop_invalid: bool = False) -> PriceSeries:
    """
    Sort bars by time and keep the last bar seen for each timestamp.

    Non-positive prices are kept: ratio metrics degrade to zero for them.

    Args:
        bars: Bars in any order
        drop_invalid: Skip malformed bars with a warning instead of raising

    Returns:
        Immutable :class:`PriceSeries`

    Raises:
        MalformedDataError: On a malformed bar when ``drop_invalid`` is False
        TimezoneError: If a bar timestamp is not UTC
        EmptyInputError: If no bars remain
    """
    by_time: dict = {}
    dropped = 0
    duplicates = 0

    for bar in bars:
        ensure_utc(bar.ts, "bar.ts")
        try:
            _validate_bar(bar)
        except MalformedDataError as e:
            if not drop_invalid:
                raise
            dropped += 1
            logger.warning("Dropping malformed price bar", ts=bar.ts.isoformat(), error=str(e))
            continue

        if bar.ts in by_time:
            duplicates += 1
        by_time[bar.ts] = bar

    ordered = [by_time[ts] for ts in sorted(by_time)]

    if dropped or duplicates:
        logger.info(
            "Price bars normalized",
            kept=len(ordered),
            dropped=dropped,
            duplicates=duplicates,
        )

    return PriceSeries(ordered)
