"""
Seeded rejection sampling of baseline t0 values.

Baseline instants are drawn uniformly inside the price history, far enough
from each other and from every real event for their windows not to overlap.
"""

import random
from collections.abc import Sequence
from datetime import datetime, timedelta

from ..data.series import PriceSeries
from ..errors import BaselineSamplingError, TimeRangeError
from ..logging.config import get_study_logger

logger = get_study_logger(__name__)


def generate_random_t0(
    prices: PriceSeries,
    excluded_windows: Sequence[tuple[datetime, datetime]],
    count: int,
    min_spacing: timedelta,
    pre_window: timedelta,
    post_window: timedelta,
    seed: int = 42,
    max_attempts_factor: int = 50,
) -> list[datetime]:
    """
    Draw ``count`` baseline t0 values.

    A candidate is rejected when it lies closer than ``min_spacing`` to an
    accepted one, or inside ``[start - post_window, end + pre_window]`` of any
    excluded window.

    Args:
        prices: Price history bounding the candidates
        excluded_windows: Real event windows as ``(start, end)``
        count: Number of values to draw
        min_spacing: Minimum distance between accepted values
        pre_window: PRE length; candidates start at first bar + pre_window
        post_window: POST length; candidates end at last bar - post_window
        seed: RNG seed
        max_attempts_factor: Attempts allowed per requested value

    Returns:
        Accepted values in draw order

    Raises:
        TimeRangeError: If the history is shorter than the two windows
        BaselineSamplingError: If fewer than ``count`` values were accepted
    """
    if count <= 0:
        return []

    rnd = random.Random(seed)

    min_time = prices.first.ts + pre_window
    max_time = prices.last.ts - post_window
    if max_time < min_time:
        raise TimeRangeError(
            "price history too short for the pre/post windows",
            start=min_time,
            end=max_time,
        )
    span_seconds = (max_time - min_time).total_seconds()

    accepted: list[datetime] = []
    attempts = 0
    max_attempts = count * max_attempts_factor

    while len(accepted) < count and attempts < max_attempts:
        attempts += 1
        t0 = min_time + timedelta(seconds=rnd.random() * span_seconds)

        if any(abs(x - t0) < min_spacing for x in accepted):
            continue

        if any(start - post_window <= t0 <= end + pre_window for start, end in excluded_windows):
            continue

        accepted.append(t0)

    if len(accepted) < count:
        raise BaselineSamplingError(
            "Could not generate enough baseline t0 values",
            requested=count,
            accepted=len(accepted),
        )

    logger.debug("Baseline sampled", count=count, attempts=attempts, seed=seed)
    return accepted
