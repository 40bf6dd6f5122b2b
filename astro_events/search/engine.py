"""
Grid scanner: walks a fixed time step, collects hits, merges them into periods.

Works in UTC only. All domain-specific matching lives in the condition.
"""

from collections.abc import Sequence
from datetime import timedelta

from ..ephemeris import Ephemeris
from ..errors import EmptyInputError, TimeRangeError
from ..logging.config import get_scan_logger, log_period_detected
from ..utils.time import time_grid, validate_time_range
from .conditions import EventCondition
from .models import Hit, Period, SearchRequest

logger = get_scan_logger(__name__)


def validate_request(request: SearchRequest) -> None:
    """
    Check scan preconditions.

    Raises:
        TimezoneError: If the bounds are not UTC
        TimeRangeError: If ``end_utc <= start_utc`` or ``step <= 0``
        EmptyInputError: If no bodies are requested
    """
    validate_time_range(request.start_utc, request.end_utc)
    if request.step <= timedelta(0):
        raise TimeRangeError("step must be positive", start=request.start_utc, end=request.end_utc)
    if not request.bodies:
        raise EmptyInputError("bodies must be non-empty", data_type="bodies")


def merge_hits_into_periods(hits: Sequence[Hit], max_gap: timedelta) -> list[Period]:
    """
    Greedily merge hits into continuous periods.

    A hit joins the current period when its distance from the period's last
    hit is at most ``max_gap``; otherwise the period is closed.

    Args:
        hits: Hits in any order
        max_gap: Largest tolerated distance between consecutive hits

    Returns:
        Periods in ascending time order, empty if there are no hits
    """
    if not hits:
        return []

    ordered = sorted(hits, key=lambda h: h.time_utc)

    periods = []
    current = [ordered[0]]

    for hit in ordered[1:]:
        if hit.time_utc - current[-1].time_utc <= max_gap:
            current.append(hit)
        else:
            periods.append(Period(current[0].time_utc, current[-1].time_utc, tuple(current)))
            current = [hit]

    periods.append(Period(current[0].time_utc, current[-1].time_utc, tuple(current)))
    return periods


class TransitSearchEngine:
    """Scans a time grid with one condition and reports merged periods."""

    def __init__(self, ephemeris: Ephemeris, condition: EventCondition):
        if ephemeris is None:
            raise ValueError("ephemeris is required")
        if condition is None:
            raise ValueError("condition is required")
        self.ephemeris = ephemeris
        self.condition = condition

    def find_hits(self, request: SearchRequest) -> list[Hit]:
        """Evaluate the condition at every grid step and keep the matches."""
        validate_request(request)

        hits = []
        for t in time_grid(request.start_utc, request.end_utc, request.step):
            states = self.ephemeris.get_states(t, request.bodies)
            if self.condition.is_match(states, request):
                hits.append(Hit(t, states))
        return hits

    def find_periods(self, request: SearchRequest) -> list[Period]:
        """
        Scan ``request`` and merge the hits.

        Returns:
            Ordered list of periods (empty if nothing matched)
        """
        hits = self.find_hits(request)
        periods = merge_hits_into_periods(hits, request.effective_max_gap)

        body_names = [b.name for b in request.bodies]
        for period in periods:
            log_period_detected(
                logger,
                condition=self.condition.code,
                bodies=body_names,
                start_utc=period.start_utc,
                end_utc=period.end_utc,
                hit_count=len(period.hits),
            )

        logger.info(
            "Grid scan completed",
            condition=self.condition.code,
            bodies=body_names,
            tolerance_deg=request.tolerance_deg,
            hits=len(hits),
            periods=len(periods),
        )
        return periods
