"""
Data models for grid scans: requests, hits and merged periods.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional

from ..ephemeris import Body, BodyState
from ..utils.time import median_timestamp, midpoint


@dataclass(frozen=True)
class SearchRequest:
    """Parameters of one scan over a UTC interval."""
    start_utc: datetime
    end_utc: datetime
    step: timedelta
    tolerance_deg: float
    bodies: tuple[Body, ...]
    max_gap_to_merge: Optional[timedelta] = None     # defaults to 2x step
    require_same_sign: bool = False

    def __post_init__(self):
        # lists are accepted for convenience; stored as a tuple
        object.__setattr__(self, "bodies", tuple(Body(b) for b in self.bodies))

    @property
    def effective_max_gap(self) -> timedelta:
        if self.max_gap_to_merge is not None:
            return self.max_gap_to_merge
        return self.step * 2


@dataclass(frozen=True)
class Hit:
    """Grid instant at which the condition held."""
    time_utc: datetime
    bodies: Mapping[Body, BodyState] = field(hash=False)


@dataclass(frozen=True)
class Period:
    """Continuous run of hits with no gap above the merge threshold."""
    start_utc: datetime
    end_utc: datetime
    hits: tuple[Hit, ...] = ()

    @property
    def duration(self) -> timedelta:
        return self.end_utc - self.start_utc

    @property
    def duration_hours(self) -> float:
        return self.duration.total_seconds() / 3600.0

    def representative_t0(self) -> datetime:
        """Median hit time, or the interval midpoint when no hits are attached."""
        t0 = median_timestamp([h.time_utc for h in self.hits])
        if t0 is None:
            return midpoint(self.start_utc, self.end_utc)
        return t0
