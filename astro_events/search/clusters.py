"""
N-body cluster detection over a universe of candidate bodies.

At every grid step the detector looks for the largest subset of bodies whose
positions fit inside a tolerance band, optionally restricted to bodies that
share a zodiac sign. Consecutive steps that yield the same subset produce a
single event.
"""

from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Optional

from ..data.models import PriceBar
from ..data.series import PriceSeries
from ..ephemeris import Body, Ephemeris
from ..errors import EmptyInputError
from ..geometry import degree_in_sign, normalize360, sign_index
from ..logging.config import get_scan_logger
from ..utils.time import time_grid, validate_time_range

logger = get_scan_logger(__name__)

LONGITUDE_SPAN = "longitude_span"
SAME_DEGREE_IN_SIGN = "same_degree_in_sign"

NO_PARTITION = -1


@dataclass(frozen=True)
class BodyPosition:
    """Normalized position of one body with derived sign fields."""
    body: Body
    longitude: float
    speed: float
    sign: int                  # 0..11
    degree_in_sign: float      # 0..30

    @classmethod
    def from_state(cls, body: Body, longitude: float, speed: float) -> "BodyPosition":
        lon = normalize360(longitude)
        return cls(
            body=body,
            longitude=lon,
            speed=speed,
            sign=sign_index(lon),
            degree_in_sign=degree_in_sign(lon),
        )


@dataclass(frozen=True)
class ConjunctionSpec:
    """What the cluster detector searches for."""
    condition_code: str                  # LONGITUDE_SPAN | SAME_DEGREE_IN_SIGN
    bodies_universe: tuple[Body, ...]
    min_bodies: int = 2
    tolerance_deg: float = 1.0
    require_same_sign: bool = True       # only used by LONGITUDE_SPAN

    def __post_init__(self):
        object.__setattr__(self, "bodies_universe", tuple(Body(b) for b in self.bodies_universe))
        if self.condition_code not in (LONGITUDE_SPAN, SAME_DEGREE_IN_SIGN):
            raise ValueError(f"Unknown condition: {self.condition_code!r}")
        if self.min_bodies < 2:
            raise ValueError("min_bodies must be at least 2")


@dataclass(frozen=True)
class ClusterMatch:
    """Largest body subset found at one grid step."""
    bodies: tuple[BodyPosition, ...]
    metric: float                               # achieved span in degrees
    metadata: dict[str, Any] = field(default_factory=dict, hash=False, compare=False)

    @property
    def key(self) -> frozenset[Body]:
        """Body-id set used for deduplication across steps."""
        return frozenset(p.body for p in self.bodies)

    @property
    def size(self) -> int:
        return len(self.bodies)


@dataclass(frozen=True)
class ClusterScanState:
    """Loop state carried from one grid step to the next."""
    previous_key: Optional[frozenset[Body]] = None

    def advance(self, match: Optional[ClusterMatch]) -> tuple[bool, "ClusterScanState"]:
        """
        Decide whether ``match`` is a new event.

        Returns:
            (emit, next_state). A step without a match resets the state, so
            the same subset reappearing later is reported again.
        """
        if match is None:
            return False, ClusterScanState()
        key = match.key
        if self.previous_key is not None and self.previous_key == key:
            return False, self
        return True, ClusterScanState(previous_key=key)


@dataclass(frozen=True)
class ConjunctionEvent:
    """One emitted cluster occurrence."""
    condition_code: str
    period_index: int
    hit_index: int
    minutes_from_start: int
    time_utc: datetime
    bodies: tuple[BodyPosition, ...]
    metric: float
    metadata: dict[str, Any] = field(default_factory=dict, hash=False, compare=False)
    bar: Optional[PriceBar] = None

    @property
    def cluster_key(self) -> str:
        """Stable text key of the body subset, e.g. ``"2-3-5"``."""
        return "-".join(str(int(p.body)) for p in sorted(self.bodies, key=lambda p: p.body))


def best_window_by_span(
    items: Sequence[BodyPosition],
    key: Callable[[BodyPosition], float],
    max_span: float,
) -> list[BodyPosition]:
    """
    Largest contiguous window with ``key(last) - key(first) <= max_span``.

    ``items`` must be sorted by ``key``. Two-pointer sweep: the right index
    only moves forward, so the search is linear after sorting. On equal
    sizes the leftmost window wins.
    """
    best_i, best_j = 0, -1
    j = 0

    for i in range(len(items)):
        if j < i:
            j = i
        while j + 1 < len(items) and key(items[j + 1]) - key(items[i]) <= max_span:
            j += 1

        if j - i > best_j - best_i:
            best_i, best_j = i, j

    if best_j < best_i:
        return []
    return list(items[best_i:best_j + 1])


def _degree_key(p: BodyPosition) -> float:
    return p.degree_in_sign


def find_longitude_span_cluster(
    positions: Sequence[BodyPosition],
    min_bodies: int,
    max_span_deg: float,
    require_same_sign: bool,
) -> Optional[ClusterMatch]:
    """
    Largest cluster by span, optionally partitioned by sign.

    Partitions are searched in ascending sign order and a later partition
    only replaces the best match when strictly larger, so ties go to the
    lowest sign.
    """
    if require_same_sign:
        partitions: dict[int, list[BodyPosition]] = {}
        for p in positions:
            partitions.setdefault(p.sign, []).append(p)
        groups = sorted(partitions.items())
    else:
        groups = [(NO_PARTITION, list(positions))]

    best: Optional[ClusterMatch] = None

    for partition_key, group in groups:
        if len(group) < min_bodies:
            continue

        ordered = sorted(group, key=_degree_key)
        window = best_window_by_span(ordered, _degree_key, max_span_deg)
        if len(window) < min_bodies:
            continue

        span = window[-1].degree_in_sign - window[0].degree_in_sign
        metadata = {
            "require_same_sign": require_same_sign,
            "sign": partition_key,
            "max_span_deg": max_span_deg,
            "span_deg": span,
        }

        if best is None or len(window) > best.size:
            best = ClusterMatch(tuple(window), span, metadata)

    return best


def find_same_degree_cluster(
    positions: Sequence[BodyPosition],
    min_bodies: int,
    tolerance_deg: float,
) -> Optional[ClusterMatch]:
    """Largest cluster by degree-in-sign across all signs."""
    if len(positions) < min_bodies:
        return None

    ordered = sorted(positions, key=_degree_key)
    window = best_window_by_span(ordered, _degree_key, tolerance_deg)
    if len(window) < min_bodies:
        return None

    span = window[-1].degree_in_sign - window[0].degree_in_sign
    metadata = {"tol_deg": tolerance_deg, "span_deg": span}
    return ClusterMatch(tuple(window), span, metadata)


def find_cluster(positions: Sequence[BodyPosition], spec: ConjunctionSpec) -> Optional[ClusterMatch]:
    """Dispatch on ``spec.condition_code``."""
    if spec.condition_code == LONGITUDE_SPAN:
        return find_longitude_span_cluster(
            positions, spec.min_bodies, spec.tolerance_deg, spec.require_same_sign
        )
    return find_same_degree_cluster(positions, spec.min_bodies, spec.tolerance_deg)


class ClusterDetector:
    """Scans a time grid for N-body clusters and emits deduplicated events."""

    def __init__(self, ephemeris: Ephemeris, prices: Optional[PriceSeries] = None):
        self.ephemeris = ephemeris
        self.prices = prices

    def positions_at(self, time_utc: datetime, bodies: Sequence[Body]) -> list[BodyPosition]:
        """Normalized positions of ``bodies`` at ``time_utc``."""
        states = self.ephemeris.get_states(time_utc, bodies)
        return [BodyPosition.from_state(b, states[b].longitude, states[b].speed) for b in bodies]

    def detect_at(self, time_utc: datetime, spec: ConjunctionSpec) -> Optional[ClusterMatch]:
        """Best cluster at a single instant, None if below ``min_bodies``."""
        return find_cluster(self.positions_at(time_utc, spec.bodies_universe), spec)

    def generate(
        self,
        start_utc: datetime,
        end_utc: datetime,
        spec: ConjunctionSpec,
        step: timedelta = timedelta(minutes=60),
        period_index: int = 0,
    ) -> Iterator[ConjunctionEvent]:
        """
        Yield one event per new cluster along the grid.

        Raises:
            TimezoneError / TimeRangeError: On invalid bounds or step
            EmptyInputError: If ``spec.bodies_universe`` is empty
        """
        validate_time_range(start_utc, end_utc)
        if not spec.bodies_universe:
            raise EmptyInputError("bodies_universe must be non-empty", data_type="bodies")

        state = ClusterScanState()
        hit_index = 0

        for t in time_grid(start_utc, end_utc, step):
            match = self.detect_at(t, spec)
            emit, state = state.advance(match)
            if not emit:
                continue

            bar = self.prices.bar_at_or_before(t) if self.prices is not None else None
            event = ConjunctionEvent(
                condition_code=spec.condition_code,
                period_index=period_index,
                hit_index=hit_index,
                minutes_from_start=round((t - start_utc).total_seconds() / 60.0),
                time_utc=t,
                bodies=match.bodies,
                metric=match.metric,
                metadata=match.metadata,
                bar=bar,
            )
            hit_index += 1

            logger.debug(
                "Cluster event",
                condition=spec.condition_code,
                time_utc=t.isoformat(),
                bodies=[p.body.name for p in match.bodies],
                span_deg=match.metric,
            )
            yield event
