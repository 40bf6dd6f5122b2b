"""
Body-combination enumeration and batch scanning.

Each valid combination is scanned and merged independently, so combinations
can be spread over worker threads. The ephemeris must support concurrent
reads (see :class:`astro_events.ephemeris.Ephemeris`).
"""

from collections.abc import Callable, Iterable, Iterator, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from itertools import combinations
from typing import Optional

from ..ephemeris import Body, Ephemeris
from ..errors import EmptyInputError
from ..logging.config import get_scan_logger
from .conditions import EventCondition
from .engine import TransitSearchEngine, validate_request
from .models import Period, SearchRequest

logger = get_scan_logger(__name__)

# Alternative computations of the same point; never combined with each other.
EXCLUSIVE_VARIANTS: tuple[frozenset[Body], ...] = (
    frozenset({Body.MEAN_NODE, Body.TRUE_NODE}),
    frozenset({Body.MEAN_APOG, Body.OSCU_APOG}),
)


def is_valid_combination(bodies: Iterable[Body]) -> bool:
    """False when the combination holds two variants of the same point."""
    members = set(bodies)
    return not any(variants <= members for variants in EXCLUSIVE_VARIANTS)


def iter_body_combinations(bodies: Sequence[Body], k: int) -> Iterator[tuple[Body, ...]]:
    """Valid ``k``-combinations of ``bodies`` in lexicographic input order."""
    if k < 1:
        raise ValueError("combination size must be at least 1")
    for combo in combinations(bodies, k):
        if is_valid_combination(combo):
            yield combo


def _scan_one(
    ephemeris: Ephemeris,
    combo: tuple[Body, ...],
    base_request: SearchRequest,
    condition_factory: Callable[[], EventCondition],
) -> list[Period]:
    request = replace(base_request, bodies=combo)
    engine = TransitSearchEngine(ephemeris, condition_factory())
    return engine.find_periods(request)


def scan_combinations(
    ephemeris: Ephemeris,
    bodies: Sequence[Body],
    sizes: Sequence[int],
    base_request: SearchRequest,
    condition_factory: Callable[[], EventCondition],
    max_workers: Optional[int] = None,
) -> dict[tuple[Body, ...], list[Period]]:
    """
    Run one scan-and-merge per valid body combination.

    Args:
        ephemeris: Oracle safe for concurrent reads
        bodies: Candidate bodies
        sizes: Combination sizes to enumerate (e.g. ``[2, 3]``)
        base_request: Interval, step and tolerance; its ``bodies`` are replaced
            by each combination
        condition_factory: Returns a fresh condition per unit of work
        max_workers: Thread count; ``None`` lets the executor decide, values
            ``<= 1`` scan serially

    Returns:
        Periods per combination, keys in enumeration order (sizes first,
        then lexicographic)

    Raises:
        EmptyInputError: If ``bodies`` or ``sizes`` is empty
    """
    if not bodies:
        raise EmptyInputError("bodies must be non-empty", data_type="bodies")
    if not sizes:
        raise EmptyInputError("sizes must be non-empty", data_type="sizes")

    combos = [combo for k in sizes for combo in iter_body_combinations(bodies, k)]
    if not combos:
        return {}

    # Fail once on a bad interval instead of once per worker.
    validate_request(replace(base_request, bodies=combos[0]))

    if max_workers is not None and max_workers <= 1:
        results = [_scan_one(ephemeris, c, base_request, condition_factory) for c in combos]
    else:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [
                executor.submit(_scan_one, ephemeris, c, base_request, condition_factory)
                for c in combos
            ]
            results = [f.result() for f in futures]

    logger.info(
        "Batch scan completed",
        combinations=len(combos),
        with_periods=sum(1 for periods in results if periods),
        total_periods=sum(len(periods) for periods in results),
    )
    return dict(zip(combos, results))
