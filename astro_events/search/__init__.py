"""
Grid scanning, condition evaluation and N-body cluster detection.
"""

from .batch import is_valid_combination, iter_body_combinations, scan_combinations
from .clusters import (
    LONGITUDE_SPAN,
    SAME_DEGREE_IN_SIGN,
    BodyPosition,
    ClusterDetector,
    ClusterMatch,
    ClusterScanState,
    ConjunctionEvent,
    ConjunctionSpec,
    best_window_by_span,
    find_cluster,
    find_longitude_span_cluster,
    find_same_degree_cluster,
)
from .conditions import (
    CONDITIONS,
    EventCondition,
    LongitudeConjunctionCondition,
    RetrogradeCondition,
    SameDegreeInSignCondition,
    get_condition,
)
from .engine import TransitSearchEngine, merge_hits_into_periods, validate_request
from .models import Hit, Period, SearchRequest

__all__ = [
    # Models
    "Hit",
    "Period",
    "SearchRequest",
    # Conditions
    "CONDITIONS",
    "EventCondition",
    "LongitudeConjunctionCondition",
    "RetrogradeCondition",
    "SameDegreeInSignCondition",
    "get_condition",
    # Grid scanner
    "TransitSearchEngine",
    "merge_hits_into_periods",
    "validate_request",
    # Clusters
    "LONGITUDE_SPAN",
    "SAME_DEGREE_IN_SIGN",
    "BodyPosition",
    "ClusterDetector",
    "ClusterMatch",
    "ClusterScanState",
    "ConjunctionEvent",
    "ConjunctionSpec",
    "best_window_by_span",
    "find_cluster",
    "find_longitude_span_cluster",
    "find_same_degree_cluster",
    # Batch
    "is_valid_combination",
    "iter_body_combinations",
    "scan_combinations",
]
