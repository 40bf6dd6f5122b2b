"""Class aggregation, baseline sampling and event vs baseline comparison"""

from .aggregator import (
    ClassifiedEvent,
    EventClassSummary,
    compute_event_class_summary,
    dominant_label,
    median,
    percentile,
)
from .baseline import generate_random_t0
from .comparison import ClassComparison, compare

__all__ = [
    "ClassComparison",
    "ClassifiedEvent",
    "EventClassSummary",
    "compare",
    "compute_event_class_summary",
    "dominant_label",
    "generate_random_t0",
    "median",
    "percentile",
]
