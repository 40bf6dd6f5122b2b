"""Price metrics computed around detected events and periods"""

from .event_study import EventMetrics, compute_event_metrics, drawdown_runup, range_pct, safe_return
from .hit_market import HitMarket, enrich_period_hits, enrich_periods
from .period_stats import PeriodMarketStats, analyze_period
from .volatility import VolatilityWindow, find_high_volatility_windows, merge_overlapping

__all__ = [
    "EventMetrics",
    "HitMarket",
    "PeriodMarketStats",
    "VolatilityWindow",
    "analyze_period",
    "compute_event_metrics",
    "drawdown_runup",
    "enrich_period_hits",
    "enrich_periods",
    "find_high_volatility_windows",
    "merge_overlapping",
    "range_pct",
    "safe_return",
]
