"""CSV exporters"""

from .csv_export import (
    EVENT_METRICS_HEADER,
    HITS_MARKET_HEADER,
    export_event_metrics_csv,
    export_hits_csv,
    export_period_stats_csv,
    export_periods_csv,
    export_volatility_csv,
)

__all__ = [
    "EVENT_METRICS_HEADER",
    "HITS_MARKET_HEADER",
    "export_event_metrics_csv",
    "export_hits_csv",
    "export_period_stats_csv",
    "export_periods_csv",
    "export_volatility_csv",
]
