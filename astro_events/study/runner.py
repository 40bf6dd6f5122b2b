"""
Event study coordinator.

Runs the full pipeline for one event class: periods -> representative t0 ->
metrics -> labels -> class summary, then the same for a random baseline and
finally the event vs baseline comparison.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional

from ..analytics.aggregator import ClassifiedEvent, EventClassSummary, compute_event_class_summary
from ..analytics.baseline import generate_random_t0
from ..analytics.comparison import ClassComparison, compare
from ..config.defaults import DefaultConfig, get_default_config
from ..data.series import PriceSeries
from ..logging.config import get_study_logger, log_classification
from ..metrics.event_study import compute_event_metrics
from ..search.models import Period

logger = get_study_logger(__name__)


@dataclass(frozen=True)
class StudyResult:
    """Outcome of one event vs baseline study."""
    event_code: str
    event_rows: tuple[ClassifiedEvent, ...]
    baseline_rows: tuple[ClassifiedEvent, ...]
    event_summary: EventClassSummary
    baseline_summary: EventClassSummary
    comparison: Optional[ClassComparison] = field(default=None)


class EventStudyRunner:
    """Computes metrics, labels and summaries for event and baseline occurrences."""

    def __init__(self, prices: PriceSeries, config: Optional[DefaultConfig] = None):
        self.prices = prices
        self.config = config or get_default_config()

    @property
    def pre_window(self) -> timedelta:
        return timedelta(hours=self.config.windows.pre_hours)

    @property
    def post_window(self) -> timedelta:
        return timedelta(hours=self.config.windows.post_hours)

    def classify_occurrence(
        self,
        t0: datetime,
        event_start: Optional[datetime] = None,
        event_end: Optional[datetime] = None,
    ) -> ClassifiedEvent:
        """Metrics and labels for a single occurrence."""
        metrics = compute_event_metrics(
            self.prices, t0, self.pre_window, self.post_window, event_start, event_end
        )
        row = ClassifiedEvent.from_metrics(
            metrics,
            regime=self.config.regime,
            reaction=self.config.reaction,
            direction=self.config.direction,
        )
        log_classification(logger, t0, row.regime.value, row.pattern.value, row.bias.value)
        return row

    def event_rows(self, periods: Sequence[Period]) -> list[ClassifiedEvent]:
        """One row per period, EVENT segment = the period itself."""
        return [
            self.classify_occurrence(p.representative_t0(), p.start_utc, p.end_utc)
            for p in periods
        ]

    def baseline_rows(
        self,
        excluded_windows: Sequence[tuple[datetime, datetime]],
        count: int,
    ) -> list[ClassifiedEvent]:
        """
        Rows for ``count`` random t0 values away from ``excluded_windows``.

        Each baseline occurrence gets a synthetic EVENT window of
        ``baseline_event_hours`` centred on its t0.

        Raises:
            BaselineSamplingError: If the sampler cannot place ``count`` values
        """
        params = self.config.baseline
        t0s = generate_random_t0(
            self.prices,
            excluded_windows,
            count,
            min_spacing=timedelta(hours=params.min_spacing_hours),
            pre_window=self.pre_window,
            post_window=self.post_window,
            seed=params.seed,
            max_attempts_factor=params.max_attempts_factor,
        )

        half = timedelta(hours=self.config.windows.baseline_event_hours) / 2
        return [self.classify_occurrence(t0, t0 - half, t0 + half) for t0 in t0s]

    def run(
        self,
        event_code: str,
        periods: Sequence[Period],
        baseline_count: Optional[int] = None,
    ) -> StudyResult:
        """
        Study one event class against a random baseline.

        Args:
            event_code: Class label, e.g. ``"MARS-SATURN longitude_span"``
            periods: Detected periods of the class
            baseline_count: Baseline sample size, defaults to ``len(periods)``

        Returns:
            Study result; ``comparison`` is None when either side is empty
        """
        rows = self.event_rows(periods)
        event_summary = compute_event_class_summary(event_code, rows, self.config.risk)
        logger.info(
            "Event class summarized",
            event_code=event_code,
            occurrences=event_summary.total_occurrences,
            dominant_regime=event_summary.dominant_regime.value if event_summary.dominant_regime else None,
        )

        if baseline_count is None:
            baseline_count = len(periods)

        excluded = [(p.start_utc, p.end_utc) for p in periods]
        base_rows = self.baseline_rows(excluded, baseline_count)
        baseline_summary = compute_event_class_summary(
            f"{event_code} baseline", base_rows, self.config.risk
        )

        comparison = None
        if event_summary.total_occurrences and baseline_summary.total_occurrences:
            comparison = compare(event_summary, baseline_summary, self.config.comparison)
            logger.info(
                "Event class compared with baseline",
                event_code=event_code,
                higher_shock_risk=comparison.higher_shock_risk,
                higher_drawdown_risk=comparison.higher_drawdown_risk,
                higher_volatility=comparison.higher_volatility,
            )
        else:
            logger.warning("Comparison skipped, empty class", event_code=event_code)

        return StudyResult(
            event_code=event_code,
            event_rows=tuple(rows),
            baseline_rows=tuple(base_rows),
            event_summary=event_summary,
            baseline_summary=baseline_summary,
            comparison=comparison,
        )
