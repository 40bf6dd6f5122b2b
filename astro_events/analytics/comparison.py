"""Effect-size comparison of an event class against a baseline class."""

from dataclasses import dataclass

from ..config.defaults import ComparisonThresholds
from ..errors import EmptySummaryError
from .aggregator import EventClassSummary

COMPARISON = ComparisonThresholds()

SIMILAR_TO_BASELINE = "Market behaviour around this event is statistically similar to baseline."


@dataclass(frozen=True)
class ClassComparison:
    """Differences are ``event - baseline``."""
    event_code: str

    shock_share_diff: float
    high_stress_share_diff: float
    median_max_dd_post_diff: float
    median_return_post_diff: float
    median_range_post_diff: float
    median_vol_ratio_post_diff: float

    higher_shock_risk: bool
    higher_drawdown_risk: bool
    higher_volatility: bool

    summary: str

    @property
    def any_flag(self) -> bool:
        return self.higher_shock_risk or self.higher_drawdown_risk or self.higher_volatility


def _pct(x: float) -> str:
    return f"{x * 100:.1f}%"


def compare(
    event: EventClassSummary,
    baseline: EventClassSummary,
    thresholds: ComparisonThresholds = COMPARISON,
) -> ClassComparison:
    """
    Compare an event class with a baseline class.

    Raises:
        EmptySummaryError: If either summary has no occurrences
    """
    for side in (event, baseline):
        if side.total_occurrences == 0:
            raise EmptySummaryError(
                "Both event and baseline summaries must have occurrences",
                event_code=side.event_code,
            )

    shock_diff = event.shock_share - baseline.shock_share
    stress_diff = event.high_stress_share - baseline.high_stress_share
    dd_diff = event.median_max_dd_post - baseline.median_max_dd_post
    ret_diff = event.median_return_post - baseline.median_return_post
    range_diff = event.median_range_post - baseline.median_range_post
    vol_diff = event.median_vol_ratio_post - baseline.median_vol_ratio_post

    higher_shock = shock_diff > thresholds.shock_share_diff
    higher_dd = dd_diff < thresholds.max_dd_diff
    higher_vol = stress_diff > thresholds.high_stress_share_diff or range_diff > thresholds.range_diff

    parts = []
    if higher_shock:
        parts.append(f"higher incidence of event-driven shocks ({_pct(shock_diff)} vs baseline).")
    if higher_vol:
        parts.append(f"elevated volatility regime frequency ({_pct(stress_diff)} High/Stress share).")
    if higher_dd:
        parts.append(f"worse post-event drawdowns (Δ median MaxDD {_pct(dd_diff)}).")

    body = " ".join(parts) if parts else SIMILAR_TO_BASELINE

    return ClassComparison(
        event_code=event.event_code,
        shock_share_diff=shock_diff,
        high_stress_share_diff=stress_diff,
        median_max_dd_post_diff=dd_diff,
        median_return_post_diff=ret_diff,
        median_range_post_diff=range_diff,
        median_vol_ratio_post_diff=vol_diff,
        higher_shock_risk=higher_shock,
        higher_drawdown_risk=higher_dd,
        higher_volatility=higher_vol,
        summary=f"{event.event_code}: {body}",
    )
