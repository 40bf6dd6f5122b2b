"""
Class-level aggregation of classified occurrences.

Turns per-occurrence metrics and labels into counts, post-window averages
and medians, dominant labels, risk flags and a one-paragraph narrative.
"""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, TypeVar

from ..config.defaults import RiskThresholds
from ..metrics.event_study import EventMetrics
from ..narrative.classifier import classify
from ..narrative.labels import DirectionBias, MarketRegime, ReactionPattern

L = TypeVar("L", bound=Enum)

RISK = RiskThresholds()

NO_OCCURRENCES = "No occurrences."


@dataclass(frozen=True)
class ClassifiedEvent:
    """One occurrence with its three labels."""
    metrics: EventMetrics
    regime: MarketRegime
    pattern: ReactionPattern
    bias: DirectionBias

    @classmethod
    def from_metrics(cls, metrics: EventMetrics, **thresholds) -> "ClassifiedEvent":
        """Classify ``metrics``; ``thresholds`` are passed on to :func:`classify`."""
        labels = classify(metrics, **thresholds)
        return cls(metrics, labels.regime, labels.pattern, labels.bias)


@dataclass(frozen=True)
class EventClassSummary:
    """Aggregate of one semantic class of occurrences."""
    event_code: str
    total_occurrences: int

    regime_counts: dict[MarketRegime, int] = field(default_factory=dict)
    pattern_counts: dict[ReactionPattern, int] = field(default_factory=dict)
    bias_counts: dict[DirectionBias, int] = field(default_factory=dict)

    # Post-window aggregates
    avg_return_post: float = 0.0
    median_return_post: float = 0.0
    avg_max_dd_post: float = 0.0
    median_max_dd_post: float = 0.0
    avg_range_post: float = 0.0
    median_range_post: float = 0.0
    avg_vol_ratio_post: float = 0.0
    median_vol_ratio_post: float = 0.0

    dominant_regime: Optional[MarketRegime] = None
    dominant_pattern: Optional[ReactionPattern] = None
    dominant_bias: Optional[DirectionBias] = None

    volatility_amplifier: bool = False
    bearish_tail: bool = False
    bullish_tail: bool = False

    narrative: str = NO_OCCURRENCES

    def count(self, label: Enum) -> int:
        """Occurrences carrying ``label`` in its taxonomy."""
        for counts in (self.regime_counts, self.pattern_counts, self.bias_counts):
            if label in counts:
                return counts[label]
        return 0

    @property
    def shock_share(self) -> float:
        if self.total_occurrences == 0:
            return 0.0
        return self.count(ReactionPattern.EVENT_DRIVEN_SHOCK) / self.total_occurrences

    @property
    def high_stress_share(self) -> float:
        if self.total_occurrences == 0:
            return 0.0
        high = self.count(MarketRegime.HIGH_VOLATILITY) + self.count(MarketRegime.STRESS)
        return high / self.total_occurrences


def average(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


def median(values: Iterable[float]) -> float:
    """Middle value; mean of the two middle values for even counts; 0 if empty."""
    ordered = sorted(values)
    n = len(ordered)
    if n == 0:
        return 0.0
    mid = n // 2
    if n % 2 == 1:
        return ordered[mid]
    return (ordered[mid - 1] + ordered[mid]) / 2.0


def percentile(values: Iterable[float], p: float) -> float:
    """
    Linear-interpolated percentile with ``p`` in [0, 1].

    ``p <= 0`` gives the minimum, ``p >= 1`` the maximum; otherwise the value
    at position ``(n - 1) * p`` of the sorted list, interpolated between the
    two bracketing elements.
    """
    ordered = sorted(values)
    if not ordered:
        return 0.0
    if p <= 0:
        return ordered[0]
    if p >= 1:
        return ordered[-1]

    pos = (len(ordered) - 1) * p
    lo = int(pos)
    hi = lo + 1 if pos > lo else lo
    if lo == hi:
        return ordered[lo]

    w = pos - lo
    return ordered[lo] * (1 - w) + ordered[hi] * w


def dominant_label(counts: Mapping[L, int]) -> L:
    """Label with the highest count; ties go to the ordinally smallest display value."""
    return min(counts, key=lambda label: (-counts[label], label.value))


def _count_labels(values: Iterable[L], taxonomy: type[L]) -> dict[L, int]:
    counts = {label: 0 for label in taxonomy}
    for value in values:
        counts[value] += 1
    return counts


def _pct(x: float) -> str:
    return f"{x * 100:.2f}%"


def _ratio(x: float) -> str:
    text = f"{x:.3f}".rstrip("0").rstrip(".")
    return text if text not in ("", "-0") else "0"


def compute_event_class_summary(
    event_code: str,
    rows: Sequence[ClassifiedEvent],
    risk: RiskThresholds = RISK,
) -> EventClassSummary:
    """
    Aggregate classified occurrences of one class.

    Args:
        event_code: Class label used in the narrative
        rows: Classified occurrences; may be empty
        risk: Risk heuristic thresholds

    Returns:
        Summary; an empty ``rows`` gives zero counts and ``"No occurrences."``
    """
    if not rows:
        return EventClassSummary(
            event_code=event_code,
            total_occurrences=0,
            regime_counts=_count_labels((), MarketRegime),
            pattern_counts=_count_labels((), ReactionPattern),
            bias_counts=_count_labels((), DirectionBias),
        )

    total = len(rows)

    regime_counts = _count_labels((r.regime for r in rows), MarketRegime)
    pattern_counts = _count_labels((r.pattern for r in rows), ReactionPattern)
    bias_counts = _count_labels((r.bias for r in rows), DirectionBias)

    ret_post = [r.metrics.return_post for r in rows]
    dd_post = [r.metrics.max_dd_post for r in rows]
    range_post = [r.metrics.range_post for r in rows]
    vol_ratio_post = [r.metrics.vol_ratio_post for r in rows]

    avg_ret, med_ret = average(ret_post), median(ret_post)
    avg_dd, med_dd = average(dd_post), median(dd_post)
    avg_range, med_range = average(range_post), median(range_post)
    avg_vol, med_vol = average(vol_ratio_post), median(vol_ratio_post)

    dom_regime = dominant_label(regime_counts)
    dom_pattern = dominant_label(pattern_counts)
    dom_bias = dominant_label(bias_counts)

    high_stress = (regime_counts[MarketRegime.HIGH_VOLATILITY] + regime_counts[MarketRegime.STRESS]) / total
    amplifier = (
        high_stress >= risk.high_stress_share
        or avg_range >= risk.avg_range_post
        or avg_vol >= risk.avg_vol_ratio_post
    )
    bearish_tail = percentile(dd_post, risk.bearish_tail_percentile) <= risk.bearish_tail_dd
    bullish_tail = percentile(ret_post, risk.bullish_tail_percentile) >= risk.bullish_tail_return

    if amplifier:
        impact = "Often coincides with volatility expansion / elevated activity."
    else:
        impact = "Typically low-impact in the post window."

    sentences = [
        f"{event_code}: {total} occurrences.",
        f"Dominant regime: {dom_regime.value}. Dominant reaction: {dom_pattern.value}. "
        f"Direction: {dom_bias.value}.",
        f"Post-window medians: Return {_pct(med_ret)}, MaxDD {_pct(med_dd)}, "
        f"Range {_pct(med_range)}, VolRatio {_ratio(med_vol)}.",
        impact,
    ]
    if bearish_tail:
        sentences.append("Bearish tail-risk present (deep drawdowns in worst cases).")
    if bullish_tail:
        sentences.append("Bullish tail upside present (strong rebounds in best cases).")
    narrative = " ".join(sentences)

    return EventClassSummary(
        event_code=event_code,
        total_occurrences=total,
        regime_counts=regime_counts,
        pattern_counts=pattern_counts,
        bias_counts=bias_counts,
        avg_return_post=avg_ret,
        median_return_post=med_ret,
        avg_max_dd_post=avg_dd,
        median_max_dd_post=med_dd,
        avg_range_post=avg_range,
        median_range_post=med_range,
        avg_vol_ratio_post=avg_vol,
        median_vol_ratio_post=med_vol,
        dominant_regime=dom_regime,
        dominant_pattern=dom_pattern,
        dominant_bias=dom_bias,
        volatility_amplifier=amplifier,
        bearish_tail=bearish_tail,
        bullish_tail=bullish_tail,
        narrative=narrative,
    )
