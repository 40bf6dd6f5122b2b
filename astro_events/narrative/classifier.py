"""
Rule-based narrative classifier.

Each taxonomy is an ordered list of threshold checks; the first rule that
matches decides the label. The functions are pure.
"""

from dataclasses import dataclass

from ..config.defaults import (
    DirectionThresholds,
    ReactionThresholds,
    RegimeThresholds,
)
from ..metrics.event_study import EventMetrics
from .labels import DirectionBias, MarketRegime, ReactionPattern

REGIME = RegimeThresholds()
REACTION = ReactionThresholds()
DIRECTION = DirectionThresholds()


@dataclass(frozen=True)
class EventLabels:
    """The three labels assigned to one occurrence."""
    regime: MarketRegime
    pattern: ReactionPattern
    bias: DirectionBias

    @property
    def summary(self) -> str:
        return f"{self.regime.value} | {self.pattern.value} | {self.bias.value}"


def market_regime(m: EventMetrics, t: RegimeThresholds = REGIME) -> MarketRegime:
    """Regime from post-window range and volume ratio."""
    if m.range_post >= t.stress_range and m.vol_ratio_post >= t.stress_vol_ratio:
        return MarketRegime.STRESS

    if m.range_post >= t.high_range and m.vol_ratio_post >= t.high_vol_ratio:
        return MarketRegime.HIGH_VOLATILITY

    if m.range_post >= t.elevated_range and m.vol_ratio_post >= t.elevated_vol_ratio:
        return MarketRegime.ELEVATED_VOLATILITY

    return MarketRegime.CALM


def reaction_pattern(m: EventMetrics, t: ReactionThresholds = REACTION) -> ReactionPattern:
    """Reaction pattern from segment returns and ranges."""
    if abs(m.return_pre) < t.quiet_pre_return and abs(m.return_event) >= t.event_move:
        return ReactionPattern.EVENT_DRIVEN_SHOCK

    if abs(m.return_event) >= t.event_move and abs(m.return_post) >= abs(m.return_event):
        return ReactionPattern.EVENT_TRIGGERED_CONTINUATION

    if m.return_event * m.return_post < 0 and abs(m.return_post) >= t.reversal_post_return:
        return ReactionPattern.EVENT_REVERSAL

    if m.range_event >= t.expansion_range_mult * m.range_pre:
        return ReactionPattern.VOLATILITY_EXPANSION

    return ReactionPattern.LOW_IMPACT


def direction_bias(m: EventMetrics, t: DirectionThresholds = DIRECTION) -> DirectionBias:
    """Bias from event and post returns; bearish is checked first."""
    if m.return_event <= t.bearish_return or m.return_post <= t.bearish_return:
        return DirectionBias.BEARISH

    if m.return_event >= t.bullish_return or m.return_post >= t.bullish_return:
        return DirectionBias.BULLISH

    return DirectionBias.UNCERTAIN


def classify(
    m: EventMetrics,
    regime: RegimeThresholds = REGIME,
    reaction: ReactionThresholds = REACTION,
    direction: DirectionThresholds = DIRECTION,
) -> EventLabels:
    """Assign all three labels."""
    return EventLabels(
        regime=market_regime(m, regime),
        pattern=reaction_pattern(m, reaction),
        bias=direction_bias(m, direction),
    )


def summary_line(m: EventMetrics) -> str:
    """``"<regime> | <pattern> | <bias>"``"""
    return classify(m).summary
