"""Deterministic narrative labels for event metrics"""

from .classifier import EventLabels, classify, direction_bias, market_regime, reaction_pattern, summary_line
from .labels import DirectionBias, MarketRegime, ReactionPattern

__all__ = [
    "DirectionBias",
    "EventLabels",
    "MarketRegime",
    "ReactionPattern",
    "classify",
    "direction_bias",
    "market_regime",
    "reaction_pattern",
    "summary_line",
]
