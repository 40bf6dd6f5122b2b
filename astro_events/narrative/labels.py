"""Narrative label taxonomies. Values are the display strings."""

from enum import Enum


class MarketRegime(str, Enum):
    """Post-window volatility regime."""
    CALM = "Calm"
    ELEVATED_VOLATILITY = "Elevated Volatility"
    HIGH_VOLATILITY = "High Volatility"
    STRESS = "Stress"


class ReactionPattern(str, Enum):
    """How price reacted across PRE, EVENT and POST."""
    LOW_IMPACT = "Low Impact"
    VOLATILITY_EXPANSION = "Volatility Expansion"
    EVENT_DRIVEN_SHOCK = "Event-Driven Shock"
    EVENT_TRIGGERED_CONTINUATION = "Event-Triggered Continuation"
    EVENT_REVERSAL = "Event Reversal"


class DirectionBias(str, Enum):
    """Sign of the dominant move."""
    BULLISH = "Bullish Bias"
    BEARISH = "Bearish Bias"
    UNCERTAIN = "Direction Uncertain"
