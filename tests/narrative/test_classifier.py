"""Tests for the rule-based narrative classifier."""

from astro_events.config.defaults import RegimeThresholds
from astro_events.narrative import (
    DirectionBias,
    MarketRegime,
    ReactionPattern,
    classify,
    direction_bias,
    market_regime,
    reaction_pattern,
    summary_line,
)


class TestMarketRegime:
    """Test regime thresholds, strongest first."""

    def test_stress(self, make_metrics):
        assert market_regime(make_metrics(range_post=0.12, vol_ratio_post=1.6)) == MarketRegime.STRESS

    def test_high_volatility(self, make_metrics):
        assert market_regime(make_metrics(range_post=0.07, vol_ratio_post=1.3)) == MarketRegime.HIGH_VOLATILITY

    def test_wide_range_low_volume(self, make_metrics):
        """A stress-sized range without the volume only reaches elevated."""
        m = make_metrics(range_post=0.12, vol_ratio_post=1.0)
        assert market_regime(m) == MarketRegime.ELEVATED_VOLATILITY

    def test_calm(self, make_metrics):
        assert market_regime(make_metrics(range_post=0.02, vol_ratio_post=3.0)) == MarketRegime.CALM

    def test_custom_thresholds(self, make_metrics):
        """Zero thresholds make every occurrence elevated."""
        t = RegimeThresholds(elevated_range=0.0, elevated_vol_ratio=0.0)
        assert market_regime(make_metrics(), t) == MarketRegime.ELEVATED_VOLATILITY


class TestReactionPattern:
    """Test reaction rules in priority order."""

    def test_shock_after_quiet_pre(self, make_metrics):
        m = make_metrics(return_pre=0.005, return_event=0.04)
        assert reaction_pattern(m) == ReactionPattern.EVENT_DRIVEN_SHOCK

    def test_continuation(self, make_metrics):
        m = make_metrics(return_pre=0.02, return_event=0.04, return_post=0.05)
        assert reaction_pattern(m) == ReactionPattern.EVENT_TRIGGERED_CONTINUATION

    def test_reversal(self, make_metrics):
        m = make_metrics(return_pre=0.02, return_event=0.02, return_post=-0.015)
        assert reaction_pattern(m) == ReactionPattern.EVENT_REVERSAL

    def test_expansion(self, make_metrics):
        m = make_metrics(return_pre=0.02, range_pre=0.02, range_event=0.04)
        assert reaction_pattern(m) == ReactionPattern.VOLATILITY_EXPANSION

    def test_low_impact(self, make_metrics):
        m = make_metrics(return_pre=0.02, range_pre=0.02, range_event=0.02)
        assert reaction_pattern(m) == ReactionPattern.LOW_IMPACT


class TestDirectionBias:
    """Test bias rules; bearish wins over bullish."""

    def test_bearish_event(self, make_metrics):
        assert direction_bias(make_metrics(return_event=-0.03)) == DirectionBias.BEARISH

    def test_bullish_post_inclusive(self, make_metrics):
        assert direction_bias(make_metrics(return_post=0.02)) == DirectionBias.BULLISH

    def test_bearish_precedence(self, make_metrics):
        m = make_metrics(return_event=0.05, return_post=-0.02)
        assert direction_bias(m) == DirectionBias.BEARISH

    def test_uncertain(self, make_metrics):
        assert direction_bias(make_metrics(return_post=0.01)) == DirectionBias.UNCERTAIN


class TestClassify:
    """Test the combined labels."""

    def test_all_zero(self, make_metrics):
        """Zero ranges count as expansion (0 >= 1.5 x 0)."""
        labels = classify(make_metrics())
        assert labels.regime == MarketRegime.CALM
        assert labels.pattern == ReactionPattern.VOLATILITY_EXPANSION
        assert labels.bias == DirectionBias.UNCERTAIN

    def test_summary_line(self, make_metrics):
        """Display values joined with pipes."""
        assert summary_line(make_metrics()) == "Calm | Volatility Expansion | Direction Uncertain"
