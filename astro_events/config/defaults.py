"""Default configuration parameters for the event study pipeline."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ScanParams:
    """Grid scanner parameters."""
    step_minutes: int = 30                 # Grid step
    tolerance_deg: float = 0.5             # Max circular span for a match
    max_gap_multiplier: int = 2            # Merge gap = multiplier x step


@dataclass(frozen=True)
class ClusterParams:
    """N-body cluster detector parameters."""
    min_bodies: int = 2
    tolerance_deg: float = 1.0
    require_same_sign: bool = True
    step_minutes: int = 60


@dataclass(frozen=True)
class WindowParams:
    """Event-centered window lengths."""
    pre_hours: int = 48
    post_hours: int = 48
    baseline_event_hours: int = 12        # Synthetic EVENT window around baseline t0


@dataclass(frozen=True)
class BaselineParams:
    """Random baseline sampler parameters."""
    min_spacing_hours: int = 12
    seed: int = 42
    max_attempts_factor: int = 50         # Attempts = count x factor


@dataclass(frozen=True)
class RegimeThresholds:
    """Market regime rules on post-window range and volume ratio."""
    stress_range: float = 0.10
    stress_vol_ratio: float = 1.5
    high_range: float = 0.06
    high_vol_ratio: float = 1.2
    elevated_range: float = 0.03
    elevated_vol_ratio: float = 1.0


@dataclass(frozen=True)
class ReactionThresholds:
    """Reaction pattern rules on segment returns and ranges."""
    quiet_pre_return: float = 0.01         # |returnPre| below this counts as quiet
    event_move: float = 0.03               # |returnEvent| at or above this is a move
    reversal_post_return: float = 0.01
    expansion_range_mult: float = 1.5      # rangeEvent vs rangePre


@dataclass(frozen=True)
class DirectionThresholds:
    """Direction bias rules on event and post returns."""
    bearish_return: float = -0.02
    bullish_return: float = 0.02


@dataclass(frozen=True)
class RiskThresholds:
    """Class-level risk heuristics."""
    high_stress_share: float = 0.20
    avg_range_post: float = 0.06
    avg_vol_ratio_post: float = 1.20
    bearish_tail_dd: float = -0.07         # 10th percentile MaxDDPost
    bullish_tail_return: float = 0.07      # 90th percentile ReturnPost
    bearish_tail_percentile: float = 0.10
    bullish_tail_percentile: float = 0.90


@dataclass(frozen=True)
class ComparisonThresholds:
    """Event vs baseline flag thresholds."""
    shock_share_diff: float = 0.10
    max_dd_diff: float = -0.02
    high_stress_share_diff: float = 0.10
    range_diff: float = 0.02


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    scan: ScanParams
    cluster: ClusterParams
    windows: WindowParams
    baseline: BaselineParams
    regime: RegimeThresholds
    reaction: ReactionThresholds
    direction: DirectionThresholds
    risk: RiskThresholds
    comparison: ComparisonThresholds


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        scan=ScanParams(),
        cluster=ClusterParams(),
        windows=WindowParams(),
        baseline=BaselineParams(),
        regime=RegimeThresholds(),
        reaction=ReactionThresholds(),
        direction=DirectionThresholds(),
        risk=RiskThresholds(),
        comparison=ComparisonThresholds(),
    )
