"""Configuration defaults, YAML loading and validation."""

from .defaults import (
    BaselineParams,
    ClusterParams,
    ComparisonThresholds,
    DefaultConfig,
    DirectionThresholds,
    ReactionThresholds,
    RegimeThresholds,
    RiskThresholds,
    ScanParams,
    WindowParams,
    get_default_config,
)
from .loader import ConfigLoader
from .validation import ConfigValidator, ValidationError

__all__ = [
    "BaselineParams",
    "ClusterParams",
    "ComparisonThresholds",
    "ConfigLoader",
    "ConfigValidator",
    "DefaultConfig",
    "DirectionThresholds",
    "ReactionThresholds",
    "RegimeThresholds",
    "RiskThresholds",
    "ScanParams",
    "ValidationError",
    "WindowParams",
    "get_default_config",
]
