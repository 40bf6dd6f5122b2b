"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def _check_positive_int(params: dict[str, Any], name: str, errors: list[ValidationError]) -> None:
        if name in params:
            value = params[name]
            if not _is_int(value) or value <= 0:
                errors.append(ValidationError(
                    field=name,
                    message="Must be a positive integer",
                    value=value
                ))

    @staticmethod
    def _check_tolerance(params: dict[str, Any], errors: list[ValidationError]) -> None:
        if "tolerance_deg" in params:
            value = params["tolerance_deg"]
            if not _is_number(value) or value <= 0 or value > 180:
                errors.append(ValidationError(
                    field="tolerance_deg",
                    message="Must be a number in (0, 180]",
                    value=value
                ))

    @staticmethod
    def validate_scan_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate grid scanner parameters."""
        errors: list[ValidationError] = []

        ConfigValidator._check_positive_int(params, "step_minutes", errors)
        ConfigValidator._check_positive_int(params, "max_gap_multiplier", errors)
        ConfigValidator._check_tolerance(params, errors)

        return errors

    @staticmethod
    def validate_cluster_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate cluster detector parameters."""
        errors: list[ValidationError] = []

        ConfigValidator._check_positive_int(params, "step_minutes", errors)
        ConfigValidator._check_tolerance(params, errors)

        # Validate min_bodies
        if "min_bodies" in params:
            value = params["min_bodies"]
            if not _is_int(value) or value < 2:
                errors.append(ValidationError(
                    field="min_bodies",
                    message="Must be an integer >= 2",
                    value=value
                ))

        # Validate require_same_sign
        if "require_same_sign" in params:
            value = params["require_same_sign"]
            if not isinstance(value, bool):
                errors.append(ValidationError(
                    field="require_same_sign",
                    message="Must be a boolean",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_window_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate event window lengths."""
        errors = []

        for name in ("pre_hours", "post_hours", "baseline_event_hours"):
            if name in params:
                value = params[name]
                if not _is_number(value) or value < 0:
                    errors.append(ValidationError(
                        field=name,
                        message="Must be a non-negative number",
                        value=value
                    ))

        return errors

    @staticmethod
    def validate_baseline_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate baseline sampler parameters."""
        errors: list[ValidationError] = []

        if "min_spacing_hours" in params:
            value = params["min_spacing_hours"]
            if not _is_number(value) or value < 0:
                errors.append(ValidationError(
                    field="min_spacing_hours",
                    message="Must be a non-negative number",
                    value=value
                ))

        if "seed" in params and not _is_int(params["seed"]):
            errors.append(ValidationError(
                field="seed",
                message="Must be an integer",
                value=params["seed"]
            ))

        ConfigValidator._check_positive_int(params, "max_attempts_factor", errors)

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        if "scan" in config:
            errors.extend(ConfigValidator.validate_scan_params(config["scan"]))

        if "cluster" in config:
            errors.extend(ConfigValidator.validate_cluster_params(config["cluster"]))

        if "windows" in config:
            errors.extend(ConfigValidator.validate_window_params(config["windows"]))

        if "baseline" in config:
            errors.extend(ConfigValidator.validate_baseline_params(config["baseline"]))

        return errors
