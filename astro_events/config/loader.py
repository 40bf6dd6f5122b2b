"""Configuration loader with 3-tier parameter precedence."""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional

import yaml

from .defaults import DefaultConfig, get_default_config


@dataclass(frozen=True)
class ConfigLoader:
    """Manages configuration loading with 3-tier precedence."""

    config_dir: Path
    defaults: DefaultConfig

    @classmethod
    def create(cls, config_dir: Optional[Path] = None) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent / "config"

        return cls(
            config_dir=Path(config_dir),
            defaults=get_default_config(),
        )

    def load_study_config(self, study_id: str) -> dict[str, Any]:
        """Load study-specific configuration overrides."""
        studies_file = self.config_dir / "studies.yaml"

        if not studies_file.exists():
            return {}

        with open(studies_file) as f:
            studies_config = yaml.safe_load(f) or {}

        return studies_config.get("studies", {}).get(study_id, {}) or {}  # type: ignore[no-any-return]

    def merge_config(
        self,
        study_id: str,
        overrides: Optional[dict[str, Any]] = None
    ) -> dict[str, Any]:
        """
        Merge configuration with 3-tier precedence.

        Priority order:
        1. Caller overrides (highest priority)
        2. Study-specific overrides from studies.yaml
        3. Global defaults (lowest priority)
        """
        # Start with global defaults
        config = self._dataclass_to_dict(self.defaults)

        # Apply study-specific overrides
        study_config = self.load_study_config(study_id)
        config = self._deep_merge(config, study_config)

        # Apply caller overrides
        if overrides:
            config = self._deep_merge(config, overrides)

        return config

    def build_config(
        self,
        study_id: str,
        overrides: Optional[dict[str, Any]] = None
    ) -> DefaultConfig:
        """
        Merge and rebuild a typed configuration.

        Unknown sections and keys are ignored.
        """
        merged = self.merge_config(study_id, overrides)

        sections = {}
        for section in fields(DefaultConfig):
            section_type = type(getattr(self.defaults, section.name))
            known = {f.name for f in fields(section_type)}
            values = merged.get(section.name, {}) or {}
            sections[section.name] = section_type(**{k: v for k, v in values.items() if k in known})

        return DefaultConfig(**sections)

    def _dataclass_to_dict(self, obj: Any) -> dict[str, Any]:
        """Convert nested dataclasses to dictionary."""
        if hasattr(obj, '__dataclass_fields__'):
            result = {}
            for field_name in obj.__dataclass_fields__:
                value = getattr(obj, field_name)
                if hasattr(value, '__dataclass_fields__'):
                    result[field_name] = self._dataclass_to_dict(value)
                else:
                    result[field_name] = value
            return result
        return obj  # type: ignore[no-any-return]

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result
