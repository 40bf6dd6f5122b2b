#!/usr/bin/env python3
"""Configuration validation script."""

import sys
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import yaml

from astro_events.config.loader import ConfigLoader
from astro_events.config.validation import ConfigValidator, ValidationError


def validate_study_config(loader: ConfigLoader, study_id: str) -> list[ValidationError]:
    """Validate configuration for a specific study."""
    config = loader.merge_config(study_id)
    return ConfigValidator.validate_config(config)


def main():
    """Main validation function."""
    print("🔍 Validating astro_events configuration...")

    loader = ConfigLoader.create(project_root / "config")

    studies_file = loader.config_dir / "studies.yaml"
    study_ids = []
    if studies_file.exists():
        with open(studies_file) as f:
            study_ids = list((yaml.safe_load(f) or {}).get("studies", {}))

    # Always check the plain defaults as well
    study_ids.append("UNKNOWN-STUDY")

    all_valid = True

    for study_id in study_ids:
        print(f"\n📊 Validating {study_id}...")

        try:
            errors = validate_study_config(loader, study_id)

            if errors:
                print(f"❌ Found {len(errors)} validation errors:")
                for error in errors:
                    print(f"  • {error.field}: {error.message} (value: {error.value})")
                all_valid = False
            else:
                loader.build_config(study_id)
                print(f"✅ {study_id} configuration is valid")

        except (OSError, yaml.YAMLError, TypeError) as e:
            print(f"❌ Error validating {study_id}: {e}")
            all_valid = False

    if all_valid:
        print("\n🎉 All configurations are valid!")
        return 0

    print("\n💥 Configuration validation failed!")
    return 1


if __name__ == "__main__":
    sys.exit(main())
