"""Default configuration values for license-validator."""

from __future__ import annotations

from license_validator.models.config import ValidatorConfig

# Default configuration file names to search for
DEFAULT_CONFIG_NAMES = [".license-validator.yaml", ".license-validator.yml"]


def get_default_config() -> ValidatorConfig:
    """Get the default configuration.

    Returns:
        ValidatorConfig with all defaults (all fields None).
    """
    return ValidatorConfig()
