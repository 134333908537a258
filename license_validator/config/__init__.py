"""Configuration handling for license-validator."""
from __future__ import annotations

from license_validator.config.defaults import DEFAULT_CONFIG_NAMES, get_default_config
from license_validator.config.loader import (
    build_report_options,
    build_validate_options,
    find_config_file,
    load_config,
    load_config_file,
)
from license_validator.models.config import ValidatorConfig

__all__ = [
    "DEFAULT_CONFIG_NAMES",
    "ValidatorConfig",
    "build_report_options",
    "build_validate_options",
    "find_config_file",
    "get_default_config",
    "load_config",
    "load_config_file",
]
