"""Configuration file discovery and loading for license-validator."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, Optional, TypeVar

import yaml
from pydantic import ValidationError

from license_validator.config.defaults import DEFAULT_CONFIG_NAMES, get_default_config
from license_validator.constants import DEFAULT_RESULTS_DIRECTORY
from license_validator.exceptions import ConfigurationError
from license_validator.models.config import (
    ReportOptions,
    RunSettings,
    ValidateOptions,
    ValidatorConfig,
)

T = TypeVar("T")


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Return the first ``.license-validator`` file found in a directory.

    ``.yaml`` wins over ``.yml``; ``start_dir`` defaults to the working
    directory. Parent directories are not searched.
    """
    directory = start_dir or Path.cwd()
    candidates = (directory / name for name in DEFAULT_CONFIG_NAMES)
    return next((path for path in candidates if path.is_file()), None)


def _read_mapping(path: Path) -> dict[str, Any]:
    """Parse a YAML file whose top level must be a mapping.

    Empty and comment-only files give an empty mapping.
    """
    try:
        with path.open(encoding="utf-8") as stream:
            data = yaml.safe_load(stream)
    except OSError as e:
        raise ConfigurationError(
            f"Cannot read configuration file '{path}': {e}"
        ) from e
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        where = f" at line {mark.line + 1}" if mark is not None else ""
        raise ConfigurationError(
            f"Invalid YAML syntax in '{path}'{where}: {e}"
        ) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Configuration in '{path}' must be a mapping of settings, "
            f"not a {type(data).__name__}"
        )
    return data


def load_config_file(path: Path) -> ValidatorConfig:
    """Load one configuration file.

    Args:
        path: Path to a YAML configuration file.

    Returns:
        The validated ValidatorConfig; an empty file gives the defaults.

    Raises:
        ConfigurationError: If the file cannot be read or parsed, or holds
            unknown keys or wrongly typed values.
    """
    data = _read_mapping(path)
    try:
        return ValidatorConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration in '{path}': {_describe_errors(e)}"
        ) from e


def _describe_errors(error: ValidationError) -> str:
    """Join pydantic errors as ``location: message`` entries."""
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc']) or 'root'}: {err['msg']}"
        for err in error.errors()
    )


def load_config(config_path: str | None = None) -> ValidatorConfig:
    """Load the given file, else the one found in the working directory.

    Defaults are used when neither exists.

    Raises:
        ConfigurationError: If the configuration file is invalid.
    """
    path = Path(config_path) if config_path is not None else find_config_file()
    if path is None:
        return get_default_config()
    return load_config_file(path)


def _pick(flag: Optional[T], file_value: Optional[T], default: T) -> T:
    """Command line flag, then file value, then default."""
    if flag is not None:
        return flag
    if file_value is not None:
        return file_value
    return default


def build_validate_options(
    config: ValidatorConfig,
    allowed_licenses: Iterable[str] = (),
    fail_fast: Optional[bool] = None,
    recursive: Optional[bool] = None,
    skip_test_scope: Optional[bool] = None,
    skip_provided_scope: Optional[bool] = None,
    skip_optionals: Optional[bool] = None,
    results_directory: Optional[str] = None,
) -> ValidateOptions:
    """Merge command line flags over file configuration for a validate pass.

    Allowed licenses from the command line are added to those of the file.

    Raises:
        ConfigurationError: If no allowed license is configured.
    """
    allowed = set(config.allowed_licenses or [])
    allowed.update(allowed_licenses)
    if not allowed:
        raise ConfigurationError(
            "No allowed licenses configured: set 'allowed_licenses' in the "
            "configuration file or pass --allow"
        )

    settings = RunSettings(
        recursive=_pick(recursive, config.recursive, True),
        skip_test_scope=_pick(skip_test_scope, config.skip_test_scope, False),
        skip_provided_scope=_pick(
            skip_provided_scope, config.skip_provided_scope, False
        ),
        skip_optionals=_pick(skip_optionals, config.skip_optionals, False),
    )
    try:
        return ValidateOptions(
            allowed_licenses=frozenset(allowed),
            fail_fast=_pick(fail_fast, config.fail_fast, False),
            settings=settings,
            results_directory=Path(
                _pick(
                    results_directory,
                    config.results_directory,
                    DEFAULT_RESULTS_DIRECTORY,
                )
            ),
        )
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid validate options: {_describe_errors(e)}"
        ) from e


def build_report_options(
    config: ValidatorConfig,
    results_directory: Optional[str] = None,
    output_path: Optional[str] = None,
    output_format: str = "terminal",
    skip_optionals: Optional[bool] = None,
) -> ReportOptions:
    """Merge command line flags over file configuration for a report pass.

    Raises:
        ConfigurationError: If the results directory does not exist.
    """
    directory = Path(
        _pick(results_directory, config.results_directory, DEFAULT_RESULTS_DIRECTORY)
    )
    if not directory.is_dir():
        raise ConfigurationError(
            f"Results directory '{directory}' does not exist; "
            "run the validate pass first"
        )
    try:
        return ReportOptions(
            results_directory=directory,
            output_path=Path(output_path) if output_path else None,
            format=output_format.lower(),
            skip_optionals=_pick(skip_optionals, config.skip_optionals, None),
        )
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid report options: {_describe_errors(e)}"
        ) from e
