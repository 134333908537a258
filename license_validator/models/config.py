"""Configuration Pydantic models for license-validator."""
from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from license_validator.constants import DEFAULT_RESULTS_DIRECTORY


class Verbosity(Enum):
    """Output verbosity levels."""

    QUIET = "quiet"
    NORMAL = "normal"
    VERBOSE = "verbose"


class RunSettings(BaseModel):
    """Tree-shaping settings shared by the validate and report passes.

    Written by the validate pass and read back by the report pass so both
    build the same dependency tree.
    """

    model_config = {"extra": "forbid", "frozen": True}

    recursive: bool = Field(default=True, description="Walk transitive dependencies")
    skip_test_scope: bool = Field(default=False, description="Skip test scope")
    skip_provided_scope: bool = Field(
        default=False, description="Skip provided scope"
    )
    skip_optionals: bool = Field(default=False, description="Skip optional artifacts")


class ValidatorConfig(BaseModel):
    """Configuration file contents for license-validator.

    All fields are optional with None defaults to allow partial configuration;
    command line flags take precedence over file values.
    """

    model_config = {"extra": "forbid"}

    allowed_licenses: Optional[List[str]] = Field(
        default=None,
        description="License names accepted by the validate pass. "
        "Matching is exact and case-sensitive.",
    )
    fail_fast: Optional[bool] = Field(
        default=None,
        description="Abort on the first invalid license.",
    )
    recursive: Optional[bool] = Field(
        default=None,
        description="Validate transitive dependencies too.",
    )
    skip_test_scope: Optional[bool] = Field(default=None)
    skip_provided_scope: Optional[bool] = Field(default=None)
    skip_optionals: Optional[bool] = Field(default=None)
    results_directory: Optional[str] = Field(
        default=None,
        description="Directory shared by the validate and report passes.",
    )
    catalog: Optional[Dict[str, str]] = Field(
        default=None,
        description="Additional catalog licenses by canonical name -> URL.",
    )

    @field_validator("catalog")
    @classmethod
    def _require_catalog_entries(
        cls, value: Optional[Dict[str, str]]
    ) -> Optional[Dict[str, str]]:
        for name, url in (value or {}).items():
            if not name.strip() or not url.strip():
                raise ValueError(
                    f"catalog entry '{name}' needs a non-empty name and URL"
                )
        return value


class ValidateOptions(BaseModel):
    """Fully resolved options for a validate pass."""

    model_config = {"extra": "forbid", "frozen": True}

    allowed_licenses: frozenset[str] = Field(
        description="Accepted license names (non-empty)"
    )
    fail_fast: bool = Field(default=False)
    settings: RunSettings = Field(default_factory=RunSettings)
    results_directory: Path = Field(default=Path(DEFAULT_RESULTS_DIRECTORY))

    @field_validator("allowed_licenses")
    @classmethod
    def _require_allowed_licenses(cls, value: frozenset[str]) -> frozenset[str]:
        if not value:
            raise ValueError("at least one allowed license is required")
        return value


class ReportOptions(BaseModel):
    """Fully resolved options for a report pass."""

    model_config = {"extra": "forbid", "frozen": True}

    results_directory: Path = Field(default=Path(DEFAULT_RESULTS_DIRECTORY))
    output_path: Optional[Path] = Field(
        default=None,
        description="Report destination; None writes to stdout.",
    )
    format: Literal["terminal", "markdown", "json"] = Field(default="terminal")
    skip_optionals: Optional[bool] = Field(
        default=None,
        description="Expected skip-optionals setting; None accepts the persisted one.",
    )
