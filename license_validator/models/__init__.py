"""Pydantic data models for license-validator."""

from license_validator.models.artifact import (
    ArtifactCoordinate,
    ArtifactInfo,
    ArtifactScope,
    DeclaredLicense,
)
from license_validator.models.config import (
    ReportOptions,
    RunSettings,
    ValidateOptions,
    ValidatorConfig,
    Verbosity,
)
from license_validator.models.dependency import DependencyTree
from license_validator.models.report import HierarchyEntry, LicenseReport, LicenseRow
from license_validator.models.validation import (
    KnownLicense,
    ResultsIndex,
    ValidationResult,
    ValidationSummary,
)

__all__ = [
    "ArtifactCoordinate",
    "ArtifactInfo",
    "ArtifactScope",
    "DeclaredLicense",
    "DependencyTree",
    "HierarchyEntry",
    "KnownLicense",
    "LicenseReport",
    "LicenseRow",
    "ReportOptions",
    "ResultsIndex",
    "RunSettings",
    "ValidateOptions",
    "ValidationResult",
    "ValidationSummary",
    "ValidatorConfig",
    "Verbosity",
]
