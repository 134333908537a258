"""Custom exceptions for license-validator."""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from license_validator.models.validation import ValidationResult


class LicenseValidatorError(Exception):
    """Base exception for all license-validator errors."""

    pass


class ConfigurationError(LicenseValidatorError):
    """Exception raised when configuration is invalid."""

    pass


class ResolutionError(LicenseValidatorError):
    """Exception raised when the artifact graph cannot be resolved."""

    pass


class PersistenceError(LicenseValidatorError):
    """Exception raised when the results store cannot be written or read."""

    pass


class ReportError(LicenseValidatorError):
    """Exception raised when a report cannot be assembled."""

    pass


class InvalidLicenseError(LicenseValidatorError):
    """Exception raised by fail-fast validation on the first invalid license.

    This is a validation verdict, not an execution error: the CLI maps it to
    the "invalid licenses found" exit code.
    """

    def __init__(self, result: ValidationResult) -> None:
        self.result = result
        super().__init__(
            f"Invalid license '{result.original_license_name}' "
            f"for artifact '{result.artifact}'"
        )
