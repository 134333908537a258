"""Tests for JSON validation results formatter."""

import json

from license_validator.models.artifact import ArtifactCoordinate
from license_validator.models.config import RunSettings
from license_validator.models.validation import (
    KnownLicense,
    ValidationResult,
    ValidationSummary,
)
from license_validator.output.validation_json import ValidationJsonFormatter


class TestValidationJsonFormatter:
    """Tests for ValidationJsonFormatter."""

    def test_structure(self) -> None:
        """Test verdict, counts, settings and results."""
        summary = ValidationSummary(
            settings=RunSettings(skip_test_scope=True),
            results=[
                ValidationResult(
                    artifact=ArtifactCoordinate.parse("g:a:1"),
                    original_license_name="MIT License",
                    license=KnownLicense(
                        name="MIT", url="https://opensource.org/licenses/MIT"
                    ),
                    valid=True,
                ),
                ValidationResult(
                    artifact=ArtifactCoordinate.parse("g:a:1"),
                    original_license_name="GPL-3.0",
                    valid=False,
                ),
            ],
        )
        data = json.loads(ValidationJsonFormatter().format_summary(summary))

        assert data["passed"] is False
        assert data["summary"] == {"artifacts": 1, "results": 2, "invalid": 1}
        assert data["settings"] == {
            "recursive": True,
            "skip_test_scope": True,
            "skip_provided_scope": False,
            "skip_optionals": False,
        }
        assert data["results"][0] == {
            "artifact": "g:a:1",
            "scope": "compile",
            "original_license_name": "MIT License",
            "original_license_url": None,
            "license": "MIT",
            "license_url": "https://opensource.org/licenses/MIT",
            "valid": True,
        }
        assert data["results"][1]["license"] is None

    def test_empty_summary_passes(self) -> None:
        """Test a run without results passes."""
        summary = ValidationSummary(settings=RunSettings())
        data = json.loads(ValidationJsonFormatter().format_summary(summary))
        assert data["passed"] is True
        assert data["results"] == []
