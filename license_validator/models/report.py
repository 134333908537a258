"""Report document models.

The report is built as a value first and rendered by the formatters in
``license_validator.output`` afterwards.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from license_validator.models.artifact import ArtifactCoordinate, ArtifactScope
from license_validator.models.validation import KnownLicense, ValidationResult


class LicenseRow(BaseModel):
    """One row of a direct or transitive license table."""

    model_config = {"extra": "forbid", "frozen": True}

    original_license_name: str = Field(description="License from artifact")
    original_license_url: Optional[str] = Field(default=None)
    license: Optional[KnownLicense] = Field(
        default=None, description="Resolved catalog license"
    )
    valid: bool = Field(description="Validation outcome")

    @classmethod
    def from_result(cls, result: ValidationResult) -> LicenseRow:
        """Create a row from the validation result that introduced the name."""
        return cls(
            original_license_name=result.original_license_name,
            original_license_url=result.original_license_url,
            license=result.license,
            valid=result.valid,
        )


class HierarchyEntry(BaseModel):
    """One node of the full dependency hierarchy view."""

    model_config = {"extra": "forbid", "frozen": True}

    coordinate: ArtifactCoordinate
    scope: ArtifactScope
    optional: bool = False
    circular: bool = False
    results: list[ValidationResult] = Field(default_factory=list)
    children: list[HierarchyEntry] = Field(default_factory=list)


class LicenseReport(BaseModel):
    """Licenses report for a project."""

    model_config = {"extra": "forbid", "frozen": True}

    title: str = Field(default="Licenses Report")
    project: ArtifactCoordinate = Field(description="Root project")
    direct_licenses: list[LicenseRow] = Field(default_factory=list)
    transitive_licenses: list[LicenseRow] = Field(default_factory=list)
    hierarchy: list[HierarchyEntry] = Field(default_factory=list)

    @property
    def has_invalid(self) -> bool:
        """True if any listed license is invalid."""
        return any(not row.valid for row in self.direct_licenses) or any(
            not row.valid for row in self.transitive_licenses
        )

    def iter_entries(self) -> list[HierarchyEntry]:
        """Get all hierarchy entries (flattened, pre-order)."""
        result: list[HierarchyEntry] = []

        def walk(entries: list[HierarchyEntry]) -> None:
            for entry in entries:
                result.append(entry)
                walk(entry.children)

        walk(self.hierarchy)
        return result
