"""Validation outcome models for license-validator."""
from __future__ import annotations

from typing import Iterable, Optional

from pydantic import BaseModel, Field, computed_field

from license_validator.models.artifact import ArtifactCoordinate, ArtifactScope
from license_validator.models.config import RunSettings


class KnownLicense(BaseModel):
    """Canonical license entry of the license catalog."""

    model_config = {"extra": "forbid", "frozen": True}

    name: str = Field(min_length=1, description="Canonical license name")
    url: str = Field(min_length=1, description="Canonical license URL")


class ValidationResult(BaseModel):
    """Outcome of checking one declared license of one artifact.

    ``valid`` reflects the allow-list decision only; ``license`` is the
    catalog match attached for display.
    """

    model_config = {"extra": "forbid", "frozen": True}

    artifact: ArtifactCoordinate = Field(description="Validated artifact")
    scope: ArtifactScope = Field(
        default=ArtifactScope.COMPILE,
        description="Scope of the validated artifact",
    )
    original_license_name: str = Field(description="License name as declared")
    original_license_url: Optional[str] = Field(
        default=None,
        description="License URL as declared",
    )
    license: Optional[KnownLicense] = Field(
        default=None,
        description="Catalog license the declared name resolved to",
    )
    valid: bool = Field(description="True if the license is in the allow-list")

    @property
    def key(self) -> tuple[ArtifactCoordinate, str]:
        """Deduplication key: (artifact, original license name)."""
        return (self.artifact, self.original_license_name)


class ResultsIndex:
    """Validation results grouped by artifact coordinate.

    Results sharing a (coordinate, original license name) key collapse to
    the first one added.
    """

    def __init__(self) -> None:
        self._results: dict[ArtifactCoordinate, list[ValidationResult]] = {}
        self._keys: set[tuple[ArtifactCoordinate, str]] = set()

    @classmethod
    def from_results(cls, results: Iterable[ValidationResult]) -> ResultsIndex:
        """Build an index from results in their original order."""
        index = cls()
        for result in results:
            index.add(result)
        return index

    def add(self, result: ValidationResult) -> bool:
        """Add a result unless its key is already present.

        Returns:
            True if the result was added, False if it was a duplicate.
        """
        if result.key in self._keys:
            return False
        self._keys.add(result.key)
        self._results.setdefault(result.artifact, []).append(result)
        return True

    def get(self, coordinate: ArtifactCoordinate) -> list[ValidationResult]:
        """Get results for a coordinate; empty list if none were recorded."""
        return list(self._results.get(coordinate, []))

    def coordinates(self) -> list[ArtifactCoordinate]:
        """Get all coordinates in insertion order."""
        return list(self._results)

    def all_results(self) -> list[ValidationResult]:
        """Get all results, grouped by coordinate in insertion order."""
        return [r for results in self._results.values() for r in results]

    def __contains__(self, coordinate: object) -> bool:
        return coordinate in self._results

    def __len__(self) -> int:
        return len(self._keys)


class ValidationSummary(BaseModel):
    """Outcome of a complete validate pass."""

    model_config = {"extra": "forbid"}

    settings: RunSettings = Field(description="Settings the tree was built with")
    results: list[ValidationResult] = Field(
        default_factory=list,
        description="All validation results in production order",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def invalid_count(self) -> int:
        """Number of invalid results."""
        return sum(1 for r in self.results if not r.valid)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def artifact_count(self) -> int:
        """Number of distinct validated artifacts."""
        return len({r.artifact for r in self.results})

    @property
    def passed(self) -> bool:
        """True if no invalid license was found."""
        return self.invalid_count == 0
