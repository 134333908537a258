"""Artifact identity models for license-validator.

Coordinates are the join key between dependency tree nodes and persisted
validation results, so they must hash and compare by value.
"""
from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ArtifactScope(Enum):
    """Build-time applicability of an artifact."""

    COMPILE = "compile"
    RUNTIME = "runtime"
    TEST = "test"
    PROVIDED = "provided"
    SYSTEM = "system"
    IMPORT = "import"


class ArtifactCoordinate(BaseModel):
    """Immutable identity of an artifact (group, name, version)."""

    model_config = {"extra": "forbid", "frozen": True}

    group: str = Field(description="Group (organization or namespace)")
    name: str = Field(description="Artifact name")
    version: str = Field(description="Artifact version")

    @classmethod
    def parse(cls, text: str) -> ArtifactCoordinate:
        """Parse a ``group:name:version`` string.

        Args:
            text: Coordinate string.

        Returns:
            Parsed ArtifactCoordinate.

        Raises:
            ValueError: If the string does not have exactly three parts.
        """
        parts = text.split(":")
        if len(parts) != 3 or not all(parts):
            raise ValueError(
                f"Invalid artifact coordinate '{text}': expected group:name:version"
            )
        return cls(group=parts[0], name=parts[1], version=parts[2])

    def __str__(self) -> str:
        return f"{self.group}:{self.name}:{self.version}"


class DeclaredLicense(BaseModel):
    """A license as declared by an artifact. Not yet validated."""

    model_config = {"extra": "forbid", "frozen": True}

    name: Optional[str] = Field(default=None, description="Declared license name")
    url: Optional[str] = Field(default=None, description="Declared license URL")


class ArtifactInfo(BaseModel):
    """An artifact as seen from its position in the dependency graph."""

    model_config = {"extra": "forbid", "frozen": True}

    coordinate: ArtifactCoordinate = Field(description="Artifact identity")
    scope: ArtifactScope = Field(
        default=ArtifactScope.COMPILE,
        description="Declared dependency scope",
    )
    optional: bool = Field(default=False, description="Declared as optional")
    licenses: tuple[DeclaredLicense, ...] = Field(
        default=(),
        description="Declared licenses in declaration order",
    )
