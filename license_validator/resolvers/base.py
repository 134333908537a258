"""Artifact graph provider interface."""

from abc import ABC, abstractmethod

from pydantic import BaseModel, Field

from license_validator.models.artifact import (
    ArtifactCoordinate,
    ArtifactScope,
    DeclaredLicense,
)


class DependencyEdge(BaseModel):
    """A declared dependency of an artifact."""

    model_config = {"extra": "forbid", "frozen": True}

    coordinate: ArtifactCoordinate = Field(description="Dependency identity")
    scope: ArtifactScope = Field(default=ArtifactScope.COMPILE)
    optional: bool = Field(default=False)


class ResolvedArtifact(BaseModel):
    """What a provider knows about one artifact."""

    model_config = {"extra": "forbid", "frozen": True}

    coordinate: ArtifactCoordinate
    licenses: tuple[DeclaredLicense, ...] = Field(default=())
    dependencies: tuple[DependencyEdge, ...] = Field(default=())


class ArtifactGraphProvider(ABC):
    """Abstract base class for artifact graph providers.

    Providers are synchronous; any blocking I/O happens inside ``resolve()``.
    """

    @abstractmethod
    def root(self) -> ArtifactCoordinate:
        """Return the coordinate of the project being audited."""

    @abstractmethod
    def resolve(self, coordinate: ArtifactCoordinate) -> ResolvedArtifact:
        """Resolve declared licenses and direct dependencies of an artifact.

        Args:
            coordinate: The artifact to resolve.

        Returns:
            ResolvedArtifact with licenses and direct dependency edges.

        Raises:
            ResolutionError: If the artifact cannot be resolved.
        """
