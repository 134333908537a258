"""Artifact graph provider backed by a graph manifest file.

A manifest is a YAML (or JSON) document describing an already-resolved
artifact graph, for example exported by a build tool::

    root: com.example:app:1.0.0
    artifacts:
      com.example:app:1.0.0:
        dependencies:
          - org.example:lib:2.0.0
          - coordinate: junit:junit:4.13.2
            scope: test
      org.example:lib:2.0.0:
        licenses:
          - name: Apache-2.0
            url: https://www.apache.org/licenses/LICENSE-2.0
      junit:junit:4.13.2:
        licenses:
          - name: EPL-1.0
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError

from license_validator.exceptions import ResolutionError
from license_validator.models.artifact import (
    ArtifactCoordinate,
    ArtifactScope,
    DeclaredLicense,
)
from license_validator.resolvers.base import (
    ArtifactGraphProvider,
    DependencyEdge,
    ResolvedArtifact,
)


class ManifestDependency(BaseModel):
    """Dependency entry in a manifest."""

    model_config = {"extra": "forbid"}

    coordinate: str
    scope: ArtifactScope = ArtifactScope.COMPILE
    optional: bool = False


class ManifestArtifact(BaseModel):
    """Artifact entry in a manifest."""

    model_config = {"extra": "forbid"}

    licenses: List[DeclaredLicense] = Field(default_factory=list)
    dependencies: List[Union[str, ManifestDependency]] = Field(default_factory=list)


class GraphManifest(BaseModel):
    """Root document of a graph manifest."""

    model_config = {"extra": "forbid"}

    root: str = Field(description="Coordinate of the audited project")
    artifacts: Dict[str, ManifestArtifact] = Field(default_factory=dict)


class ManifestGraphProvider(ArtifactGraphProvider):
    """Provider that serves artifacts from a parsed graph manifest."""

    def __init__(self, manifest: GraphManifest) -> None:
        """Initialize provider and index the manifest by coordinate.

        Raises:
            ResolutionError: If a coordinate in the manifest is malformed.
        """
        try:
            self._root = ArtifactCoordinate.parse(manifest.root)
            self._artifacts: dict[ArtifactCoordinate, ManifestArtifact] = {
                ArtifactCoordinate.parse(key): entry
                for key, entry in manifest.artifacts.items()
            }
        except ValueError as e:
            raise ResolutionError(f"Invalid graph manifest: {e}") from e

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> ManifestGraphProvider:
        """Create a provider from an already-parsed manifest mapping.

        Raises:
            ResolutionError: If the mapping is not a valid manifest.
        """
        try:
            return cls(GraphManifest.model_validate(data))
        except ValidationError as e:
            raise ResolutionError(f"Invalid graph manifest: {e}") from e

    @classmethod
    def from_file(cls, path: Path) -> ManifestGraphProvider:
        """Load a provider from a YAML or JSON manifest file.

        Raises:
            ResolutionError: If the file cannot be read or parsed.
        """
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ResolutionError(f"Cannot read graph manifest '{path}': {e}") from e

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ResolutionError(f"Invalid YAML syntax in '{path}': {e}") from e

        if not isinstance(data, dict):
            raise ResolutionError(
                f"Invalid graph manifest '{path}': expected a mapping at root level"
            )
        return cls.from_mapping(data)

    def root(self) -> ArtifactCoordinate:
        """Return the coordinate of the project."""
        return self._root

    def resolve(self, coordinate: ArtifactCoordinate) -> ResolvedArtifact:
        """Resolve an artifact from the manifest.

        Raises:
            ResolutionError: If the artifact is not in the manifest.
        """
        entry: Optional[ManifestArtifact] = self._artifacts.get(coordinate)
        if entry is None:
            raise ResolutionError(f"Artifact '{coordinate}' not found in manifest")

        try:
            edges = tuple(self._to_edge(dep) for dep in entry.dependencies)
        except ValueError as e:
            raise ResolutionError(
                f"Invalid dependency of artifact '{coordinate}': {e}"
            ) from e

        return ResolvedArtifact(
            coordinate=coordinate,
            licenses=tuple(entry.licenses),
            dependencies=edges,
        )

    @staticmethod
    def _to_edge(dependency: Union[str, ManifestDependency]) -> DependencyEdge:
        if isinstance(dependency, str):
            return DependencyEdge(coordinate=ArtifactCoordinate.parse(dependency))
        return DependencyEdge(
            coordinate=ArtifactCoordinate.parse(dependency.coordinate),
            scope=dependency.scope,
            optional=dependency.optional,
        )
