"""Artifact graph providers and dependency tree building."""

from license_validator.resolvers.base import (
    ArtifactGraphProvider,
    DependencyEdge,
    ResolvedArtifact,
)
from license_validator.resolvers.dependency import DependencyTreeBuilder
from license_validator.resolvers.environment import EnvironmentGraphProvider
from license_validator.resolvers.manifest import ManifestGraphProvider

__all__ = [
    "ArtifactGraphProvider",
    "DependencyEdge",
    "DependencyTreeBuilder",
    "EnvironmentGraphProvider",
    "ManifestGraphProvider",
    "ResolvedArtifact",
]
