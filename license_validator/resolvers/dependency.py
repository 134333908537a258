"""Dependency tree construction for license validation.

Provides DependencyTreeBuilder which walks an ArtifactGraphProvider into an
owned DependencyTree, applying scope/optional filters and terminating on
dependency cycles.
"""
from typing import Optional

from license_validator.exceptions import LicenseValidatorError, ResolutionError
from license_validator.logging import get_logger
from license_validator.models.artifact import (
    ArtifactCoordinate,
    ArtifactInfo,
    ArtifactScope,
)
from license_validator.models.config import RunSettings
from license_validator.models.dependency import DependencyTree
from license_validator.resolvers.base import (
    ArtifactGraphProvider,
    DependencyEdge,
    ResolvedArtifact,
)

log = get_logger(__name__)


class DependencyTreeBuilder:
    """Builds dependency trees from an artifact graph provider.

    The same provider output and settings always yield the same tree.
    """

    def __init__(self, provider: ArtifactGraphProvider) -> None:
        """Initialize builder.

        Args:
            provider: Source of artifact licenses and dependency edges.
        """
        self._provider = provider

    def build(
        self,
        root: ArtifactCoordinate,
        settings: RunSettings,
    ) -> DependencyTree:
        """Build the complete dependency tree below a root artifact.

        Args:
            root: Coordinate of the project.
            settings: Tree-shaping settings.

        Returns:
            DependencyTree whose root node is the project.

        Raises:
            ResolutionError: If any artifact cannot be resolved.
        """
        cache: dict[ArtifactCoordinate, ResolvedArtifact] = {}
        resolved_root = self._resolve(root, cache)
        root_info = ArtifactInfo(
            coordinate=root,
            scope=ArtifactScope.COMPILE,
            licenses=resolved_root.licenses,
        )
        children = self._build_children(
            resolved_root,
            settings=settings,
            ancestors=frozenset({root}),
            expand=settings.recursive,
            cache=cache,
        )
        tree = DependencyTree(artifact=root_info, children=children)
        log.debug(
            "dependency tree built",
            root=str(root),
            nodes=tree.total_count,
            recursive=settings.recursive,
        )
        return tree

    def _build_children(
        self,
        parent: ResolvedArtifact,
        settings: RunSettings,
        ancestors: frozenset[ArtifactCoordinate],
        expand: bool,
        cache: dict[ArtifactCoordinate, ResolvedArtifact],
    ) -> list[DependencyTree]:
        """Build child nodes for the dependencies of a resolved artifact.

        Args:
            parent: The resolved parent artifact.
            settings: Tree-shaping settings.
            ancestors: Coordinates on the path from the root to ``parent``.
            expand: Whether children get their own dependencies walked.
            cache: Per-build cache of provider results.

        Returns:
            Child nodes in declaration order.
        """
        children: list[DependencyTree] = []
        for edge in parent.dependencies:
            if self._is_excluded(edge, settings):
                log.debug(
                    "artifact excluded",
                    artifact=str(edge.coordinate),
                    scope=edge.scope.value,
                    optional=edge.optional,
                )
                continue
            children.append(
                self._build_node(edge, settings, ancestors, expand, cache)
            )
        return children

    def _build_node(
        self,
        edge: DependencyEdge,
        settings: RunSettings,
        ancestors: frozenset[ArtifactCoordinate],
        expand: bool,
        cache: dict[ArtifactCoordinate, ResolvedArtifact],
    ) -> DependencyTree:
        """Build the node for one dependency edge, recursing if allowed."""
        resolved = self._resolve(edge.coordinate, cache)
        info = ArtifactInfo(
            coordinate=edge.coordinate,
            scope=edge.scope,
            optional=edge.optional,
            licenses=resolved.licenses,
        )

        if edge.coordinate in ancestors:
            log.debug("dependency cycle", artifact=str(edge.coordinate))
            return DependencyTree(artifact=info, circular=True)

        if not expand:
            return DependencyTree(artifact=info)

        children = self._build_children(
            resolved,
            settings=settings,
            ancestors=ancestors | {edge.coordinate},
            expand=True,
            cache=cache,
        )
        return DependencyTree(artifact=info, children=children)

    def _resolve(
        self,
        coordinate: ArtifactCoordinate,
        cache: dict[ArtifactCoordinate, ResolvedArtifact],
    ) -> ResolvedArtifact:
        """Resolve an artifact through the provider, once per build."""
        cached: Optional[ResolvedArtifact] = cache.get(coordinate)
        if cached is not None:
            return cached
        try:
            resolved = self._provider.resolve(coordinate)
        except LicenseValidatorError:
            raise
        except Exception as e:
            raise ResolutionError(
                f"Cannot resolve artifact '{coordinate}': {e}"
            ) from e
        cache[coordinate] = resolved
        return resolved

    @staticmethod
    def _is_excluded(edge: DependencyEdge, settings: RunSettings) -> bool:
        """Check whether a dependency is filtered out by the settings.

        Args:
            edge: The dependency edge to check.
            settings: Tree-shaping settings.

        Returns:
            True if the dependency must not become a tree node.
        """
        if settings.skip_test_scope and edge.scope == ArtifactScope.TEST:
            return True
        if settings.skip_provided_scope and edge.scope == ArtifactScope.PROVIDED:
            return True
        return settings.skip_optionals and edge.optional
