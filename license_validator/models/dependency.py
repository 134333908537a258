"""Dependency tree model for license-validator.

A tree, not a graph: every position of a coordinate in the raw artifact
graph gets its own node. Validation results are looked up by coordinate,
so repeated nodes share the same outcome.
"""

from typing import Any, Iterator

from pydantic import BaseModel, Field, computed_field

from license_validator.models.artifact import ArtifactCoordinate, ArtifactInfo


class DependencyTree(BaseModel):
    """A node of the dependency tree.

    The root node holds the project itself; its children are the direct
    dependencies.
    """

    artifact: ArtifactInfo = Field(description="Artifact at this position")
    children: list["DependencyTree"] = Field(
        default_factory=list,
        description="Direct dependencies in declaration order",
    )
    circular: bool = Field(
        default=False,
        description="True if expansion stopped because of a dependency cycle",
    )

    model_config = {"extra": "forbid", "frozen": True}

    @property
    def coordinate(self) -> ArtifactCoordinate:
        """Coordinate of this node's artifact."""
        return self.artifact.coordinate

    def iter_descendants(self) -> Iterator["DependencyTree"]:
        """Iterate over all descendant nodes in pre-order.

        Each call returns a fresh iterator.
        """
        for child in self.children:
            yield child
            yield from child.iter_descendants()

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_count(self) -> int:
        """Number of nodes below this node."""
        return sum(1 for _ in self.iter_descendants())

    def structure(self) -> tuple[str, tuple[Any, ...]]:
        """Return a nested (coordinate, children) tuple describing the shape."""
        return (
            str(self.coordinate),
            tuple(child.structure() for child in self.children),
        )
