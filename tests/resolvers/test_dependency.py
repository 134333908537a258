"""Tests for the dependency tree builder."""

from typing import Any
from unittest.mock import patch

import pytest
from structlog.testing import capture_logs

from license_validator.exceptions import ResolutionError
from license_validator.models.artifact import ArtifactCoordinate, ArtifactScope
from license_validator.models.config import RunSettings
from license_validator.resolvers.dependency import DependencyTreeBuilder
from license_validator.resolvers.manifest import ManifestGraphProvider


def names(tree: Any) -> list[str]:
    """Names of a node's direct children."""
    return [child.coordinate.name for child in tree.children]


class TestDependencyTreeBuilder:
    """Tests for DependencyTreeBuilder.build."""

    def test_builds_full_tree(self, sample_provider: ManifestGraphProvider) -> None:
        """Test the default settings materialize every dependency."""
        tree = DependencyTreeBuilder(sample_provider).build(
            sample_provider.root(), RunSettings()
        )

        assert str(tree.coordinate) == "com.example:app:1.0.0"
        assert names(tree) == ["lib-a", "lib-b", "junit", "servlet-api", "extras"]
        assert names(tree.children[0]) == ["lib-c"]
        assert names(tree.children[1]) == ["lib-c"]
        assert tree.total_count == 7

    def test_edge_attributes_carried(
        self, sample_provider: ManifestGraphProvider
    ) -> None:
        """Test scope, optional flag and licenses land on the nodes."""
        tree = DependencyTreeBuilder(sample_provider).build(
            sample_provider.root(), RunSettings()
        )
        by_name = {child.coordinate.name: child.artifact for child in tree.children}

        assert by_name["junit"].scope == ArtifactScope.TEST
        assert by_name["servlet-api"].scope == ArtifactScope.PROVIDED
        assert by_name["extras"].optional is True
        assert by_name["lib-a"].licenses[0].name == "Apache-2.0"

    def test_skip_test_scope(self, sample_provider: ManifestGraphProvider) -> None:
        """Test test scope dependencies are excluded as nodes."""
        tree = DependencyTreeBuilder(sample_provider).build(
            sample_provider.root(), RunSettings(skip_test_scope=True)
        )
        assert "junit" not in names(tree)

    def test_skip_provided_scope(self, sample_provider: ManifestGraphProvider) -> None:
        """Test provided scope dependencies are excluded as nodes."""
        tree = DependencyTreeBuilder(sample_provider).build(
            sample_provider.root(), RunSettings(skip_provided_scope=True)
        )
        assert "servlet-api" not in names(tree)

    def test_skip_optionals(self, sample_provider: ManifestGraphProvider) -> None:
        """Test optional dependencies are excluded as nodes."""
        tree = DependencyTreeBuilder(sample_provider).build(
            sample_provider.root(), RunSettings(skip_optionals=True)
        )
        assert "extras" not in names(tree)
        assert names(tree) == ["lib-a", "lib-b", "junit", "servlet-api"]

    def test_filters_apply_at_every_level(self) -> None:
        """Test exclusion is applied the same way below the root."""
        provider = ManifestGraphProvider.from_mapping(
            {
                "root": "g:app:1",
                "artifacts": {
                    "g:app:1": {"dependencies": ["g:lib:1"]},
                    "g:lib:1": {
                        "dependencies": [
                            {"coordinate": "g:mock:1", "scope": "test"},
                            "g:util:1",
                        ]
                    },
                    "g:mock:1": {},
                    "g:util:1": {},
                },
            }
        )
        tree = DependencyTreeBuilder(provider).build(
            provider.root(), RunSettings(skip_test_scope=True)
        )
        assert names(tree.children[0]) == ["util"]

    def test_excluded_artifact_drops_subtree(self) -> None:
        """Test an excluded artifact's own dependencies are not walked."""
        provider = ManifestGraphProvider.from_mapping(
            {
                "root": "g:app:1",
                "artifacts": {
                    "g:app:1": {
                        "dependencies": [
                            {"coordinate": "g:opt:1", "optional": True},
                            "g:lib:1",
                        ]
                    },
                    "g:opt:1": {"dependencies": ["g:hidden:1"]},
                    "g:lib:1": {},
                },
            }
        )
        tree = DependencyTreeBuilder(provider).build(
            provider.root(), RunSettings(skip_optionals=True)
        )
        coordinates = [d.coordinate.name for d in tree.iter_descendants()]
        assert coordinates == ["lib"]

    def test_non_recursive(self, sample_provider: ManifestGraphProvider) -> None:
        """Test only direct dependencies are materialized."""
        tree = DependencyTreeBuilder(sample_provider).build(
            sample_provider.root(), RunSettings(recursive=False)
        )
        assert len(tree.children) == 5
        assert all(child.children == [] for child in tree.children)

    def test_idempotent(self, sample_provider: ManifestGraphProvider) -> None:
        """Test two builds on the same input give the same structure."""
        builder = DependencyTreeBuilder(sample_provider)
        first = builder.build(sample_provider.root(), RunSettings())
        second = builder.build(sample_provider.root(), RunSettings())
        assert first.structure() == second.structure()
        assert first == second


class TestCycleTermination:
    """Tests for dependency cycle handling."""

    def test_cycle_node_has_no_children(self) -> None:
        """Test a repeated ancestor is created without children."""
        provider = ManifestGraphProvider.from_mapping(
            {
                "root": "g:app:1",
                "artifacts": {
                    "g:app:1": {"dependencies": ["g:a:1"]},
                    "g:a:1": {"dependencies": ["g:b:1"]},
                    "g:b:1": {"dependencies": ["g:a:1"]},
                },
            }
        )
        with capture_logs() as logs:
            tree = DependencyTreeBuilder(provider).build(provider.root(), RunSettings())

        a = tree.children[0]
        b = a.children[0]
        repeated = b.children[0]
        assert repeated.coordinate == ArtifactCoordinate.parse("g:a:1")
        assert repeated.children == []
        assert repeated.circular is True
        assert a.circular is False
        assert any(entry["event"] == "dependency cycle" for entry in logs)

    def test_self_dependency(self) -> None:
        """Test an artifact depending on itself terminates."""
        provider = ManifestGraphProvider.from_mapping(
            {
                "root": "g:app:1",
                "artifacts": {
                    "g:app:1": {"dependencies": ["g:a:1"]},
                    "g:a:1": {"dependencies": ["g:a:1"]},
                },
            }
        )
        tree = DependencyTreeBuilder(provider).build(provider.root(), RunSettings())
        assert tree.structure() == ("g:app:1", (("g:a:1", (("g:a:1", ()),)),))

    def test_dependency_on_root(self) -> None:
        """Test a dependency pointing back at the project terminates."""
        provider = ManifestGraphProvider.from_mapping(
            {
                "root": "g:app:1",
                "artifacts": {
                    "g:app:1": {"dependencies": ["g:a:1"]},
                    "g:a:1": {"dependencies": ["g:app:1"]},
                },
            }
        )
        tree = DependencyTreeBuilder(provider).build(provider.root(), RunSettings())
        assert tree.children[0].children[0].circular is True

    def test_shared_dependency_is_not_a_cycle(
        self, sample_provider: ManifestGraphProvider
    ) -> None:
        """Test siblings in different branches are both expanded."""
        tree = DependencyTreeBuilder(sample_provider).build(
            sample_provider.root(), RunSettings()
        )
        shared = [d for d in tree.iter_descendants() if d.coordinate.name == "lib-c"]
        assert len(shared) == 2
        assert not any(node.circular for node in shared)


class TestResolutionFailure:
    """Tests for provider failures."""

    def test_missing_artifact_fails_build(self) -> None:
        """Test an unresolvable dependency fails the whole build."""
        provider = ManifestGraphProvider.from_mapping(
            {
                "root": "g:app:1",
                "artifacts": {"g:app:1": {"dependencies": ["g:missing:1"]}},
            }
        )
        with pytest.raises(ResolutionError, match="g:missing:1"):
            DependencyTreeBuilder(provider).build(provider.root(), RunSettings())

    def test_unexpected_provider_error_is_wrapped(
        self, sample_provider: ManifestGraphProvider
    ) -> None:
        """Test arbitrary provider exceptions surface as ResolutionError."""
        with patch.object(
            ManifestGraphProvider, "resolve", side_effect=OSError("network down")
        ):
            with pytest.raises(ResolutionError, match="network down") as exc_info:
                DependencyTreeBuilder(sample_provider).build(
                    sample_provider.root(), RunSettings()
                )
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_provider_called_once_per_coordinate(
        self, sample_provider: ManifestGraphProvider
    ) -> None:
        """Test shared artifacts are resolved once per build."""
        original = ManifestGraphProvider.resolve
        calls: list[str] = []

        def counting(self: ManifestGraphProvider, coordinate: ArtifactCoordinate) -> Any:
            calls.append(str(coordinate))
            return original(self, coordinate)

        with patch.object(ManifestGraphProvider, "resolve", counting):
            DependencyTreeBuilder(sample_provider).build(
                sample_provider.root(), RunSettings()
            )
        assert calls.count("org.example:lib-c:1.0") == 1
