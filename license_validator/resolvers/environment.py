"""Artifact graph provider for the current Python environment.

Treats installed distributions as artifacts: the group is always ``pypi``,
declared licenses come from core metadata and trove classifiers, and
dependency edges come from ``Requires-Dist``. Requirements that only apply
to an extra become optional edges.
"""
from importlib.metadata import Distribution, distributions
from typing import Iterable, Optional

from packaging.requirements import InvalidRequirement, Requirement

from license_validator.exceptions import ResolutionError
from license_validator.models.artifact import ArtifactCoordinate, DeclaredLicense
from license_validator.resolvers.base import (
    ArtifactGraphProvider,
    DependencyEdge,
    ResolvedArtifact,
)

PYPI_GROUP = "pypi"

# Mapping of trove classifiers to license names
CLASSIFIER_TO_LICENSE: dict[str, str] = {
    "License :: OSI Approved :: MIT License": "MIT",
    "License :: OSI Approved :: Apache Software License": "Apache-2.0",
    "License :: OSI Approved :: BSD License": "BSD-3-Clause",
    "License :: OSI Approved :: GNU General Public License v3 (GPLv3)": "GPL-3.0",
    "License :: OSI Approved :: GNU General Public License v2 (GPLv2)": "GPL-2.0",
    "License :: OSI Approved :: GNU Lesser General Public License v3 (LGPLv3)": (
        "LGPL-3.0"
    ),
    "License :: OSI Approved :: GNU Lesser General Public License v2 (LGPLv2)": (
        "LGPL-2.0"
    ),
    "License :: OSI Approved :: ISC License (ISCL)": "ISC",
    "License :: OSI Approved :: Mozilla Public License 2.0 (MPL 2.0)": "MPL-2.0",
    "License :: OSI Approved :: Python Software Foundation License": "PSF-2.0",
    "License :: OSI Approved :: The Unlicense (Unlicense)": "Unlicense",
    "License :: OSI Approved :: zlib/libpng License": "Zlib",
}

# Free-text License fields longer than this are license bodies, not names
MAX_LICENSE_FIELD_LENGTH = 100


class EnvironmentGraphProvider(ArtifactGraphProvider):
    """Resolves artifacts from distributions installed in this interpreter."""

    def __init__(
        self,
        packages: Optional[Iterable[str]] = None,
        project_name: str = "project",
        installed: Optional[Iterable[Distribution]] = None,
    ) -> None:
        """Initialize provider with package index.

        Args:
            packages: Direct dependencies of the project. Defaults to every
                installed distribution.
            project_name: Name of the synthetic root artifact.
            installed: Distributions to index. Defaults to
                ``importlib.metadata.distributions()``.
        """
        self._installed: dict[str, Distribution] = {}
        for dist in installed if installed is not None else distributions():
            name = dist.metadata.get("Name")
            if name:
                self._installed.setdefault(self._normalize(name), dist)

        self._packages = (
            list(packages)
            if packages
            else sorted(
                (d.metadata["Name"] for d in self._installed.values()),
                key=str.lower,
            )
        )
        self._root = ArtifactCoordinate(group="local", name=project_name, version="0")

    @staticmethod
    def _normalize(name: str) -> str:
        """Normalize package name per PEP 503.

        Args:
            name: Package name to normalize.

        Returns:
            Normalized package name (lowercase, underscores).
        """
        return name.lower().replace("-", "_").replace(".", "_")

    def root(self) -> ArtifactCoordinate:
        """Return the synthetic project coordinate."""
        return self._root

    def resolve(self, coordinate: ArtifactCoordinate) -> ResolvedArtifact:
        """Resolve an installed distribution or the synthetic root.

        Raises:
            ResolutionError: If the distribution is not installed in the
                requested version.
        """
        if coordinate == self._root:
            edges = tuple(self._edge_for(name) for name in self._packages)
            return ResolvedArtifact(coordinate=coordinate, dependencies=edges)

        dist = self._installed.get(self._normalize(coordinate.name))
        if dist is None or coordinate.group != PYPI_GROUP:
            raise ResolutionError(f"Artifact '{coordinate}' is not installed")
        version = dist.metadata.get("Version", "unknown")
        if version != coordinate.version:
            raise ResolutionError(
                f"Artifact '{coordinate}' is installed in version {version}"
            )

        edges_list: list[DependencyEdge] = []
        for req_str in dist.requires or []:
            edge = self._edge_for_requirement(req_str)
            if edge is not None:
                edges_list.append(edge)

        return ResolvedArtifact(
            coordinate=coordinate,
            licenses=tuple(self._declared_licenses(dist)),
            dependencies=tuple(edges_list),
        )

    def _edge_for(self, name: str, optional: bool = False) -> DependencyEdge:
        dist = self._installed.get(self._normalize(name))
        if dist is None:
            raise ResolutionError(f"Package '{name}' is not installed")
        return DependencyEdge(
            coordinate=ArtifactCoordinate(
                group=PYPI_GROUP,
                name=dist.metadata.get("Name", name),
                version=dist.metadata.get("Version", "unknown"),
            ),
            optional=optional,
        )

    def _edge_for_requirement(self, req_str: str) -> Optional[DependencyEdge]:
        """Parse a requirement string into a dependency edge.

        Args:
            req_str: Requirement string (e.g., "requests>=2.0.0").

        Returns:
            DependencyEdge, or None if the requirement does not apply here.

        Raises:
            ResolutionError: If the requirement is malformed, or a required
                dependency is not installed.
        """
        try:
            req = Requirement(req_str)
        except InvalidRequirement as e:
            raise ResolutionError(f"Invalid requirement '{req_str}': {e}") from e

        if req.marker is not None and "extra" in str(req.marker):
            # Extras that are not installed are simply not part of the graph
            if self._normalize(req.name) not in self._installed:
                return None
            return self._edge_for(req.name, optional=True)

        if req.marker is not None and not req.marker.evaluate():
            return None

        return self._edge_for(req.name)

    @staticmethod
    def _declared_licenses(dist: Distribution) -> list[DeclaredLicense]:
        """Extract declared licenses from distribution metadata.

        Order: License-Expression, a short License field, then classifiers.
        """
        names: list[str] = []

        expression = dist.metadata.get("License-Expression")
        if expression and expression.strip():
            names.append(expression.strip())

        field = dist.metadata.get("License")
        if field and field.strip():
            cleaned = field.strip()
            if (
                cleaned.upper() not in ("UNKNOWN", "NONE")
                and len(cleaned) <= MAX_LICENSE_FIELD_LENGTH
                and "\n" not in cleaned
            ):
                names.append(cleaned)

        for classifier in dist.metadata.get_all("Classifier") or []:
            mapped = CLASSIFIER_TO_LICENSE.get(classifier)
            if mapped is not None:
                names.append(mapped)

        seen: set[str] = set()
        licenses: list[DeclaredLicense] = []
        for name in names:
            if name not in seen:
                seen.add(name)
                licenses.append(DeclaredLicense(name=name))
        return licenses
