"""Report assembly from a dependency tree and persisted validation results."""
from __future__ import annotations

from typing import Iterable

from license_validator.logging import get_logger
from license_validator.models.dependency import DependencyTree
from license_validator.models.report import HierarchyEntry, LicenseReport, LicenseRow
from license_validator.models.validation import ResultsIndex

log = get_logger(__name__)


class ReportGenerator:
    """Builds LicenseReport documents.

    Generation is a pure function of the tree and the results index; neither
    input is modified. Nodes without recorded results are rendered with an
    empty result list so the gap stays visible to the auditor.
    """

    def __init__(self, results: ResultsIndex) -> None:
        """Initialize generator.

        Args:
            results: Validation results read back from the results store.
        """
        self._results = results

    def generate(
        self, tree: DependencyTree, title: str = "Licenses Report"
    ) -> LicenseReport:
        """Generate the licenses report for a dependency tree.

        Args:
            tree: Dependency tree whose root is the project.
            title: Report title.

        Returns:
            LicenseReport with direct, transitive and hierarchy views.
        """
        return LicenseReport(
            title=title,
            project=tree.coordinate,
            direct_licenses=self.direct_licenses(tree),
            transitive_licenses=self.transitive_licenses(tree),
            hierarchy=[self._entry(child) for child in tree.children],
        )

    def direct_licenses(self, tree: DependencyTree) -> list[LicenseRow]:
        """Distinct licenses of the root's immediate children.

        The first result per original license name wins.
        """
        return self._collect(tree.children)

    def transitive_licenses(self, tree: DependencyTree) -> list[LicenseRow]:
        """Distinct licenses of everything two or more levels below the root."""

        def nodes() -> Iterable[DependencyTree]:
            for child in tree.children:
                yield from child.iter_descendants()

        return self._collect(nodes())

    def _collect(self, nodes: Iterable[DependencyTree]) -> list[LicenseRow]:
        rows: dict[str, LicenseRow] = {}
        for node in nodes:
            for result in self._results.get(node.coordinate):
                if result.original_license_name not in rows:
                    rows[result.original_license_name] = LicenseRow.from_result(result)
        return list(rows.values())

    def _entry(self, node: DependencyTree) -> HierarchyEntry:
        """Build the hierarchy entry for a node and its children."""
        results = self._results.get(node.coordinate)
        if not results:
            log.warning("no validation results", artifact=str(node.coordinate))
        else:
            log.debug("hierarchy entry", artifact=str(node.coordinate))
        return HierarchyEntry(
            coordinate=node.coordinate,
            scope=node.artifact.scope,
            optional=node.artifact.optional,
            circular=node.circular,
            results=results,
            children=[self._entry(child) for child in node.children],
        )


def generate_report(tree: DependencyTree, results: ResultsIndex) -> LicenseReport:
    """Generate a licenses report.

    Convenience wrapper around :class:`ReportGenerator`.
    """
    return ReportGenerator(results).generate(tree)
