"""Markdown output formatter for the licenses report."""
from typing import Optional
from urllib.parse import quote

from license_validator.constants import LEGAL_DISCLAIMER
from license_validator.models.artifact import ArtifactScope
from license_validator.models.report import HierarchyEntry, LicenseReport, LicenseRow
from license_validator.models.validation import KnownLicense, ValidationResult


class ReportMarkdownFormatter:
    """Format a licenses report as Markdown.

    Provides the three report views (direct, transitive and hierarchy)
    as Markdown tables and a nested list for documentation and audits.
    """

    TABLE_HEADER = [
        "| License from Artifact | License | Validation |",
        "|-----------------------|---------|------------|",
    ]

    def format_report(self, report: LicenseReport) -> str:
        """Format the licenses report as a Markdown string.

        Args:
            report: The report to format.

        Returns:
            Markdown string representation of the report.
        """
        lines: list[str] = []

        lines.append(f"# {report.title}")
        lines.append("")
        lines.append(
            f"Licenses of the dependencies of **{report.project}** "
            "and the outcome of their validation."
        )
        lines.append("")
        lines.append(f"> **Disclaimer:** {LEGAL_DISCLAIMER}")
        lines.append("")

        lines.append("## Direct Dependencies")
        lines.append("")
        lines.append("Licenses of the dependencies declared by the project itself.")
        lines.append("")
        lines.extend(self._format_rows(report.direct_licenses))
        lines.append("")

        lines.append("## Transitive Dependencies")
        lines.append("")
        lines.append("Licenses of the dependencies of the direct dependencies.")
        lines.append("")
        lines.extend(self._format_rows(report.transitive_licenses))
        lines.append("")

        lines.append("## Dependency Hierarchy")
        lines.append("")
        if not report.hierarchy:
            lines.append("*No dependencies found.*")
        for entry in report.hierarchy:
            lines.extend(self._format_entry(entry, indent=0))
        lines.append("")

        return "\n".join(lines)

    def _format_rows(self, rows: list[LicenseRow]) -> list[str]:
        """Format license rows as a Markdown table.

        Args:
            rows: Rows to format.

        Returns:
            List of Markdown lines.
        """
        if not rows:
            return ["*No licenses.*"]

        lines = list(self.TABLE_HEADER)
        for row in rows:
            original = self._link(row.original_license_name, row.original_license_url)
            lines.append(
                f"| {original} | {self._format_known(row.license)} "
                f"| {self._format_valid(row.valid)} |"
            )
        return lines

    def _format_entry(self, entry: HierarchyEntry, indent: int) -> list[str]:
        """Format a hierarchy entry and its children as a nested list."""
        prefix = "  " * indent
        markers = []
        if entry.scope != ArtifactScope.COMPILE:
            markers.append(entry.scope.value)
        if entry.optional:
            markers.append("optional")
        if entry.circular:
            markers.append("circular ↺")
        suffix = f" _({', '.join(markers)})_" if markers else ""

        lines = [f"{prefix}- **{entry.coordinate}**{suffix}"]
        if not entry.results:
            lines.append(f"{prefix}  - *no validation results*")
        for result in entry.results:
            lines.append(f"{prefix}  - {self._format_result(result)}")
        for child in entry.children:
            lines.extend(self._format_entry(child, indent + 1))
        return lines

    def _format_result(self, result: ValidationResult) -> str:
        original = self._link(
            result.original_license_name, result.original_license_url
        )
        return (
            f"{original} → {self._format_known(result.license)}: "
            f"{self._format_valid(result.valid)}"
        )

    @staticmethod
    def _format_known(license: Optional[KnownLicense]) -> str:
        if license is None:
            return "-"
        return f"[{_escape(license.name)}]({_escape_url(license.url)})"

    @staticmethod
    def _format_valid(valid: bool) -> str:
        return "✅ valid" if valid else "❌ invalid"

    @staticmethod
    def _link(name: str, url: Optional[str]) -> str:
        if url:
            return f"[{_escape(name)}]({_escape_url(url)})"
        return _escape(name)


def _escape(text: str) -> str:
    """Escape characters that break Markdown tables and links."""
    return (
        text.replace("|", "\\|")
        .replace("[", "\\[")
        .replace("]", "\\]")
        .replace("\n", " ")
    )


def _escape_url(url: str) -> str:
    """Percent-encode characters that end a link target or a table cell."""
    return quote(url.strip(), safe=":/?#[]@!$&'*+,;=%")
