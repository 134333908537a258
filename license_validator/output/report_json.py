"""JSON output formatter for the licenses report."""

import json
from typing import Any, Optional

from license_validator.models.report import HierarchyEntry, LicenseReport, LicenseRow
from license_validator.models.validation import KnownLicense, ValidationResult


class ReportJsonFormatter:
    """Format a licenses report as JSON output.

    Provides a structured representation of the report for programmatic
    processing and CI/CD integration.
    """

    def format_report(self, report: LicenseReport) -> str:
        """Format the licenses report as a JSON string.

        Args:
            report: The report to format.

        Returns:
            JSON string representation of the report.
        """
        output = self._build_output(report)
        return json.dumps(output, indent=2)

    def _build_output(self, report: LicenseReport) -> dict[str, Any]:
        """Build the output dictionary structure.

        Args:
            report: The report to convert.

        Returns:
            Dictionary ready for JSON serialization.
        """
        entries = report.iter_entries()
        return {
            "title": report.title,
            "project": str(report.project),
            "summary": {
                "artifacts": len({entry.coordinate for entry in entries}),
                "direct_licenses": len(report.direct_licenses),
                "transitive_licenses": len(report.transitive_licenses),
                "has_invalid": report.has_invalid,
                "missing_results": sorted(
                    {str(entry.coordinate) for entry in entries if not entry.results}
                ),
            },
            "direct_licenses": [self._row_to_dict(r) for r in report.direct_licenses],
            "transitive_licenses": [
                self._row_to_dict(r) for r in report.transitive_licenses
            ],
            "hierarchy": [self._entry_to_dict(e) for e in report.hierarchy],
        }

    def _row_to_dict(self, row: LicenseRow) -> dict[str, Any]:
        return {
            "original_license_name": row.original_license_name,
            "original_license_url": row.original_license_url,
            "license": self._known_to_dict(row.license),
            "valid": row.valid,
        }

    def _result_to_dict(self, result: ValidationResult) -> dict[str, Any]:
        return {
            "original_license_name": result.original_license_name,
            "original_license_url": result.original_license_url,
            "license": self._known_to_dict(result.license),
            "valid": result.valid,
        }

    def _entry_to_dict(self, entry: HierarchyEntry) -> dict[str, Any]:
        """Convert a hierarchy entry to a dictionary.

        Args:
            entry: The entry to convert.

        Returns:
            Dictionary representation of the entry and its children.
        """
        return {
            "artifact": str(entry.coordinate),
            "scope": entry.scope.value,
            "optional": entry.optional,
            "circular": entry.circular,
            "results": [self._result_to_dict(r) for r in entry.results],
            "children": [self._entry_to_dict(child) for child in entry.children],
        }

    @staticmethod
    def _known_to_dict(license: Optional[KnownLicense]) -> Optional[dict[str, str]]:
        if license is None:
            return None
        return {"name": license.name, "url": license.url}
