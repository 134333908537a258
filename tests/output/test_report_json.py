"""Tests for JSON report formatter."""

import json

from license_validator.models.artifact import ArtifactCoordinate, ArtifactScope
from license_validator.models.report import HierarchyEntry, LicenseReport, LicenseRow
from license_validator.models.validation import KnownLicense, ValidationResult
from license_validator.output.report_json import ReportJsonFormatter

APACHE = KnownLicense(
    name="Apache-2.0", url="https://www.apache.org/licenses/LICENSE-2.0"
)


class TestReportJsonFormatter:
    """Tests for ReportJsonFormatter."""

    def test_output_is_valid_json(self) -> None:
        """Test output parses as JSON with the top-level keys."""
        report = LicenseReport(project=ArtifactCoordinate.parse("g:app:1"))
        data = json.loads(ReportJsonFormatter().format_report(report))

        assert set(data) == {
            "title",
            "project",
            "summary",
            "direct_licenses",
            "transitive_licenses",
            "hierarchy",
        }
        assert data["title"] == "Licenses Report"
        assert data["project"] == "g:app:1"

    def test_rows_and_hierarchy(self) -> None:
        """Test rows, nested entries and the summary."""
        lib_a = ArtifactCoordinate.parse("g:a:1")
        lib_b = ArtifactCoordinate.parse("g:b:1")
        result = ValidationResult(
            artifact=lib_a,
            original_license_name="Apache License 2.0",
            license=APACHE,
            valid=True,
        )
        report = LicenseReport(
            project=ArtifactCoordinate.parse("g:app:1"),
            direct_licenses=[LicenseRow.from_result(result)],
            hierarchy=[
                HierarchyEntry(
                    coordinate=lib_a,
                    scope=ArtifactScope.COMPILE,
                    results=[result],
                    children=[
                        HierarchyEntry(
                            coordinate=lib_b,
                            scope=ArtifactScope.TEST,
                            circular=True,
                        )
                    ],
                )
            ],
        )
        data = json.loads(ReportJsonFormatter().format_report(report))

        assert data["direct_licenses"] == [
            {
                "original_license_name": "Apache License 2.0",
                "original_license_url": None,
                "license": {
                    "name": "Apache-2.0",
                    "url": "https://www.apache.org/licenses/LICENSE-2.0",
                },
                "valid": True,
            }
        ]
        entry = data["hierarchy"][0]
        assert entry["artifact"] == "g:a:1"
        assert entry["scope"] == "compile"
        assert entry["results"][0]["license"]["name"] == "Apache-2.0"
        child = entry["children"][0]
        assert child == {
            "artifact": "g:b:1",
            "scope": "test",
            "optional": False,
            "circular": True,
            "results": [],
            "children": [],
        }
        assert data["summary"] == {
            "artifacts": 2,
            "direct_licenses": 1,
            "transitive_licenses": 0,
            "has_invalid": False,
            "missing_results": ["g:b:1"],
        }
