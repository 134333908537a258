"""Report assembly for license-validator."""

from license_validator.report.builder import ReportGenerator, generate_report

__all__ = [
    "ReportGenerator",
    "generate_report",
]
