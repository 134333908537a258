"""Output formatters for license-validator."""

from license_validator.output.report_json import ReportJsonFormatter
from license_validator.output.report_markdown import ReportMarkdownFormatter
from license_validator.output.report_terminal import ReportTerminalFormatter
from license_validator.output.validation_json import ValidationJsonFormatter
from license_validator.output.validation_terminal import ValidationTerminalFormatter

__all__ = [
    "ReportJsonFormatter",
    "ReportMarkdownFormatter",
    "ReportTerminalFormatter",
    "ValidationJsonFormatter",
    "ValidationTerminalFormatter",
]
