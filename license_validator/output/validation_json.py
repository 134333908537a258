"""JSON output formatter for validate pass results."""

import json
from typing import Any

from license_validator.models.validation import ValidationResult, ValidationSummary


class ValidationJsonFormatter:
    """Format validate pass results as JSON output."""

    def format_summary(self, summary: ValidationSummary) -> str:
        """Format validate pass results as a JSON string.

        Args:
            summary: The validation summary to format.

        Returns:
            JSON string representation of the results.
        """
        output: dict[str, Any] = {
            "passed": summary.passed,
            "summary": {
                "artifacts": summary.artifact_count,
                "results": len(summary.results),
                "invalid": summary.invalid_count,
            },
            "settings": summary.settings.model_dump(),
            "results": [self._result_to_dict(r) for r in summary.results],
        }
        return json.dumps(output, indent=2)

    def _result_to_dict(self, result: ValidationResult) -> dict[str, Any]:
        return {
            "artifact": str(result.artifact),
            "scope": result.scope.value,
            "original_license_name": result.original_license_name,
            "original_license_url": result.original_license_url,
            "license": result.license.name if result.license else None,
            "license_url": result.license.url if result.license else None,
            "valid": result.valid,
        }
