"""License analysis logic for license-validator."""
from license_validator.analysis.catalog import (
    DEFAULT_LICENSES,
    LicenseCatalog,
)
from license_validator.analysis.validator import LicenseValidator, validate_tree

__all__ = [
    "DEFAULT_LICENSES",
    "LicenseCatalog",
    "LicenseValidator",
    "validate_tree",
]
