"""License validation against the configured allow-list."""
from __future__ import annotations

from typing import Iterable, Optional

from license_validator.analysis.catalog import LicenseCatalog
from license_validator.constants import NO_LICENSE_FOUND, TEST_SCOPE_LICENSE
from license_validator.exceptions import InvalidLicenseError
from license_validator.logging import get_logger
from license_validator.models.artifact import (
    ArtifactCoordinate,
    ArtifactInfo,
    ArtifactScope,
    DeclaredLicense,
)
from license_validator.models.dependency import DependencyTree
from license_validator.models.validation import ValidationResult

log = get_logger(__name__)


class LicenseValidator:
    """Validates declared licenses of dependency tree artifacts.

    A license is valid iff its declared name is non-empty and an exact,
    case-sensitive member of the allow-list. The catalog match is attached
    to each result for display and never changes the verdict.
    """

    def __init__(
        self,
        allowed_licenses: Iterable[str],
        catalog: Optional[LicenseCatalog] = None,
        skip_test_scope: bool = False,
        fail_fast: bool = False,
    ) -> None:
        """Initialize the validator.

        Args:
            allowed_licenses: Accepted license names.
            catalog: Catalog for display normalization. Defaults to the
                built-in catalog.
            skip_test_scope: Accept test scope artifacts without checking
                their licenses.
            fail_fast: Raise on the first invalid license.
        """
        self._allowed = frozenset(allowed_licenses)
        self._catalog = catalog if catalog is not None else LicenseCatalog()
        self._skip_test_scope = skip_test_scope
        self._fail_fast = fail_fast

    def validate(self, tree: DependencyTree) -> list[ValidationResult]:
        """Validate every artifact below the root of a dependency tree.

        Artifacts appearing at several tree positions are validated once, at
        their first position in pre-order.

        Args:
            tree: Dependency tree; the root (the project) is not validated.

        Returns:
            Validation results in production order.

        Raises:
            InvalidLicenseError: In fail-fast mode, on the first invalid result.
        """
        results: list[ValidationResult] = []
        seen: set[ArtifactCoordinate] = set()
        for node in tree.iter_descendants():
            if node.coordinate in seen:
                continue
            seen.add(node.coordinate)
            results.extend(self.validate_artifact(node.artifact))
        return results

    def validate_artifact(self, artifact: ArtifactInfo) -> list[ValidationResult]:
        """Validate the declared licenses of one artifact.

        Args:
            artifact: The artifact to validate.

        Returns:
            At least one validation result.

        Raises:
            InvalidLicenseError: In fail-fast mode, on the first invalid result.
        """
        log.debug("checking artifact", artifact=str(artifact.coordinate))

        if self._skip_test_scope and artifact.scope == ArtifactScope.TEST:
            return [
                self._emit(
                    ValidationResult(
                        artifact=artifact.coordinate,
                        scope=artifact.scope,
                        original_license_name=TEST_SCOPE_LICENSE,
                        valid=True,
                    )
                )
            ]

        declared = artifact.licenses or (DeclaredLicense(),)
        return [self._emit(self._check(artifact, lic)) for lic in declared]

    def is_allowed(self, license_name: Optional[str]) -> bool:
        """Check a license name against the allow-list."""
        if not license_name:
            return False
        return license_name in self._allowed

    def _check(
        self, artifact: ArtifactInfo, declared: DeclaredLicense
    ) -> ValidationResult:
        if not declared.name:
            return ValidationResult(
                artifact=artifact.coordinate,
                scope=artifact.scope,
                original_license_name=NO_LICENSE_FOUND,
                original_license_url=declared.url,
                valid=False,
            )
        return ValidationResult(
            artifact=artifact.coordinate,
            scope=artifact.scope,
            original_license_name=declared.name,
            original_license_url=declared.url,
            license=self._catalog.lookup(declared),
            valid=self.is_allowed(declared.name),
        )

    def _emit(self, result: ValidationResult) -> ValidationResult:
        """Log a result as it is produced and apply the fail-fast policy."""
        if result.valid:
            log.info(
                "license check",
                artifact=str(result.artifact),
                outcome="valid",
                license=result.original_license_name,
            )
            return result

        log.error(
            "license check",
            artifact=str(result.artifact),
            outcome="invalid",
            license=result.original_license_name,
        )
        if self._fail_fast:
            raise InvalidLicenseError(result)
        return result


def validate_tree(
    tree: DependencyTree,
    allowed_licenses: Iterable[str],
    catalog: Optional[LicenseCatalog] = None,
    skip_test_scope: bool = False,
    fail_fast: bool = False,
) -> list[ValidationResult]:
    """Validate all artifacts of a dependency tree.

    Convenience wrapper around :class:`LicenseValidator`.
    """
    validator = LicenseValidator(
        allowed_licenses,
        catalog=catalog,
        skip_test_scope=skip_test_scope,
        fail_fast=fail_fast,
    )
    return validator.validate(tree)
