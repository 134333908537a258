"""Validate and report passes.

The two passes share state only through the results store, so each builds
its own dependency tree from the artifact graph provider.
"""
from typing import Optional

from license_validator.analysis.catalog import LicenseCatalog
from license_validator.analysis.validator import LicenseValidator
from license_validator.exceptions import PersistenceError, ReportError
from license_validator.logging import get_logger
from license_validator.models.config import ReportOptions, ValidateOptions
from license_validator.models.report import LicenseReport
from license_validator.models.validation import ValidationSummary
from license_validator.report.builder import ReportGenerator
from license_validator.resolvers.base import ArtifactGraphProvider
from license_validator.resolvers.dependency import DependencyTreeBuilder
from license_validator.storage.results import ResultsStore

log = get_logger(__name__)


def run_validation(
    provider: ArtifactGraphProvider,
    options: ValidateOptions,
    catalog: Optional[LicenseCatalog] = None,
) -> ValidationSummary:
    """Run the validate pass and persist its results.

    Results of a previous run are removed first, so an aborted run never
    leaves an older verdict behind.

    Args:
        provider: Artifact graph provider for the project.
        options: Validate pass options.
        catalog: License catalog for display normalization.

    Returns:
        ValidationSummary with all results; check ``passed`` for the verdict.

    Raises:
        ResolutionError: If the artifact graph cannot be resolved.
        InvalidLicenseError: In fail-fast mode, on the first invalid license.
        PersistenceError: If the results cannot be written.
    """
    store = ResultsStore(options.results_directory)
    store.clear()

    root = provider.root()
    log.info("validating licenses", project=str(root), recursive=options.settings.recursive)
    tree = DependencyTreeBuilder(provider).build(root, options.settings)

    validator = LicenseValidator(
        options.allowed_licenses,
        catalog=catalog,
        skip_test_scope=options.settings.skip_test_scope,
        fail_fast=options.fail_fast,
    )
    results = validator.validate(tree)
    store.write(options.settings, results)

    summary = ValidationSummary(settings=options.settings, results=results)
    if summary.passed:
        log.info("all licenses valid", artifacts=summary.artifact_count)
    else:
        log.error(
            "invalid licenses found",
            invalid=summary.invalid_count,
            artifacts=summary.artifact_count,
        )
    return summary


def run_report(
    provider: ArtifactGraphProvider,
    options: ReportOptions,
) -> LicenseReport:
    """Run the report pass from persisted validation results.

    Args:
        provider: Artifact graph provider for the project.
        options: Report pass options.

    Returns:
        The assembled LicenseReport.

    Raises:
        PersistenceError: If the results store cannot be read.
        ResolutionError: If the artifact graph cannot be resolved.
        ReportError: If the rebuilt tree does not match the persisted results.
    """
    store = ResultsStore(options.results_directory)
    if not store.exists():
        raise PersistenceError(
            f"No validation results in '{options.results_directory}'; "
            "run the validate pass first"
        )
    settings = store.read_settings()
    if (
        options.skip_optionals is not None
        and options.skip_optionals != settings.skip_optionals
    ):
        raise ReportError(
            f"Settings mismatch: report requested skipOptionals="
            f"{str(options.skip_optionals).lower()} but the validate pass ran with "
            f"skipOptionals={str(settings.skip_optionals).lower()}"
        )

    index = store.read_index()
    root = provider.root()
    log.info("creating report for licenses", project=str(root))
    tree = DependencyTreeBuilder(provider).build(root, settings)

    tree_coordinates = {node.coordinate for node in tree.iter_descendants()}
    unknown = [c for c in index.coordinates() if c not in tree_coordinates]
    if unknown:
        listed = ", ".join(str(c) for c in unknown[:5])
        raise ReportError(
            f"Persisted results reference {len(unknown)} artifact(s) missing from "
            f"the dependency tree ({listed}); the dependency graph changed since "
            "the validate pass"
        )

    return ReportGenerator(index).generate(tree)
