"""CLI entry point for license-validator."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Callable, TypeVar

import click
from rich.console import Console
from rich.markup import escape

from license_validator import __version__
from license_validator.analysis.catalog import LicenseCatalog
from license_validator.config import (
    build_report_options,
    build_validate_options,
    load_config,
)
from license_validator.constants import (
    EXIT_ERROR,
    EXIT_INVALID,
    EXIT_SUCCESS,
    REPORT_OUTPUT_NAME,
)
from license_validator.exceptions import (
    ConfigurationError,
    InvalidLicenseError,
    LicenseValidatorError,
    ReportError,
)
from license_validator.logging import configure_logging
from license_validator.models.config import Verbosity
from license_validator.models.report import LicenseReport
from license_validator.models.validation import ValidationSummary
from license_validator.output.report_json import ReportJsonFormatter
from license_validator.output.report_markdown import ReportMarkdownFormatter
from license_validator.output.report_terminal import ReportTerminalFormatter
from license_validator.output.validation_json import ValidationJsonFormatter
from license_validator.output.validation_terminal import ValidationTerminalFormatter
from license_validator.pipeline import run_report, run_validation
from license_validator.resolvers.base import ArtifactGraphProvider
from license_validator.resolvers.environment import EnvironmentGraphProvider
from license_validator.resolvers.manifest import ManifestGraphProvider

# Module-level console for consistent output
_console = Console()
# Separate console for error output (writes to stderr)
_error_console = Console(stderr=True)

F = TypeVar("F", bound=Callable[..., Any])


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """License Validator - Check dependency licenses against an allow-list.

    The validate pass checks every dependency license and stores the
    results; the report pass renders them without validating again.

    \b
    Examples:
        license-validator validate --allow MIT --allow Apache-2.0
        license-validator validate --graph deps.yaml --fail-fast
        license-validator report --format markdown -o licenses.md
        license-validator report --graph deps.yaml --format json
    """
    pass


def _graph_options(func: F) -> F:
    """Options selecting the artifact graph, shared by both commands."""
    func = click.argument("packages", nargs=-1)(func)
    func = click.option(
        "--project-name",
        default=None,
        help="Name of the project root when reading the environment "
        "(default: current directory name).",
    )(func)
    func = click.option(
        "--graph",
        "graph_path",
        type=click.Path(exists=True, dir_okay=False),
        default=None,
        help="Dependency graph manifest (YAML or JSON). "
        "Defaults to the installed Python environment.",
    )(func)
    return func


def _logging_options(func: F) -> F:
    """Verbosity and logging options, shared by both commands."""
    func = click.option(
        "--json-log",
        is_flag=True,
        default=False,
        help="Write log events as JSON lines to stderr.",
    )(func)
    func = click.option(
        "--quiet",
        "-q",
        "quiet_flag",
        is_flag=True,
        default=False,
        help="Suppress non-essential output.",
    )(func)
    func = click.option(
        "--verbose",
        "-v",
        "verbose_flag",
        is_flag=True,
        default=False,
        help="Show detailed output and debug logging.",
    )(func)
    return func


@main.command()
@click.option(
    "--allow",
    "allowed",
    multiple=True,
    help="Allowed license name; repeatable. Added to the configured list.",
)
@click.option(
    "--fail-fast/--no-fail-fast",
    default=None,
    help="Stop at the first invalid license.",
)
@click.option(
    "--recursive/--no-recursive",
    default=None,
    help="Validate transitive dependencies too (default: recursive).",
)
@click.option(
    "--skip-test-scope/--no-skip-test-scope",
    default=None,
    help="Skip test scope dependencies.",
)
@click.option(
    "--skip-provided-scope/--no-skip-provided-scope",
    default=None,
    help="Skip provided scope dependencies.",
)
@click.option(
    "--skip-optionals/--no-skip-optionals",
    default=None,
    help="Skip optional dependencies.",
)
@click.option(
    "--results-dir",
    "results_directory",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory for the validation results (default: build/licenses).",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["terminal", "json"], case_sensitive=False),
    default="terminal",
    help="Output format for validation results (default: terminal).",
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to configuration file.",
)
@_logging_options
@_graph_options
def validate(
    allowed: tuple[str, ...],
    fail_fast: bool | None,
    recursive: bool | None,
    skip_test_scope: bool | None,
    skip_provided_scope: bool | None,
    skip_optionals: bool | None,
    results_directory: str | None,
    output_format: str,
    config_path: str | None,
    verbose_flag: bool,
    quiet_flag: bool,
    json_log: bool,
    graph_path: str | None,
    project_name: str | None,
    packages: tuple[str, ...],
) -> None:
    """Validate dependency licenses against the allow-list.

    Builds the dependency tree of the project, checks every declared
    license and stores the results for the report pass.

    \b
    Examples:
        license-validator validate --allow MIT
        license-validator validate --graph deps.yaml --no-recursive
        license-validator validate requests click --allow Apache-2.0
        license-validator validate --format json
    """
    verbosity = _verbosity(verbose_flag, quiet_flag)
    format_value = output_format.lower()
    configure_logging(verbose=verbose_flag, quiet=quiet_flag, json_log=json_log)

    try:
        config = load_config(config_path)
        options = build_validate_options(
            config,
            allowed_licenses=allowed,
            fail_fast=fail_fast,
            recursive=recursive,
            skip_test_scope=skip_test_scope,
            skip_provided_scope=skip_provided_scope,
            skip_optionals=skip_optionals,
            results_directory=results_directory,
        )
        provider = _create_provider(graph_path, packages, project_name)
        catalog = LicenseCatalog.with_extra(config.catalog)

        summary = run_validation(provider, options, catalog=catalog)
        _display_summary(summary, format_value, verbosity)

        if summary.passed:
            sys.exit(EXIT_SUCCESS)
        sys.exit(EXIT_INVALID)

    except InvalidLicenseError as e:
        _display_error(e, format_value)
        sys.exit(EXIT_INVALID)
    except LicenseValidatorError as e:
        _display_error(e, format_value)
        sys.exit(EXIT_ERROR)


@main.command()
@click.option(
    "--results-dir",
    "results_directory",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory holding the validation results (default: build/licenses).",
)
@click.option(
    "--skip-optionals/--no-skip-optionals",
    default=None,
    help="Expected skip-optionals setting; must match the validate pass.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["terminal", "markdown", "json"], case_sensitive=False),
    default="terminal",
    help="Output format for the report (default: terminal).",
)
@click.option(
    "--output",
    "-o",
    "output_path",
    type=click.Path(),
    default=None,
    help="Write report to file (or into directory) instead of stdout.",
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to configuration file.",
)
@_logging_options
@_graph_options
def report(
    results_directory: str | None,
    skip_optionals: bool | None,
    output_format: str,
    output_path: str | None,
    config_path: str | None,
    verbose_flag: bool,
    quiet_flag: bool,
    json_log: bool,
    graph_path: str | None,
    project_name: str | None,
    packages: tuple[str, ...],
) -> None:
    """Render the licenses report from stored validation results.

    Rebuilds the dependency tree with the settings of the validate pass
    and lists direct licenses, transitive licenses and the full hierarchy.
    Invalid licenses do not fail this command.

    \b
    Examples:
        license-validator report
        license-validator report --format markdown -o licenses.md
        license-validator report --graph deps.yaml --format json
    """
    verbosity = _verbosity(verbose_flag, quiet_flag)
    format_value = output_format.lower()
    configure_logging(verbose=verbose_flag, quiet=quiet_flag, json_log=json_log)

    try:
        config = load_config(config_path)
        options = build_report_options(
            config,
            results_directory=results_directory,
            output_path=output_path,
            output_format=format_value,
            skip_optionals=skip_optionals,
        )
        provider = _create_provider(graph_path, packages, project_name)

        license_report = run_report(provider, options)
        _display_report(license_report, format_value, output_path, verbosity)
        sys.exit(EXIT_SUCCESS)

    except LicenseValidatorError as e:
        _display_error(e, format_value)
        sys.exit(EXIT_ERROR)


def _verbosity(verbose_flag: bool, quiet_flag: bool) -> Verbosity:
    """Determine verbosity from mutually exclusive flags."""
    if verbose_flag and quiet_flag:
        raise click.UsageError("--verbose and --quiet are mutually exclusive.")
    if quiet_flag:
        return Verbosity.QUIET
    if verbose_flag:
        return Verbosity.VERBOSE
    return Verbosity.NORMAL


def _create_provider(
    graph_path: str | None,
    packages: tuple[str, ...],
    project_name: str | None,
) -> ArtifactGraphProvider:
    """Create the artifact graph provider for the selected source.

    Args:
        graph_path: Optional graph manifest path.
        packages: Direct dependencies when reading the environment.
        project_name: Root name when reading the environment.

    Returns:
        Manifest provider if a graph is given, environment provider otherwise.

    Raises:
        ConfigurationError: If both a manifest and packages are given.
    """
    if graph_path is not None:
        if packages:
            raise ConfigurationError(
                "Packages cannot be given together with --graph; "
                "the manifest declares the dependencies"
            )
        return ManifestGraphProvider.from_file(Path(graph_path))
    return EnvironmentGraphProvider(
        packages=packages,
        project_name=project_name or Path.cwd().name or "project",
    )


def _display_summary(
    summary: ValidationSummary,
    format_type: str,
    verbosity: Verbosity = Verbosity.NORMAL,
) -> None:
    """Display validate pass results in the specified format.

    Args:
        summary: The validation summary to display.
        format_type: Output format (terminal, json).
        verbosity: Output verbosity level.
    """
    if format_type == "json":
        click.echo(ValidationJsonFormatter().format_summary(summary))
    else:
        ValidationTerminalFormatter(
            console=_console, verbosity=verbosity
        ).format_summary(summary)


def _display_report(
    license_report: LicenseReport,
    format_type: str,
    output_path: str | None = None,
    verbosity: Verbosity = Verbosity.NORMAL,
) -> None:
    """Render the licenses report to stdout or into a file.

    The terminal format cannot be stored, so a report written to a file
    falls back to Markdown.
    """
    if format_type == "terminal" and not output_path:
        ReportTerminalFormatter(console=_console, verbosity=verbosity).format_report(
            license_report
        )
        return

    if format_type == "json":
        content = ReportJsonFormatter().format_report(license_report)
    else:
        content = ReportMarkdownFormatter().format_report(license_report)

    if not output_path:
        click.echo(content)
        return

    extension = "json" if format_type == "json" else "md"
    _write_report_file(content, _report_target(Path(output_path), extension))


def _report_target(output_path: Path, extension: str) -> Path:
    """Resolve ``--output``; a directory gets the default report file name."""
    if output_path.is_dir():
        return output_path / f"{REPORT_OUTPUT_NAME}.{extension}"
    return output_path


def _write_report_file(content: str, target: Path) -> None:
    """Write a rendered report, creating missing parent directories.

    Status messages go to stderr so stdout stays free for piped output.

    Raises:
        ReportError: If the file cannot be written.
    """
    if target.exists():
        _error_console.print(f"[yellow]Overwriting {target}[/yellow]")
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        target.chmod(0o644)
    except OSError as e:
        raise ReportError(f"Cannot write report to '{target}': {e}") from e

    _error_console.print(f"[green]Report written to {target}[/green]")


def _display_error(error: LicenseValidatorError, format_type: str) -> None:
    """Print ``Error: <Type>: <message>`` to stderr.

    Rich markup is only used for terminal output; the other formats get the
    plain line so scripts can parse it.
    """
    message = f"Error: {type(error).__name__}: {error}"
    if format_type == "terminal":
        _error_console.print(f"[red bold]{escape(message)}[/red bold]")
    else:
        click.echo(message, err=True)


if __name__ == "__main__":
    main()
