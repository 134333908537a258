"""Terminal output formatter for validate pass results using Rich."""
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from license_validator.models.config import Verbosity
from license_validator.models.validation import ValidationSummary


class ValidationTerminalFormatter:
    """Format validate pass results for terminal display using Rich.

    Creates a table of validation outcomes followed by the verdict.
    Quiet mode prints the verdict and the invalid licenses only.
    """

    def __init__(
        self,
        console: Optional[Console] = None,
        verbosity: Verbosity = Verbosity.NORMAL,
    ) -> None:
        """Initialize the formatter with a Rich console.

        Args:
            console: Optional Rich Console instance. If not provided,
                a new Console will be created.
            verbosity: Output verbosity level.
        """
        self._console = console if console is not None else Console()
        self._verbosity = verbosity

    def format_summary(self, summary: ValidationSummary) -> None:
        """Format and display validate pass results.

        Args:
            summary: The validation summary to display.
        """
        if self._verbosity == Verbosity.QUIET:
            self._print_quiet_output(summary)
            return

        if not summary.results:
            self._console.print("[yellow]No dependencies found[/yellow]")
            self._print_verdict(summary)
            return

        table = Table(title="License Validation Results")
        table.add_column("Artifact", style="cyan", no_wrap=True)
        table.add_column("Scope", style="dim")
        table.add_column("License from Artifact")
        table.add_column("License", style="magenta")
        table.add_column("Validation")
        if self._verbosity == Verbosity.VERBOSE:
            table.add_column("URL", style="dim")

        for result in summary.results:
            cells = [
                str(result.artifact),
                result.scope.value,
                escape(result.original_license_name),
                escape(result.license.name) if result.license else "-",
                "[green]valid[/green]" if result.valid else "[red]invalid[/red]",
            ]
            if self._verbosity == Verbosity.VERBOSE:
                cells.append(escape(result.original_license_url or "-"))
            table.add_row(*cells)

        self._console.print(table)
        self._console.print(f"\n[bold]Artifacts checked:[/bold] {summary.artifact_count}")
        self._console.print(f"[bold]Invalid licenses:[/bold] {summary.invalid_count}")
        self._print_verdict(summary)

    def _print_quiet_output(self, summary: ValidationSummary) -> None:
        """Print minimal output for quiet mode.

        Args:
            summary: The validation summary to display.
        """
        self._print_verdict(summary)
        for result in summary.results:
            if not result.valid:
                self._console.print(
                    f"  - {result.artifact}: "
                    f"[red]{escape(result.original_license_name)}[/red]"
                )

    def _print_verdict(self, summary: ValidationSummary) -> None:
        if summary.passed:
            self._console.print(
                f"[green]PASS[/green] - All {summary.artifact_count} artifacts "
                "have valid licenses"
            )
        else:
            self._console.print(
                f"[red]FAILED[/red] - {summary.invalid_count} invalid license(s) found"
            )
