"""Terminal output formatter for the licenses report using Rich."""
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from license_validator.constants import LEGAL_DISCLAIMER
from license_validator.models.artifact import ArtifactScope
from license_validator.models.config import Verbosity
from license_validator.models.report import HierarchyEntry, LicenseReport, LicenseRow
from license_validator.models.validation import ValidationResult


class ReportTerminalFormatter:
    """Format a licenses report for terminal display using Rich.

    Shows the direct and transitive license tables followed by the
    dependency hierarchy as a tree, with color-coded validation outcomes.
    """

    CIRCULAR_MARKER = " [cyan]↺[/cyan]"
    MISSING_MARKER = " [yellow]no validation results[/yellow]"

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

    def format_report(self, report: LicenseReport) -> None:
        """Format and display the licenses report.

        Args:
            report: The report to display.
        """
        if self._verbosity == Verbosity.QUIET:
            self._print_quiet_output(report)
            return

        self._console.print(f"[bold]{escape(report.title)}[/bold] - {report.project}")
        self._console.print(
            Panel(
                LEGAL_DISCLAIMER,
                title="[bold yellow]NOT LEGAL ADVICE[/bold yellow]",
                border_style="yellow",
            )
        )

        self._console.print(
            self._build_table("Direct Dependencies", report.direct_licenses)
        )
        self._console.print(
            self._build_table("Transitive Dependencies", report.transitive_licenses)
        )

        if not report.hierarchy:
            self._console.print("[yellow]No dependencies found[/yellow]")
            return

        rich_tree = Tree(f"[bold]{report.project}[/bold]")
        for entry in report.hierarchy:
            self._add_entry_to_tree(rich_tree, entry)
        self._console.print(rich_tree)

    def _print_quiet_output(self, report: LicenseReport) -> None:
        """Print a single status line plus invalid licenses."""
        invalid = [
            row
            for row in report.direct_licenses + report.transitive_licenses
            if not row.valid
        ]
        if invalid:
            self._console.print(
                f"[red]INVALID LICENSES[/red] - {report.project}: {len(invalid)} listed"
            )
            for row in invalid:
                self._console.print(f"  - [red]{escape(row.original_license_name)}[/red]")
        else:
            self._console.print(
                f"[green]PASS[/green] - {report.project}: all listed licenses valid"
            )

    def _build_table(self, title: str, rows: list[LicenseRow]) -> Table:
        """Build a license table.

        Args:
            title: Table title.
            rows: Rows of the table.

        Returns:
            Rich Table ready for printing.
        """
        table = Table(title=title)
        table.add_column("License from Artifact", style="cyan")
        table.add_column("License", style="magenta")
        table.add_column("Validation")
        if self._verbosity == Verbosity.VERBOSE:
            table.add_column("URL", style="dim")

        for row in rows:
            cells = [
                escape(row.original_license_name),
                escape(row.license.name) if row.license else "-",
                self._format_valid(row.valid),
            ]
            if self._verbosity == Verbosity.VERBOSE:
                cells.append(escape(row.original_license_url or "-"))
            table.add_row(*cells)
        return table

    def _add_entry_to_tree(self, parent: Tree, entry: HierarchyEntry) -> None:
        """Recursively add an entry and its children to the tree.

        Args:
            parent: Parent Rich Tree node.
            entry: Hierarchy entry to add.
        """
        branch = parent.add(self._format_entry_label(entry))
        for child in entry.children:
            self._add_entry_to_tree(branch, child)

    def _format_entry_label(self, entry: HierarchyEntry) -> str:
        label = str(entry.coordinate)
        if entry.scope != ArtifactScope.COMPILE:
            label += f" [dim]({entry.scope.value})[/dim]"
        if entry.optional:
            label += " [dim](optional)[/dim]"

        if entry.results:
            licenses = ", ".join(self._format_result(r) for r in entry.results)
            label += f" ({licenses})"
        else:
            label += self.MISSING_MARKER

        if entry.circular:
            label += self.CIRCULAR_MARKER
        return label

    @staticmethod
    def _format_result(result: ValidationResult) -> str:
        color = "green" if result.valid else "red"
        return f"[{color}]{escape(result.original_license_name)}[/{color}]"

    @staticmethod
    def _format_valid(valid: bool) -> str:
        return "[green]valid[/green]" if valid else "[red]invalid[/red]"
