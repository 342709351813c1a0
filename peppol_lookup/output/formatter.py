"""Console output formatting using Rich."""

import json
from typing import Any, Optional

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from peppol_lookup.data.schemas import LookupReport, OutcomeStatus, RegisteredEntry


class ConsoleFormatter:
    """Formats output for console display using Rich."""

    def __init__(self, console: Optional[Console] = None):
        """Initialize the formatter.

        Args:
            console: Rich Console instance (created if not provided).
        """
        self.console = console or Console()

    def _status_color(self, status: OutcomeStatus) -> str:
        return {
            OutcomeStatus.REGISTERED: "green",
            OutcomeStatus.UNREGISTERED: "yellow",
            OutcomeStatus.FAILED: "red",
        }.get(status, "white")

    def print_report(self, report: LookupReport) -> None:
        """Print a batch lookup report.

        Args:
            report: The report to display.
        """
        summary = Text()
        summary.append("Checked: ", style="bold")
        summary.append(f"{report.total}\n")
        summary.append("Registered: ", style="bold")
        summary.append(f"{len(report.registered)}", style=self._status_color(OutcomeStatus.REGISTERED))
        summary.append(f" ({len(report.compliant)} compliant)\n")
        summary.append("Unregistered: ", style="bold")
        summary.append(f"{len(report.unregistered)}", style=self._status_color(OutcomeStatus.UNREGISTERED))
        if report.failed:
            summary.append("\nFailed: ", style="bold")
            summary.append(f"{len(report.failed)}", style=self._status_color(OutcomeStatus.FAILED))

        self.console.print(Panel(summary, title="Peppol Directory Lookup"))

        if report.registered:
            self._print_registered_table(report.registered)

        if report.unregistered:
            self.console.print(
                f"[yellow]✗[/yellow] Unregistered companies: {', '.join(report.unregistered)}"
            )

        for failure in report.failed:
            self.print_warning(f"{failure.identifier}: {failure.reason}")

    def _print_registered_table(self, entries: list[RegisteredEntry]) -> None:
        table = Table(title="Registered Companies")
        table.add_column("#", style="dim")
        table.add_column("Company Number")
        table.add_column("Participant ID")
        table.add_column("Name", max_width=40)
        table.add_column("Compliant")

        for idx, entry in enumerate(entries, start=1):
            table.add_row(
                str(idx),
                entry.company_number,
                entry.participant_id or "-",
                entry.name or "-",
                "[green]yes[/green]" if entry.compliant else "[red]no[/red]",
            )

        self.console.print(table)

    def print_lists(self, report: LookupReport) -> None:
        """Print the registered and unregistered lists as plain data."""
        self.console.print("✅ Registered Companies:")
        self.console.print([entry.model_dump(exclude_none=True) for entry in report.registered])
        self.console.print("❌ Unregistered Companies:", report.unregistered)
        if report.failed:
            self.console.print("⚠ Failed Lookups:", [f.model_dump() for f in report.failed])

    def print_details(self, participant_id: str, details: Any) -> None:
        """Print a participant detail document as highlighted JSON."""
        body = json.dumps(details, indent=2, ensure_ascii=False)
        self.console.print(Panel(Syntax(body, "json"), title=participant_id))

    def print_success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {message}")

    def print_error(self, message: str) -> None:
        self.console.print(f"[red]✗[/red] {message}")

    def print_warning(self, message: str) -> None:
        self.console.print(f"[yellow]⚠[/yellow] {message}")
