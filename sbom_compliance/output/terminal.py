"""Terminal formatter for compliance reports using Rich."""
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from sbom_compliance.constants import LEGAL_DISCLAIMER
from sbom_compliance.models.compatibility import CompatibilityVerdict
from sbom_compliance.models.report import ComplianceReport, Verbosity


class TerminalFormatter:
    """Format compliance reports for terminal display.

    Non-compatible verdicts are always listed with their reason verbatim;
    verbose mode lists compatible dependencies too.
    """

    VERDICT_DISPLAY = {
        CompatibilityVerdict.COMPATIBLE: "[green]compatible[/green]",
        CompatibilityVerdict.REVIEW_NEEDED: "[yellow]review needed[/yellow]",
        CompatibilityVerdict.INCOMPATIBLE: "[red]incompatible[/red]",
    }

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

    def format_report(self, report: ComplianceReport) -> None:
        """Format and display a compliance report.

        Args:
            report: The report to display.
        """
        if self._verbosity == Verbosity.QUIET:
            self._print_quiet_output(report)
            return

        self._print_disclaimer()
        self._print_summary(report)

        if not report.results:
            self._console.print("[yellow]No findings to evaluate.[/yellow]")
        else:
            self._print_results(report)

        if report.conflicts:
            self._print_conflicts(report)

    def _print_quiet_output(self, report: ComplianceReport) -> None:
        incompatible = report.count(CompatibilityVerdict.INCOMPATIBLE)
        review = report.count(CompatibilityVerdict.REVIEW_NEEDED)
        if report.has_issues:
            self._console.print(
                f"[red]ISSUES FOUND[/red] - {incompatible} incompatible, "
                f"{review} need review, {len(report.conflicts)} conflict(s)"
            )
        else:
            self._console.print(
                f"[green]PASS[/green] - All {len(report.results)} dependencies compatible"
            )

    def _print_disclaimer(self) -> None:
        panel = Panel(
            LEGAL_DISCLAIMER,
            title="[bold yellow]NOT LEGAL ADVICE[/bold yellow]",
            border_style="yellow",
        )
        self._console.print(panel)
        self._console.print("")

    def _print_summary(self, report: ComplianceReport) -> None:
        status_color = "red" if report.has_issues else "green"
        status = "ISSUES FOUND" if report.has_issues else "PASS"
        lines = [
            f"Distribution Model: {report.distribution_model.label}",
            f"Dependencies: {len(report.results)}",
            f"Compatible: {report.count(CompatibilityVerdict.COMPATIBLE)}",
            f"Review Needed: {report.count(CompatibilityVerdict.REVIEW_NEEDED)}",
            f"Incompatible: {report.count(CompatibilityVerdict.INCOMPATIBLE)}",
            f"License Conflicts: {len(report.conflicts)}",
            "",
            f"Status: [{status_color}]{status}[/{status_color}]",
        ]
        panel = Panel(
            "\n".join(lines),
            title="[bold]COMPLIANCE SUMMARY[/bold]",
            border_style=status_color,
        )
        self._console.print(panel)
        self._console.print("")

    def _print_results(self, report: ComplianceReport) -> None:
        table = Table(
            title="License Compatibility",
            show_header=True,
            header_style="bold",
        )
        table.add_column("Dependency", style="cyan")
        table.add_column("Verdict")
        table.add_column("Rule", style="dim")
        table.add_column("Reason")

        rows = 0
        for purl, result in sorted(report.results.items()):
            if result.compatible and self._verbosity != Verbosity.VERBOSE:
                continue
            table.add_row(
                Text(purl),
                self.VERDICT_DISPLAY[result.verdict],
                result.rule,
                Text(result.reason),
            )
            rows += 1

        if rows:
            self._console.print(table)
        else:
            self._console.print(
                f"[green]All {len(report.results)} dependencies are compatible.[/green]"
            )

    def _print_conflicts(self, report: ComplianceReport) -> None:
        self._console.print("")
        self._console.print(
            f"[bold red]License Conflicts ({len(report.conflicts)})[/bold red]"
        )
        for conflict in report.conflicts:
            self._console.print(
                f"  [red]![/red] {conflict.license_a} + {conflict.license_b}: "
                f"{conflict.reason}"
            )
