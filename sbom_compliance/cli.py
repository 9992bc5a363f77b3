"""CLI entry point for sbom-compliance."""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Callable, TypeVar

import click
from pydantic import TypeAdapter, ValidationError
from rich.console import Console
from rich.table import Table

from sbom_compliance import __version__
from sbom_compliance.analysis.report import assess_product
from sbom_compliance.config import load_config
from sbom_compliance.constants import (
    EXIT_ERROR,
    EXIT_ISSUES,
    EXIT_SUCCESS,
    TOKEN_ENV_VAR,
)
from sbom_compliance.exceptions import ComplianceError, ConfigurationError
from sbom_compliance.graph.memory import InMemoryDependencyGraph
from sbom_compliance.logging import configure_logging
from sbom_compliance.models.compatibility import (
    CompatibilityVerdict,
    DependencyDepth,
    DistributionModel,
    LicenseCategory,
    LicenseFinding,
)
from sbom_compliance.models.report import ComplianceReport, Verbosity
from sbom_compliance.output.report_json import ReportJsonFormatter
from sbom_compliance.output.report_markdown import ReportMarkdownFormatter
from sbom_compliance.output.terminal import TerminalFormatter
from sbom_compliance.pipeline import EnrichmentPipeline
from sbom_compliance.resolvers.lockfile import LockfileVersionResolver
from sbom_compliance.resolvers.providers import HttpFileContentProvider

# Module-level console for consistent output
_console = Console()
# Separate console for error output (writes to stderr)
_error_console = Console(stderr=True)

_MODEL_CHOICES = [model.value for model in DistributionModel]
_CATEGORY_CHOICES = [category.value for category in LicenseCategory]
_FINDINGS_ADAPTER = TypeAdapter(list[LicenseFinding])

F = TypeVar("F", bound=Callable[..., Any])

VERDICT_STYLE = {
    CompatibilityVerdict.COMPATIBLE: "green",
    CompatibilityVerdict.REVIEW_NEEDED: "yellow",
    CompatibilityVerdict.INCOMPATIBLE: "red",
}


def _verbosity_options(func: F) -> F:
    func = click.option(
        "--quiet",
        "-q",
        "quiet_flag",
        is_flag=True,
        default=False,
        help="Minimal output (summary line only, errors only in logs).",
    )(func)
    func = click.option(
        "--verbose",
        "-v",
        "verbose_flag",
        is_flag=True,
        default=False,
        help="Detailed output, including debug logs.",
    )(func)
    return func


def _config_option(func: F) -> F:
    return click.option(
        "--config",
        "-c",
        "config_path",
        type=click.Path(exists=True, dir_okay=False),
        default=None,
        help="Path to configuration file (default: .sbom-compliance.yaml).",
    )(func)


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """SBOM Compliance - License compatibility and version-gap tooling.

    Evaluates dependency licenses against a product's distribution model,
    detects cross-license conflicts, and fills in missing dependency
    versions from repository lockfiles.

    \b
    Examples:
        sbom-compliance models
        sbom-compliance evaluate saas_hosted copyleft_strong AGPL-3.0-only
        sbom-compliance check findings.json --model proprietary_binary
        sbom-compliance conflicts "GPL-2.0-only" "Apache-2.0"
        sbom-compliance resolve graph.json my-product
    """
    pass


@main.command()
def models() -> None:
    """List the supported distribution models."""
    table = Table(title="Distribution Models", show_header=True, header_style="bold")
    table.add_column("Model", style="cyan")
    table.add_column("Label")
    for model in DistributionModel:
        table.add_row(model.value, model.label)
    _console.print(table)


@main.command()
@click.argument("model", type=click.Choice(_MODEL_CHOICES, case_sensitive=False))
@click.argument("category", type=click.Choice(_CATEGORY_CHOICES, case_sensitive=False))
@click.argument("expression", default="")
@click.option(
    "--depth",
    type=click.Choice([depth.value for depth in DependencyDepth], case_sensitive=False),
    default=DependencyDepth.TRANSITIVE.value,
    help="Dependency depth (default: transitive).",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["terminal", "json"], case_sensitive=False),
    default="terminal",
    help="Output format (default: terminal).",
)
@_config_option
def evaluate(
    model: str,
    category: str,
    expression: str,
    depth: str,
    output_format: str,
    config_path: str | None,
) -> None:
    """Evaluate one license against a distribution model.

    Exits with code 1 unless the verdict is compatible.

    \b
    Examples:
        sbom-compliance evaluate saas_hosted copyleft_strong AGPL-3.0-only
        sbom-compliance evaluate library_component copyleft_weak LGPL-2.1 --depth direct
    """
    format_value = output_format.lower()
    try:
        config = load_config(config_path)
        result = config.build_engine().evaluate(
            DistributionModel(model.lower()),
            LicenseCategory(category.lower()),
            expression,
            depth.lower(),
        )
    except ComplianceError as e:
        _display_error(e, format_value)
        sys.exit(EXIT_ERROR)

    if format_value == "json":
        click.echo(result.model_dump_json(indent=2))
    else:
        style = VERDICT_STYLE[result.verdict]
        _console.print(f"[{style}]{result.verdict.value}[/{style}] ({result.rule})")
        _console.print(result.reason, markup=False)

    sys.exit(EXIT_SUCCESS if result.compatible else EXIT_ISSUES)


@main.command()
@click.argument("findings_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--model",
    "-m",
    required=True,
    type=click.Choice(_MODEL_CHOICES, case_sensitive=False),
    help="Distribution model of the product.",
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
    help="Write report to file instead of stdout.",
)
@_verbosity_options
@_config_option
def check(
    findings_path: str,
    model: str,
    output_format: str,
    output_path: str | None,
    verbose_flag: bool,
    quiet_flag: bool,
    config_path: str | None,
) -> None:
    """Check a product's license findings and report conflicts.

    FINDINGS_PATH is a JSON array of findings, each with dependency_purl,
    license_declared, license_category and dependency_depth.

    Exits with code 1 when any dependency is incompatible or needs review,
    or when conflicting licenses are found.

    \b
    Examples:
        sbom-compliance check findings.json --model proprietary_binary
        sbom-compliance check findings.json -m saas_hosted --format json
        sbom-compliance check findings.json -m library_component -o report.md --format markdown
    """
    verbosity = _setup_verbosity(verbose_flag, quiet_flag)
    format_value = output_format.lower()

    try:
        config = load_config(config_path)
        findings = _load_findings(Path(findings_path))
        report = assess_product(
            DistributionModel(model.lower()),
            findings,
            engine=config.build_engine(),
            detector=config.build_detector(),
        )
        _display_report(report, format_value, output_path, verbosity)

        if report.has_issues:
            sys.exit(EXIT_ISSUES)
        sys.exit(EXIT_SUCCESS)

    except ComplianceError as e:
        _display_error(e, format_value)
        sys.exit(EXIT_ERROR)


@main.command()
@click.argument("expressions", nargs=-1, required=True)
@_config_option
def conflicts(expressions: tuple[str, ...], config_path: str | None) -> None:
    """Detect conflicting licenses across SPDX expressions.

    Exits with code 1 when any conflict is found.

    \b
    Examples:
        sbom-compliance conflicts "GPL-2.0-only" "Apache-2.0"
        sbom-compliance conflicts "(MIT OR EPL-1.0)" "GPL-3.0-only"
    """
    try:
        config = load_config(config_path)
    except ComplianceError as e:
        _display_error(e, "terminal")
        sys.exit(EXIT_ERROR)

    found = config.build_detector().detect(expressions)
    if not found:
        _console.print("[green]No license conflicts found.[/green]")
        sys.exit(EXIT_SUCCESS)

    _console.print(f"[bold red]License Conflicts ({len(found)})[/bold red]")
    for conflict in found:
        _console.print(
            f"  [red]![/red] {conflict.license_a} + {conflict.license_b}: "
            f"{conflict.reason}"
        )
    sys.exit(EXIT_ISSUES)


@main.command()
@click.argument("graph_path", type=click.Path(exists=True, dir_okay=False))
@click.argument("product_id")
@click.option(
    "--token",
    envvar=TOKEN_ENV_VAR,
    default=None,
    help=f"Repository access token (default: ${TOKEN_ENV_VAR}).",
)
@_verbosity_options
@_config_option
def resolve(
    graph_path: str,
    product_id: str,
    token: str | None,
    verbose_flag: bool,
    quiet_flag: bool,
    config_path: str | None,
) -> None:
    """Fill in missing dependency versions from repository lockfiles.

    GRAPH_PATH is a JSON graph snapshot; it is rewritten in place with the
    resolved versions.

    \b
    Examples:
        sbom-compliance resolve graph.json my-product --token ghp_xxx
        SBOM_COMPLIANCE_TOKEN=ghp_xxx sbom-compliance resolve graph.json my-product
    """
    verbosity = _setup_verbosity(verbose_flag, quiet_flag)

    try:
        config = load_config(config_path)
        path = Path(graph_path)
        graph = InMemoryDependencyGraph.from_file(path)
        resolver = LockfileVersionResolver(
            graph,
            HttpFileContentProvider(
                instance_urls=config.instance_urls,
                timeout=config.fetch_timeout,
            ),
            fetch_timeout=config.fetch_timeout,
            default_branch=config.default_branch,
        )
        outcome = asyncio.run(EnrichmentPipeline(resolver).run(product_id, token or ""))
        result = outcome.lockfile

        if result.resolved:
            try:
                graph.to_file(path)
            except OSError as e:
                raise ConfigurationError(
                    f"Cannot write graph file '{graph_path}': {e}"
                ) from e

    except ComplianceError as e:
        _display_error(e, "terminal")
        sys.exit(EXIT_ERROR)

    if verbosity != Verbosity.QUIET:
        _console.print(
            f"Resolved {result.resolved}/{result.total_no_version} "
            f"version gaps for {product_id}"
        )
        if result.diagnostic:
            _console.print(result.diagnostic, style="yellow", markup=False)
    sys.exit(EXIT_SUCCESS)


def _setup_verbosity(verbose_flag: bool, quiet_flag: bool) -> Verbosity:
    """Validate verbosity flags and configure logging to match."""
    if verbose_flag and quiet_flag:
        raise click.UsageError("--verbose and --quiet are mutually exclusive.")

    configure_logging(verbose=verbose_flag, quiet=quiet_flag)
    if quiet_flag:
        return Verbosity.QUIET
    if verbose_flag:
        return Verbosity.VERBOSE
    return Verbosity.NORMAL


def _load_findings(path: Path) -> list[LicenseFinding]:
    """Load license findings from a JSON file.

    Raises:
        ConfigurationError: If the file cannot be read or is invalid.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot read findings file '{path}': {e}") from e

    try:
        return _FINDINGS_ADAPTER.validate_json(content)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid findings file '{path}': {e}") from e


def _write_output_to_file(content: str, path: str) -> None:
    """Write report content to file.

    Args:
        content: The report content to write.
        path: The file path to write to.

    Raises:
        ConfigurationError: If file cannot be written.
    """
    file_path = Path(path)

    try:
        if file_path.exists():
            _console.print(
                f"[yellow]Warning: Overwriting existing file: {path}[/yellow]"
            )
        file_path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot write to file '{path}': {e}") from e

    _console.print(f"[green]Report written to {path}[/green]")


def _display_report(
    report: ComplianceReport,
    format_type: str,
    output_path: str | None = None,
    verbosity: Verbosity = Verbosity.NORMAL,
) -> None:
    """Display a compliance report in the specified format.

    Args:
        report: The report to display.
        format_type: Output format (terminal, json, markdown).
        output_path: Optional file path to write output to.
        verbosity: Output verbosity level.
    """
    if format_type == "json":
        content = ReportJsonFormatter().format_report(report)
    elif format_type == "markdown":
        content = ReportMarkdownFormatter().format_report(report)
    else:  # terminal
        if output_path:
            # Terminal format to file uses markdown instead
            content = ReportMarkdownFormatter().format_report(report)
        else:
            TerminalFormatter(console=_console, verbosity=verbosity).format_report(
                report
            )
            return

    if output_path:
        _write_output_to_file(content, output_path)
    else:
        click.echo(content)


def _display_error(error: ComplianceError, format_type: str) -> None:
    """Display error message to user.

    All errors are written to stderr for consistent CI/CD behavior.

    Args:
        error: The exception that occurred.
        format_type: Output format type for styling.
    """
    error_type = type(error).__name__
    message = f"Error: {error_type}: {error}"

    if format_type == "terminal":
        _error_console.print(message, style="red bold", markup=False)
    elif format_type == "json":
        click.echo(json.dumps({"error": error_type, "message": str(error)}), err=True)
    else:
        click.echo(message, err=True)


if __name__ == "__main__":
    main()
