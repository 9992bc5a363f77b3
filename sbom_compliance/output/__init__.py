"""Output formatters for sbom-compliance."""

from sbom_compliance.output.report_json import ReportJsonFormatter
from sbom_compliance.output.report_markdown import ReportMarkdownFormatter
from sbom_compliance.output.terminal import TerminalFormatter

__all__ = [
    "ReportJsonFormatter",
    "ReportMarkdownFormatter",
    "TerminalFormatter",
]
