"""Markdown formatter for compliance reports."""

from sbom_compliance.constants import LEGAL_DISCLAIMER
from sbom_compliance.models.compatibility import CompatibilityVerdict
from sbom_compliance.models.report import ComplianceReport


class ReportMarkdownFormatter:
    """Format compliance reports as Markdown for documentation and audits."""

    VERDICT_EMOJI = {
        CompatibilityVerdict.COMPATIBLE: ":white_check_mark:",
        CompatibilityVerdict.REVIEW_NEEDED: ":warning:",
        CompatibilityVerdict.INCOMPATIBLE: ":x:",
    }

    def format_report(self, report: ComplianceReport) -> str:
        """Format a compliance report as a Markdown string.

        Args:
            report: The report to format.

        Returns:
            Markdown with a summary, a verdict table and any conflicts.
        """
        lines: list[str] = []

        lines.append("# License Compliance Report")
        lines.append("")
        lines.append(f"> **Disclaimer:** {LEGAL_DISCLAIMER}")
        lines.append("")

        lines.extend(self._format_summary(report))
        lines.append("")

        if report.results:
            lines.extend(self._format_results(report))
            lines.append("")
        else:
            lines.append("*No findings to evaluate.*")
            lines.append("")

        if report.conflicts:
            lines.extend(self._format_conflicts(report))
            lines.append("")

        return "\n".join(lines)

    def _format_summary(self, report: ComplianceReport) -> list[str]:
        status = "Issues found" if report.has_issues else "Pass"
        return [
            "## Summary",
            "",
            f"- **Distribution model:** {report.distribution_model.label}",
            f"- **Dependencies:** {len(report.results)}",
            f"- **Compatible:** {report.count(CompatibilityVerdict.COMPATIBLE)}",
            f"- **Review needed:** {report.count(CompatibilityVerdict.REVIEW_NEEDED)}",
            f"- **Incompatible:** {report.count(CompatibilityVerdict.INCOMPATIBLE)}",
            f"- **License conflicts:** {len(report.conflicts)}",
            f"- **Status:** {status}",
        ]

    def _format_results(self, report: ComplianceReport) -> list[str]:
        lines = [
            "## Dependencies",
            "",
            "| Dependency | Verdict | Rule | Reason |",
            "|------------|---------|------|--------|",
        ]
        for purl, result in sorted(report.results.items()):
            emoji = self.VERDICT_EMOJI[result.verdict]
            reason = result.reason.replace("|", "\\|")
            lines.append(
                f"| `{purl}` | {emoji} {result.verdict.value} | `{result.rule}` | {reason} |"
            )
        return lines

    def _format_conflicts(self, report: ComplianceReport) -> list[str]:
        lines = ["## License Conflicts", ""]
        for conflict in report.conflicts:
            lines.append(
                f"- **{conflict.license_a}** + **{conflict.license_b}**: {conflict.reason}"
            )
        return lines
