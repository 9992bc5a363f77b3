"""Tests for Markdown report formatter."""
from sbom_compliance.models.compatibility import DistributionModel
from sbom_compliance.models.report import ComplianceReport
from sbom_compliance.output.report_markdown import ReportMarkdownFormatter


class TestReportMarkdownFormatter:
    """Tests for ReportMarkdownFormatter."""

    def test_headings_and_summary(self, mixed_report: ComplianceReport) -> None:
        """Test the document structure."""
        output = ReportMarkdownFormatter().format_report(mixed_report)

        assert output.startswith("# License Compliance Report")
        assert "## Summary" in output
        assert "- **Distribution model:** Proprietary Binary" in output
        assert "- **Status:** Issues found" in output

    def test_table_rows_include_reasons(self, mixed_report: ComplianceReport) -> None:
        """Test that each dependency row carries its reason."""
        output = ReportMarkdownFormatter().format_report(mixed_report)

        assert "| Dependency | Verdict | Rule | Reason |" in output
        assert "`pkg:npm/readline@1.0.0`" in output
        assert ":x: incompatible" in output
        assert ":warning: review_needed" in output
        assert mixed_report.results["pkg:npm/readline@1.0.0"].reason in output

    def test_conflicts_section(self, mixed_report: ComplianceReport) -> None:
        """Test the conflicts section."""
        output = ReportMarkdownFormatter().format_report(mixed_report)

        assert "## License Conflicts" in output
        assert "**GPL-2.0-only** + **Apache-2.0**" in output

    def test_clean_report_has_no_conflicts_section(
        self, clean_report: ComplianceReport
    ) -> None:
        """Test that the conflicts section is omitted when empty."""
        output = ReportMarkdownFormatter().format_report(clean_report)

        assert "## License Conflicts" not in output
        assert "- **Status:** Pass" in output

    def test_empty_report(self) -> None:
        """Test a report without findings."""
        output = ReportMarkdownFormatter().format_report(
            ComplianceReport(distribution_model=DistributionModel.INTERNAL_ONLY)
        )
        assert "*No findings to evaluate.*" in output
