"""JSON formatter for compliance reports."""
import json
from typing import Any

from sbom_compliance.constants import LEGAL_DISCLAIMER
from sbom_compliance.models.compatibility import CompatibilityVerdict
from sbom_compliance.models.report import ComplianceReport


class ReportJsonFormatter:
    """Format compliance reports as JSON for CI/CD integration."""

    def format_report(self, report: ComplianceReport) -> str:
        """Format a compliance report as a JSON string.

        Args:
            report: The report to format.

        Returns:
            JSON string with sorted results, conflicts and a summary.
        """
        return json.dumps(self._build_output(report), indent=2)

    def _build_output(self, report: ComplianceReport) -> dict[str, Any]:
        return {
            "disclaimer": LEGAL_DISCLAIMER,
            "distribution_model": {
                "id": report.distribution_model.value,
                "label": report.distribution_model.label,
            },
            "summary": {
                "total": len(report.results),
                "compatible": report.count(CompatibilityVerdict.COMPATIBLE),
                "review_needed": report.count(CompatibilityVerdict.REVIEW_NEEDED),
                "incompatible": report.count(CompatibilityVerdict.INCOMPATIBLE),
                "conflicts": len(report.conflicts),
                "has_issues": report.has_issues,
            },
            "results": [
                {
                    "purl": purl,
                    "verdict": result.verdict.value,
                    "rule": result.rule,
                    "reason": result.reason,
                }
                for purl, result in sorted(report.results.items())
            ],
            "conflicts": [
                {
                    "license_a": conflict.license_a,
                    "license_b": conflict.license_b,
                    "reason": conflict.reason,
                }
                for conflict in report.conflicts
            ],
        }
