"""Product-level compliance report model."""

from enum import Enum

from pydantic import BaseModel, Field, computed_field

from sbom_compliance.models.compatibility import (
    CompatibilityResult,
    CompatibilityVerdict,
    DistributionModel,
)
from sbom_compliance.models.conflict import LicenseConflict


class Verbosity(Enum):
    """Output verbosity levels."""

    QUIET = "quiet"
    NORMAL = "normal"
    VERBOSE = "verbose"


class ComplianceReport(BaseModel):
    """Verdicts and conflicts for every finding of one product."""

    distribution_model: DistributionModel = Field(
        description="Distribution model the findings were evaluated against",
    )
    results: dict[str, CompatibilityResult] = Field(
        default_factory=dict,
        description="Verdict per dependency purl",
    )
    conflicts: list[LicenseConflict] = Field(
        default_factory=list,
        description="Cross-license conflicts across the dependency set",
    )

    model_config = {"extra": "forbid"}

    def count(self, verdict: CompatibilityVerdict) -> int:
        """Count results with the given verdict."""
        return sum(1 for result in self.results.values() if result.verdict == verdict)

    def with_verdict(self, verdict: CompatibilityVerdict) -> dict[str, CompatibilityResult]:
        """Results with the given verdict, sorted by purl."""
        return {
            purl: result
            for purl, result in sorted(self.results.items())
            if result.verdict == verdict
        }

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_issues(self) -> bool:
        """True if any verdict is not compatible or any conflict was found."""
        return bool(self.conflicts) or any(
            not result.compatible for result in self.results.values()
        )
