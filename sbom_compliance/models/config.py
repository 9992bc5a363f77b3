"""Configuration Pydantic models for sbom-compliance."""
from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List

from pydantic import BaseModel, Field

from sbom_compliance.constants import DEFAULT_BRANCH, DEFAULT_FETCH_TIMEOUT
from sbom_compliance.models.conflict import LicenseConflict

if TYPE_CHECKING:
    from sbom_compliance.analysis.compatibility import CompatibilityEngine
    from sbom_compliance.analysis.conflicts import ConflictDetector


def _default_network_copyleft() -> List[str]:
    from sbom_compliance.analysis.compatibility import DEFAULT_NETWORK_COPYLEFT

    return sorted(DEFAULT_NETWORK_COPYLEFT)


def _default_conflicts() -> List[LicenseConflict]:
    from sbom_compliance.analysis.conflicts import DEFAULT_LICENSE_CONFLICTS

    return list(DEFAULT_LICENSE_CONFLICTS)


class EngineConfig(BaseModel):
    """Configuration for sbom-compliance.

    Every field has a default, so an empty or missing file yields the
    built-in network-copyleft set and conflict table.
    """

    model_config = {"extra": "forbid"}

    network_copyleft_licenses: List[str] = Field(
        default_factory=_default_network_copyleft,
        description="SPDX identifiers whose copyleft is triggered by network use.",
    )
    license_conflicts: List[LicenseConflict] = Field(
        default_factory=_default_conflicts,
        description="Curated pairs of licenses that cannot be combined.",
    )
    fetch_timeout: float = Field(
        default=DEFAULT_FETCH_TIMEOUT,
        gt=0,
        description="Seconds to wait for a lockfile fetch before giving up.",
    )
    default_branch: str = Field(
        default=DEFAULT_BRANCH,
        min_length=1,
        description="Branch used when a repository records none.",
    )
    instance_urls: Dict[str, str] = Field(
        default_factory=dict,
        description="Base URLs of self-hosted providers, keyed by provider id.",
    )

    def build_engine(self) -> CompatibilityEngine:
        """Create a rule engine using the configured network-copyleft set."""
        from sbom_compliance.analysis.compatibility import CompatibilityEngine

        return CompatibilityEngine(network_copyleft=self.network_copyleft_licenses)

    def build_detector(self) -> ConflictDetector:
        """Create a conflict detector using the configured conflict table."""
        from sbom_compliance.analysis.conflicts import ConflictDetector

        return ConflictDetector(conflicts=self.license_conflicts)
