"""Pydantic data models for sbom-compliance."""

from sbom_compliance.models.compatibility import (
    DISTRIBUTION_MODEL_LABELS,
    VALID_DISTRIBUTION_MODELS,
    CompatibilityResult,
    CompatibilityVerdict,
    DependencyDepth,
    DistributionModel,
    LicenseCategory,
    LicenseFinding,
)
from sbom_compliance.models.config import EngineConfig
from sbom_compliance.models.conflict import LicenseConflict
from sbom_compliance.models.dependency import (
    Dependency,
    LockfileResult,
    Repository,
    VersionUpdate,
)
from sbom_compliance.models.report import ComplianceReport, Verbosity

__all__ = [
    "DISTRIBUTION_MODEL_LABELS",
    "VALID_DISTRIBUTION_MODELS",
    "CompatibilityResult",
    "CompatibilityVerdict",
    "ComplianceReport",
    "Dependency",
    "DependencyDepth",
    "DistributionModel",
    "EngineConfig",
    "LicenseCategory",
    "LicenseConflict",
    "LicenseFinding",
    "LockfileResult",
    "Repository",
    "Verbosity",
    "VersionUpdate",
]
