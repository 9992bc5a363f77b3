"""Compatibility rule-engine models for sbom-compliance.

Defines the distribution-model and license-category taxonomies the rule
engine branches over, and the immutable verdict it produces for each
(dependency, distribution model) pair.
"""

from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, Field, computed_field, field_validator


class DistributionModel(Enum):
    """How a product reaches its users; decides which obligations trigger."""

    PROPRIETARY_BINARY = "proprietary_binary"
    SAAS_HOSTED = "saas_hosted"
    SOURCE_AVAILABLE = "source_available"
    LIBRARY_COMPONENT = "library_component"
    INTERNAL_ONLY = "internal_only"

    @property
    def label(self) -> str:
        """Human-readable label used in reasons and reports."""
        return DISTRIBUTION_MODEL_LABELS[self]


DISTRIBUTION_MODEL_LABELS: dict[DistributionModel, str] = {
    DistributionModel.PROPRIETARY_BINARY: "Proprietary Binary",
    DistributionModel.SAAS_HOSTED: "SaaS / Cloud Hosted",
    DistributionModel.SOURCE_AVAILABLE: "Source Available",
    DistributionModel.LIBRARY_COMPONENT: "Library / Component",
    DistributionModel.INTERNAL_ONLY: "Internal Only",
}

VALID_DISTRIBUTION_MODELS: list[DistributionModel] = list(DistributionModel)


class LicenseCategory(Enum):
    """License category supplied by the upstream classifier."""

    PERMISSIVE = "permissive"
    COPYLEFT_STRONG = "copyleft_strong"
    COPYLEFT_WEAK = "copyleft_weak"
    UNKNOWN = "unknown"
    NO_ASSERTION = "no_assertion"


class DependencyDepth(Enum):
    """Position of a dependency in the product's dependency tree."""

    DIRECT = "direct"
    TRANSITIVE = "transitive"

    @classmethod
    def coerce(cls, value: Union["DependencyDepth", str, None]) -> "DependencyDepth":
        """Coerce any depth value; only exactly ``"direct"`` is direct.

        Args:
            value: A DependencyDepth, a raw string, or None.

        Returns:
            DIRECT for the direct member or the string "direct", else TRANSITIVE.
        """
        if value is cls.DIRECT or value == cls.DIRECT.value:
            return cls.DIRECT
        return cls.TRANSITIVE


class CompatibilityVerdict(Enum):
    """Outcome of a compatibility evaluation."""

    COMPATIBLE = "compatible"
    INCOMPATIBLE = "incompatible"
    REVIEW_NEEDED = "review_needed"


class CompatibilityResult(BaseModel):
    """Verdict for one dependency license under one distribution model.

    The reason is the audit trail for the verdict and always names the
    offending SPDX expression or the distribution model label.
    """

    verdict: CompatibilityVerdict = Field(description="Compatibility verdict")
    reason: str = Field(min_length=1, description="Explanation of the verdict")
    rule: str = Field(min_length=1, description="Identifier of the rule that fired")

    model_config = {"extra": "forbid", "frozen": True}

    @computed_field  # type: ignore[prop-decorator]
    @property
    def compatible(self) -> bool:
        """True if the verdict is compatible."""
        return self.verdict == CompatibilityVerdict.COMPATIBLE


class LicenseFinding(BaseModel):
    """One (dependency, declared license) observation to evaluate."""

    dependency_purl: str = Field(description="Package URL of the dependency")
    license_declared: str = Field(
        default="",
        description="Declared SPDX license expression (may be empty)",
    )
    license_category: LicenseCategory = Field(
        description="Category assigned by the upstream classifier",
    )
    dependency_depth: DependencyDepth = Field(
        default=DependencyDepth.TRANSITIVE,
        description="direct or transitive; anything else counts as transitive",
    )

    model_config = {"extra": "forbid"}

    @field_validator("dependency_depth", mode="before")
    @classmethod
    def _coerce_depth(cls, value: Any) -> DependencyDepth:
        return DependencyDepth.coerce(value)

    @field_validator("license_declared", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value
