"""Cross-license conflict models for sbom-compliance."""

from pydantic import BaseModel, Field


class LicenseConflict(BaseModel):
    """A pair of licenses that cannot be combined in one product.

    Used both for entries of the curated conflict table and for the
    conflicts reported against a product's dependency set.
    """

    license_a: str = Field(min_length=1, description="First SPDX identifier")
    license_b: str = Field(min_length=1, description="Second SPDX identifier")
    reason: str = Field(min_length=1, description="Why the licenses conflict")

    model_config = {"extra": "forbid", "frozen": True}

    @property
    def pair(self) -> frozenset[str]:
        """Unordered identifier pair, used to collapse mirrored entries."""
        return frozenset((self.license_a, self.license_b))
