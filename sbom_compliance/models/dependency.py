"""Dependency graph models for sbom-compliance.

Provides the graph nodes the lockfile pass reads and patches, the bulk
update triple it writes, and the partial-success result it returns.
"""

from typing import Optional

from pydantic import BaseModel, Field, model_validator


class Dependency(BaseModel):
    """A dependency node in a product's graph.

    Nodes are created by SBOM ingestion, possibly without a version. Only
    the lockfile pass (and later hash enrichment) mutates them.
    """

    name: str = Field(description="Package name as known to its ecosystem")
    purl: str = Field(description="Canonical package URL")
    ecosystem: str = Field(description="Ecosystem identifier (e.g. npm, pypi)")
    version: Optional[str] = Field(default=None, description="Resolved version")
    version_source: Optional[str] = Field(
        default=None,
        description="Where the version came from (e.g. sbom, lockfile)",
    )
    hash_gap_reason: Optional[str] = Field(
        default=None,
        description="Why no package hash could be recorded",
    )

    model_config = {"extra": "forbid"}

    @property
    def needs_version(self) -> bool:
        """True if the version is absent or empty."""
        return not self.version


class Repository(BaseModel):
    """Source repository linked to a product."""

    url: str = Field(description="Repository web URL")
    default_branch: Optional[str] = Field(
        default=None,
        description="Default branch; 'main' is assumed when missing",
    )
    provider: Optional[str] = Field(
        default=None,
        description="Hosting provider id (github, codeberg, gitea, forgejo, gitlab)",
    )

    model_config = {"extra": "forbid"}


class VersionUpdate(BaseModel):
    """One entry of a bulk version update, matched on the current purl."""

    purl: str = Field(description="Purl of the node to update")
    version: str = Field(min_length=1, description="Version to set")
    new_purl: str = Field(description="Purl after pinning the version")

    model_config = {"extra": "forbid", "frozen": True}


class LockfileResult(BaseModel):
    """Outcome of one lockfile resolution pass.

    Always returned, never raised: a failure part-way through yields the
    counts reached so far plus a diagnostic.
    """

    resolved: int = Field(default=0, ge=0, description="Dependencies updated")
    total_no_version: int = Field(
        default=0,
        ge=0,
        description="Versionless dependencies eligible for lockfile resolution",
    )
    lockfile_found: bool = Field(
        default=False,
        description="True if any lockfile was retrieved",
    )
    diagnostic: Optional[str] = Field(
        default=None,
        description="Why the pass stopped early or resolved nothing",
    )

    model_config = {"extra": "forbid", "frozen": True}

    @model_validator(mode="after")
    def _resolved_within_total(self) -> "LockfileResult":
        if self.resolved > self.total_no_version:
            raise ValueError(
                f"resolved ({self.resolved}) exceeds total_no_version "
                f"({self.total_no_version})"
            )
        return self
