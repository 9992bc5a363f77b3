"""Dependency enrichment pipeline.

Runs the lockfile version pass before hash enrichment: hash enrichment only
considers dependencies with a resolved version, so the order is fixed.
"""
import logging
from typing import Optional

from pydantic import BaseModel, Field

from sbom_compliance.models.dependency import LockfileResult
from sbom_compliance.resolvers.base import HashEnricher
from sbom_compliance.resolvers.lockfile import LockfileVersionResolver

logger = logging.getLogger(__name__)


class EnrichmentOutcome(BaseModel):
    """Results of one enrichment run for a product."""

    lockfile: LockfileResult = Field(description="Lockfile version pass result")
    hashes_enriched: Optional[int] = Field(
        default=None,
        description="Hashes recorded by hash enrichment (None if not run)",
    )

    model_config = {"extra": "forbid"}


class EnrichmentPipeline:
    """Sequences the enrichment passes for a product."""

    def __init__(
        self,
        resolver: LockfileVersionResolver,
        hash_enricher: Optional[HashEnricher] = None,
    ) -> None:
        self._resolver = resolver
        self._hash_enricher = hash_enricher

    async def run(self, product_id: str, token: str) -> EnrichmentOutcome:
        """Run lockfile resolution, then hash enrichment if configured.

        Args:
            product_id: Product to enrich.
            token: Credential for the repository provider.

        Returns:
            EnrichmentOutcome with the result of each pass.

        Raises:
            ConfigurationError: If the credential is missing.
        """
        lockfile = await self._resolver.resolve_versions(product_id, token)
        logger.info(
            "Lockfile pass for %s: %d/%d resolved",
            product_id,
            lockfile.resolved,
            lockfile.total_no_version,
        )

        hashes: Optional[int] = None
        if self._hash_enricher is not None:
            hashes = await self._hash_enricher.enrich_hashes(product_id, token)

        return EnrichmentOutcome(lockfile=lockfile, hashes_enriched=hashes)
