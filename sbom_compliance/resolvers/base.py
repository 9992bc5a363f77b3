"""Interfaces the lockfile pass consumes."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Optional

from sbom_compliance.models.dependency import Dependency, Repository, VersionUpdate


class DependencyGraph(ABC):
    """Narrow view of the dependency graph store.

    Implementations own their session or connection; one instance must not
    be shared between concurrent resolution passes of different products.
    """

    @abstractmethod
    async def get_repository(self, product_id: str) -> Optional[Repository]:
        """Return the repository linked to a product, or None."""

    @abstractmethod
    async def find_versionless_dependencies(self, product_id: str) -> list[Dependency]:
        """Return the product's dependencies whose version is null or empty."""

    @abstractmethod
    async def apply_version_updates(self, updates: Sequence[VersionUpdate]) -> int:
        """Apply version updates as a single transactional write.

        Each update sets version and purl on the node matching its current
        purl, records the version source as lockfile and clears any hash
        gap reason.

        Args:
            updates: Updates to apply.

        Returns:
            Number of nodes updated.
        """


class FileContentProvider(ABC):
    """Reads a single file from a hosted source repository."""

    @abstractmethod
    async def get_file_content(
        self,
        provider: str,
        owner: str,
        repo: str,
        branch: str,
        path: str,
        *,
        token: str,
    ) -> Optional[str]:
        """Fetch raw file content.

        Args:
            provider: Provider id (github, codeberg, gitea, forgejo, gitlab).
            owner: Repository owner or namespace.
            repo: Repository name.
            branch: Branch to read from.
            path: File path within the repository.
            token: Credential for the provider.

        Returns:
            File content, or None if the provider has no content for it.

        Raises:
            RepositoryFileNotFoundError: If the file does not exist.
            RepositoryAccessDeniedError: If the token may not read the file.
            NetworkError: If the request fails for any other reason.
        """


class HashEnricher(ABC):
    """Fetches package hashes for dependencies that already have a version."""

    @abstractmethod
    async def enrich_hashes(self, product_id: str, token: str) -> int:
        """Enrich hashes for a product and return how many were recorded."""
