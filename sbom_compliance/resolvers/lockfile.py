"""Lockfile version resolution for versionless dependencies.

Closes version gaps left by SBOM ingestion: dependencies recorded without a
version are matched against the project's lockfile(s) on the repository's
default branch, and the pinned versions are written back to the graph in
one bulk update. This pass must run before hash enrichment, which only
considers dependencies that already have a version.
"""
import asyncio
import logging
from collections.abc import Sequence
from typing import Optional

from sbom_compliance.constants import (
    DEFAULT_BRANCH,
    DEFAULT_FETCH_TIMEOUT,
    DEFAULT_PROVIDER,
)
from sbom_compliance.exceptions import (
    ConfigurationError,
    LockfileParseError,
    NetworkError,
    RepositoryAccessDeniedError,
    RepositoryFileNotFoundError,
    UnsupportedProviderError,
)
from sbom_compliance.models.dependency import (
    Dependency,
    LockfileResult,
    Repository,
    VersionUpdate,
)
from sbom_compliance.purl import with_version
from sbom_compliance.resolvers.base import DependencyGraph, FileContentProvider
from sbom_compliance.resolvers.lockfile_parsers import (
    DEFAULT_LOCKFILE_FORMATS,
    LockfileFormat,
)
from sbom_compliance.resolvers.providers import (
    RepoCoordinates,
    detect_provider,
    parse_repo_url,
)

logger = logging.getLogger(__name__)


class _PassProgress:
    """Counts reached so far in one pass, so failures can report them."""

    __slots__ = ("resolved", "total_no_version", "lockfile_found", "notes")

    def __init__(self) -> None:
        self.resolved = 0
        self.total_no_version = 0
        self.lockfile_found = False
        self.notes: list[str] = []

    def note(self, message: str) -> None:
        self.notes.append(message)

    def result(self) -> LockfileResult:
        return LockfileResult(
            resolved=self.resolved,
            total_no_version=self.total_no_version,
            lockfile_found=self.lockfile_found,
            diagnostic="; ".join(self.notes) or None,
        )


class LockfileVersionResolver:
    """Resolves missing dependency versions from repository lockfiles.

    Upstream-data problems (no repository, no lockfile, access denied,
    an unsupported or unconfigured provider, timeouts, unparseable content)
    never escape: they are logged and reported through
    ``LockfileResult.diagnostic``. Only a missing credential is raised to
    the caller.

    The resolver holds no per-pass state, but its graph is a session of
    the caller's; use one resolver per concurrently resolved product.
    """

    def __init__(
        self,
        graph: DependencyGraph,
        files: FileContentProvider,
        formats: Sequence[LockfileFormat] = DEFAULT_LOCKFILE_FORMATS,
        fetch_timeout: Optional[float] = DEFAULT_FETCH_TIMEOUT,
        default_branch: str = DEFAULT_BRANCH,
    ) -> None:
        """Initialize the resolver.

        Args:
            graph: Dependency graph to read and update.
            files: Provider used to fetch lockfile content.
            formats: Lockfile formats to try, each with its native ecosystems.
            fetch_timeout: Seconds to wait for each fetch (None waits forever).
                A timed-out fetch is treated like a missing lockfile.
            default_branch: Branch used when the repository records none.
        """
        self._graph = graph
        self._files = files
        self._formats = tuple(formats)
        self._fetch_timeout = fetch_timeout
        self._default_branch = default_branch

    async def resolve_versions(self, product_id: str, token: str) -> LockfileResult:
        """Fill in versions for a product's versionless dependencies.

        Args:
            product_id: Product whose dependencies are resolved.
            token: Credential for the repository provider.

        Returns:
            LockfileResult with the number of dependencies resolved, the
            number eligible, whether a lockfile was found and a diagnostic.

        Raises:
            ConfigurationError: If the token is missing.
        """
        if not token or not token.strip():
            raise ConfigurationError(
                "A repository access token is required to resolve lockfile versions"
            )

        progress = _PassProgress()
        try:
            await self._resolve(product_id, token, progress)
        except Exception as e:  # noqa: BLE001
            logger.warning(
                "Lockfile resolution for product %s failed: %s", product_id, e
            )
            progress.note(f"Lockfile resolution failed: {e}")
        return progress.result()

    async def _resolve(
        self, product_id: str, token: str, progress: _PassProgress
    ) -> None:
        repository = await self._graph.get_repository(product_id)
        if repository is None:
            logger.info("No repository linked to product %s", product_id)
            progress.note("No repository linked to product")
            return

        provider = self._provider_for(repository)
        coordinates = parse_repo_url(repository.url, provider)
        if coordinates is None:
            logger.info("Could not parse repository URL %s", repository.url)
            progress.note(f"Could not parse repository URL '{repository.url}'")
            return
        branch = repository.default_branch or self._default_branch

        versionless = await self._graph.find_versionless_dependencies(product_id)
        if not versionless:
            logger.info("No versionless dependencies for product %s", product_id)
            return

        batches = self._candidates_by_format(versionless)
        progress.total_no_version = sum(len(deps) for _, deps in batches)
        if progress.total_no_version == 0:
            logger.info(
                "None of %d versionless dependencies is in a lockfile ecosystem",
                len(versionless),
            )
            progress.note("No versionless dependencies in a supported ecosystem")
            return

        updates: list[VersionUpdate] = []
        for lockfile_format, candidates in batches:
            content = await self._fetch_lockfile(
                provider, coordinates, branch, lockfile_format.path, token, progress
            )
            if content is None:
                continue
            progress.lockfile_found = True

            try:
                versions = lockfile_format.parse(content)
            except LockfileParseError as e:
                logger.warning("Could not parse %s: %s", lockfile_format.path, e)
                progress.note(str(e))
                continue
            logger.info(
                "Parsed %s: %d packages", lockfile_format.path, len(versions)
            )

            updates.extend(self._match(lockfile_format, candidates, versions))

        if not updates:
            logger.info("No matching versions found in lockfiles")
            return

        applied = await self._graph.apply_version_updates(updates)
        progress.resolved = min(applied, progress.total_no_version)
        logger.info(
            "Resolved %d/%d version gaps from lockfiles",
            progress.resolved,
            progress.total_no_version,
        )

    def _provider_for(self, repository: Repository) -> str:
        return repository.provider or detect_provider(repository.url) or DEFAULT_PROVIDER

    def _candidates_by_format(
        self, dependencies: Sequence[Dependency]
    ) -> list[tuple[LockfileFormat, list[Dependency]]]:
        """Group versionless dependencies under the lockfile native to them."""
        batches: list[tuple[LockfileFormat, list[Dependency]]] = []
        claimed: set[int] = set()
        for lockfile_format in self._formats:
            candidates = []
            for index, dependency in enumerate(dependencies):
                if index in claimed or not dependency.needs_version:
                    continue
                if dependency.ecosystem.lower() in lockfile_format.ecosystems:
                    claimed.add(index)
                    candidates.append(dependency)
            if candidates:
                batches.append((lockfile_format, candidates))
        return batches

    async def _fetch_lockfile(
        self,
        provider: str,
        coordinates: RepoCoordinates,
        branch: str,
        path: str,
        token: str,
        progress: _PassProgress,
    ) -> Optional[str]:
        """Fetch one lockfile; every failure yields None."""
        repo_name = f"{coordinates.owner}/{coordinates.repo}"
        try:
            content = await asyncio.wait_for(
                self._files.get_file_content(
                    provider,
                    coordinates.owner,
                    coordinates.repo,
                    branch,
                    path,
                    token=token,
                ),
                timeout=self._fetch_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning("Timed out fetching %s from %s", path, repo_name)
            progress.note(f"Timed out fetching {path}")
            return None
        except RepositoryFileNotFoundError:
            logger.info("No %s in %s", path, repo_name)
            progress.note(f"No {path} found")
            return None
        except RepositoryAccessDeniedError:
            logger.info("Access denied to %s in %s", path, repo_name)
            progress.note(f"Access denied to {path}")
            return None
        except UnsupportedProviderError as e:
            logger.warning("Cannot fetch %s from %s: %s", path, repo_name, e)
            progress.note(str(e))
            return None
        except NetworkError as e:
            logger.warning("Failed to fetch %s: %s", path, e)
            progress.note(f"Failed to fetch {path}: {e}")
            return None

        if not content:
            logger.info("No %s in %s", path, repo_name)
            progress.note(f"No {path} found")
            return None
        return content

    @staticmethod
    def _match(
        lockfile_format: LockfileFormat,
        candidates: Sequence[Dependency],
        versions: dict[str, str],
    ) -> list[VersionUpdate]:
        """Build updates for candidates whose name the lockfile pins."""
        normalized = {
            lockfile_format.normalize_name(name): version
            for name, version in versions.items()
        }
        updates: list[VersionUpdate] = []
        for dependency in candidates:
            version = normalized.get(lockfile_format.normalize_name(dependency.name))
            if not version:
                continue
            updates.append(
                VersionUpdate(
                    purl=dependency.purl,
                    version=version,
                    new_purl=with_version(dependency.purl, version),
                )
            )
        return updates
