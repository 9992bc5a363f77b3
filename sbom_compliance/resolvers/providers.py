"""Repository hosting providers and the HTTP file-content provider.

The provider registry is data: adding a hosting provider means adding one
ProviderConfig entry and, if its raw-file endpoint differs, one URL builder.
"""
import logging
from typing import NamedTuple, Optional
from urllib.parse import ParseResult, quote, urlparse

import httpx
from pydantic import BaseModel, Field

from sbom_compliance.constants import DEFAULT_FETCH_TIMEOUT
from sbom_compliance.exceptions import (
    NetworkError,
    RepositoryAccessDeniedError,
    RepositoryFileNotFoundError,
    UnsupportedProviderError,
)
from sbom_compliance.resolvers.base import FileContentProvider

logger = logging.getLogger(__name__)


class ProviderConfig(BaseModel):
    """Static description of a repository hosting provider."""

    id: str = Field(description="Provider id stored on Repository nodes")
    label: str = Field(description="Human-readable provider name")
    host: Optional[str] = Field(
        default=None,
        description="Public hostname; None for self-hosted providers",
    )
    api_base: Optional[str] = Field(
        default=None,
        description="API base URL; None when derived from the instance URL",
    )
    self_hosted: bool = Field(default=False, description="Needs an instance URL")
    auth_header: str = Field(default="Authorization", description="Auth header name")
    auth_prefix: str = Field(default="token ", description="Prefix before the token")

    model_config = {"extra": "forbid", "frozen": True}

    def auth_headers(self, token: str) -> dict[str, str]:
        """Build the authentication headers for a token."""
        return {self.auth_header: f"{self.auth_prefix}{token}"}


PROVIDER_REGISTRY: tuple[ProviderConfig, ...] = (
    ProviderConfig(
        id="github",
        label="GitHub",
        host="github.com",
        api_base="https://api.github.com",
        auth_prefix="Bearer ",
    ),
    ProviderConfig(
        id="codeberg",
        label="Codeberg",
        host="codeberg.org",
        api_base="https://codeberg.org/api/v1",
    ),
    ProviderConfig(id="gitea", label="Gitea (self-hosted)", self_hosted=True),
    ProviderConfig(id="forgejo", label="Forgejo (self-hosted)", self_hosted=True),
    ProviderConfig(
        id="gitlab",
        label="GitLab (self-hosted)",
        self_hosted=True,
        auth_header="PRIVATE-TOKEN",
        auth_prefix="",
    ),
)


class RepoCoordinates(NamedTuple):
    """Owner and name of a repository parsed from its URL."""

    owner: str
    repo: str


def get_provider_config(provider_id: str) -> Optional[ProviderConfig]:
    """Look up a provider by id."""
    for config in PROVIDER_REGISTRY:
        if config.id == provider_id:
            return config
    return None


def _parse_url(url: str) -> ParseResult:
    return urlparse(url if "://" in url else f"https://{url}")


def detect_provider(repo_url: Optional[str]) -> Optional[str]:
    """Detect a public provider from a repository URL hostname.

    Args:
        repo_url: Repository URL, with or without scheme.

    Returns:
        Provider id, or None if the host is not a known public provider.
    """
    if not repo_url:
        return None
    hostname = (_parse_url(repo_url).hostname or "").lower()
    for config in PROVIDER_REGISTRY:
        if config.host and hostname == config.host:
            return config.id
    return None


def parse_repo_url(
    repo_url: Optional[str], provider: Optional[str] = None
) -> Optional[RepoCoordinates]:
    """Extract owner and repository name from a repository URL.

    Handles trailing slashes and a ``.git`` suffix. Any path segments after
    owner and name (``/tree/main`` etc.) are ignored, except on GitLab, where
    projects live in nested groups: there every segment before the last one
    (up to a ``/-/`` route separator) is the owning namespace.

    Args:
        repo_url: Repository URL (e.g., https://github.com/owner/repo.git).
        provider: Provider id the URL belongs to, if known.

    Returns:
        RepoCoordinates, or None if the URL has no owner/name path.
    """
    if not repo_url:
        return None
    cleaned = repo_url.strip().rstrip("/")
    if cleaned.endswith(".git"):
        cleaned = cleaned[:-4]
    parsed = _parse_url(cleaned)
    if not parsed.hostname:
        return None
    parts = [part for part in parsed.path.split("/") if part]
    if provider == "gitlab" and "-" in parts:
        parts = parts[: parts.index("-")]
    if len(parts) < 2:
        return None
    if provider == "gitlab":
        return RepoCoordinates(owner="/".join(parts[:-1]), repo=parts[-1])
    return RepoCoordinates(owner=parts[0], repo=parts[1])


class HttpFileContentProvider(FileContentProvider):
    """Fetches raw repository files over the providers' HTTP APIs."""

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        instance_urls: Optional[dict[str, str]] = None,
        timeout: float = DEFAULT_FETCH_TIMEOUT,
    ) -> None:
        """Initialize the provider.

        Args:
            client: Optional shared httpx.AsyncClient for connection reuse.
            instance_urls: Base URLs of self-hosted providers by provider id.
            timeout: Per-request timeout in seconds.
        """
        self._client = client
        self._instance_urls = {
            key: value.rstrip("/") for key, value in (instance_urls or {}).items()
        }
        self._timeout = timeout

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
        """Fetch raw file content from the provider's API.

        Raises:
            UnsupportedProviderError: If the provider is unknown, or
                self-hosted without a configured instance URL.
            RepositoryFileNotFoundError: On HTTP 404.
            RepositoryAccessDeniedError: On HTTP 401 or 403.
            NetworkError: On any other failure.
        """
        config = get_provider_config(provider)
        if config is None:
            raise UnsupportedProviderError(
                f"Unsupported repository provider '{provider}'"
            )

        url, params = self._build_request(config, owner, repo, branch, path)
        headers = config.auth_headers(token)
        if config.id == "github":
            headers["Accept"] = "application/vnd.github.raw+json"
        else:
            headers["Accept"] = "text/plain"

        async def do_fetch(client: httpx.AsyncClient) -> Optional[str]:
            try:
                response = await client.get(
                    url,
                    params=params,
                    headers=headers,
                    timeout=httpx.Timeout(self._timeout),
                )
            except httpx.RequestError as e:
                raise NetworkError(f"Failed to fetch {path} from {owner}/{repo}: {e}") from e

            if response.status_code == 404:
                raise RepositoryFileNotFoundError(
                    f"{path} not found in {owner}/{repo}@{branch}"
                )
            if response.status_code in (401, 403):
                raise RepositoryAccessDeniedError(
                    f"Access denied to {path} in {owner}/{repo} ({response.status_code})"
                )
            if not response.is_success:
                raise NetworkError(
                    f"{config.label} returned {response.status_code} for {path} "
                    f"in {owner}/{repo}"
                )
            return response.text or None

        logger.debug("Fetching %s from %s %s/%s@%s", path, provider, owner, repo, branch)

        if self._client:
            return await do_fetch(self._client)

        async with httpx.AsyncClient() as new_client:
            return await do_fetch(new_client)

    def _build_request(
        self,
        config: ProviderConfig,
        owner: str,
        repo: str,
        branch: str,
        path: str,
    ) -> tuple[str, dict[str, str]]:
        """Build the raw-file URL and query parameters for a provider."""
        if config.id == "github":
            return (
                f"{config.api_base}/repos/{owner}/{repo}/contents/{quote(path)}",
                {"ref": branch},
            )
        if config.id == "codeberg":
            return (
                f"{config.api_base}/repos/{owner}/{repo}/raw/"
                f"{quote(branch, safe='')}/{quote(path)}",
                {},
            )

        instance_url = self._instance_urls.get(config.id)
        if not instance_url:
            raise UnsupportedProviderError(
                f"No instance URL configured for self-hosted provider '{config.id}'"
            )
        if config.id == "gitlab":
            project = quote(f"{owner}/{repo}", safe="")
            return (
                f"{instance_url}/api/v4/projects/{project}/repository/files/"
                f"{quote(path, safe='')}/raw",
                {"ref": branch},
            )
        # Gitea and Forgejo share the Gitea API
        return (
            f"{instance_url}/api/v1/repos/{owner}/{repo}/raw/{quote(path, safe='')}",
            {"ref": branch},
        )
