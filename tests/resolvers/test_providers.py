"""Tests for repository providers and the HTTP file-content provider."""
import httpx
import pytest

from sbom_compliance.exceptions import (
    NetworkError,
    RepositoryAccessDeniedError,
    RepositoryFileNotFoundError,
    UnsupportedProviderError,
)
from sbom_compliance.resolvers.providers import (
    PROVIDER_REGISTRY,
    HttpFileContentProvider,
    RepoCoordinates,
    detect_provider,
    get_provider_config,
    parse_repo_url,
)


class TestProviderRegistry:
    """Tests for the provider registry."""

    def test_registered_ids(self) -> None:
        """Test that every supported provider is registered."""
        assert [p.id for p in PROVIDER_REGISTRY] == [
            "github",
            "codeberg",
            "gitea",
            "forgejo",
            "gitlab",
        ]

    def test_auth_headers(self) -> None:
        """Test provider-specific authentication headers."""
        assert get_provider_config("github").auth_headers("t") == {  # type: ignore[union-attr]
            "Authorization": "Bearer t"
        }
        assert get_provider_config("codeberg").auth_headers("t") == {  # type: ignore[union-attr]
            "Authorization": "token t"
        }
        assert get_provider_config("gitlab").auth_headers("t") == {  # type: ignore[union-attr]
            "PRIVATE-TOKEN": "t"
        }

    def test_unknown_provider(self) -> None:
        """Test looking up an unregistered provider."""
        assert get_provider_config("bitbucket") is None


class TestDetectProvider:
    """Tests for detect_provider."""

    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("https://github.com/acme/shop", "github"),
            ("https://GitHub.com/acme/shop", "github"),
            ("github.com/acme/shop", "github"),
            ("https://codeberg.org/acme/shop", "codeberg"),
            ("https://git.example.com/acme/shop", None),
            ("", None),
            (None, None),
        ],
    )
    def test_detect(self, url: str | None, expected: str | None) -> None:
        """Test detecting public providers from the hostname."""
        assert detect_provider(url) == expected


class TestParseRepoUrl:
    """Tests for parse_repo_url."""

    @pytest.mark.parametrize(
        "url",
        [
            "https://github.com/acme/shop",
            "https://github.com/acme/shop/",
            "https://github.com/acme/shop.git",
            "https://github.com/acme/shop/tree/main/src",
            "github.com/acme/shop",
        ],
    )
    def test_parses_owner_and_repo(self, url: str) -> None:
        """Test URL variants that all point at acme/shop."""
        assert parse_repo_url(url) == RepoCoordinates(owner="acme", repo="shop")

    @pytest.mark.parametrize(
        "url",
        ["", None, "https://github.com/", "https://github.com/acme"],
    )
    def test_rejects_incomplete(self, url: str | None) -> None:
        """Test URLs without owner and repository."""
        assert parse_repo_url(url) is None

    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            (
                "https://gitlab.example.com/group/subgroup/shop",
                RepoCoordinates(owner="group/subgroup", repo="shop"),
            ),
            (
                "https://gitlab.example.com/a/b/c/shop.git",
                RepoCoordinates(owner="a/b/c", repo="shop"),
            ),
            (
                "https://gitlab.example.com/group/subgroup/shop/-/tree/main",
                RepoCoordinates(owner="group/subgroup", repo="shop"),
            ),
            (
                "https://gitlab.example.com/acme/shop",
                RepoCoordinates(owner="acme", repo="shop"),
            ),
        ],
    )
    def test_gitlab_nested_groups(self, url: str, expected: RepoCoordinates) -> None:
        """Test that GitLab namespaces keep every group segment."""
        assert parse_repo_url(url, "gitlab") == expected

    def test_gitlab_needs_a_namespace(self) -> None:
        """Test a GitLab URL with only a route separator after one segment."""
        assert parse_repo_url("https://gitlab.example.com/shop/-/tree/main", "gitlab") is None

    def test_nested_path_ignored_for_other_providers(self) -> None:
        """Test that extra segments stay ignored outside GitLab."""
        assert parse_repo_url(
            "https://git.example.com/group/subgroup/shop", "gitea"
        ) == RepoCoordinates(owner="group", repo="subgroup")


def _provider(
    handler: "httpx.MockTransport | None" = None,
    instance_urls: dict[str, str] | None = None,
) -> HttpFileContentProvider:
    client = httpx.AsyncClient(transport=handler) if handler else None
    return HttpFileContentProvider(client=client, instance_urls=instance_urls)


class TestHttpFileContentProvider:
    """Tests for HttpFileContentProvider."""

    @pytest.mark.asyncio
    async def test_github_request(self) -> None:
        """Test the GitHub contents API request."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, text="{}")

        provider = _provider(httpx.MockTransport(handler))
        content = await provider.get_file_content(
            "github", "acme", "shop", "main", "package-lock.json", token="t"
        )

        assert content == "{}"
        request = seen[0]
        assert request.url.path == "/repos/acme/shop/contents/package-lock.json"
        assert request.url.host == "api.github.com"
        assert request.url.params["ref"] == "main"
        assert request.headers["Authorization"] == "Bearer t"
        assert request.headers["Accept"] == "application/vnd.github.raw+json"

    @pytest.mark.asyncio
    async def test_codeberg_request(self) -> None:
        """Test the Codeberg raw-file request."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, text="{}")

        provider = _provider(httpx.MockTransport(handler))
        await provider.get_file_content(
            "codeberg", "acme", "shop", "develop", "package-lock.json", token="t"
        )

        assert seen[0].url.host == "codeberg.org"
        assert seen[0].url.path == "/api/v1/repos/acme/shop/raw/develop/package-lock.json"
        assert "ref" not in seen[0].url.params
        assert seen[0].headers["Authorization"] == "token t"

    @pytest.mark.asyncio
    async def test_gitlab_request(self) -> None:
        """Test the GitLab repository files request."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, text="{}")

        provider = _provider(
            httpx.MockTransport(handler),
            instance_urls={"gitlab": "https://gitlab.example.com/"},
        )
        await provider.get_file_content(
            "gitlab", "acme", "shop", "main", "package-lock.json", token="t"
        )

        request = seen[0]
        assert request.url.host == "gitlab.example.com"
        assert request.url.raw_path.startswith(
            b"/api/v4/projects/acme%2Fshop/repository/files/package-lock.json/raw"
        )
        assert request.url.params["ref"] == "main"
        assert request.headers["PRIVATE-TOKEN"] == "t"

    @pytest.mark.asyncio
    async def test_gitlab_nested_group_request(self) -> None:
        """Test that a subgroup namespace is encoded into the project id."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, text="{}")

        provider = _provider(
            httpx.MockTransport(handler),
            instance_urls={"gitlab": "https://gitlab.example.com"},
        )
        await provider.get_file_content(
            "gitlab", "group/subgroup", "shop", "main", "package-lock.json", token="t"
        )

        assert seen[0].url.raw_path.startswith(
            b"/api/v4/projects/group%2Fsubgroup%2Fshop/repository/files/"
        )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("provider_id", ["gitea", "forgejo"])
    async def test_gitea_family_request(self, provider_id: str) -> None:
        """Test the Gitea API request shared by Forgejo."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, text="{}")

        provider = _provider(
            httpx.MockTransport(handler),
            instance_urls={provider_id: "https://git.example.com"},
        )
        await provider.get_file_content(
            provider_id, "acme", "shop", "main", "Pipfile.lock", token="t"
        )

        assert seen[0].url.path == "/api/v1/repos/acme/shop/raw/Pipfile.lock"
        assert seen[0].url.params["ref"] == "main"

    @pytest.mark.asyncio
    async def test_self_hosted_without_instance_url(self) -> None:
        """Test that a self-hosted provider needs an instance URL."""
        with pytest.raises(UnsupportedProviderError, match="instance URL"):
            await _provider().get_file_content(
                "gitea", "acme", "shop", "main", "package-lock.json", token="t"
            )

    @pytest.mark.asyncio
    async def test_unknown_provider(self) -> None:
        """Test that an unknown provider cannot be queried."""
        with pytest.raises(UnsupportedProviderError, match="bitbucket"):
            await _provider().get_file_content(
                "bitbucket", "acme", "shop", "main", "package-lock.json", token="t"
            )

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("status", "error"),
        [
            (404, RepositoryFileNotFoundError),
            (401, RepositoryAccessDeniedError),
            (403, RepositoryAccessDeniedError),
            (500, NetworkError),
            (429, NetworkError),
        ],
    )
    async def test_status_mapping(self, status: int, error: type[Exception]) -> None:
        """Test mapping HTTP status codes to errors."""
        provider = _provider(httpx.MockTransport(lambda request: httpx.Response(status)))

        with pytest.raises(error):
            await provider.get_file_content(
                "github", "acme", "shop", "main", "package-lock.json", token="t"
            )

    @pytest.mark.asyncio
    async def test_transport_error(self) -> None:
        """Test that transport failures become NetworkError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        provider = _provider(httpx.MockTransport(handler))

        with pytest.raises(NetworkError, match="connection refused"):
            await provider.get_file_content(
                "github", "acme", "shop", "main", "package-lock.json", token="t"
            )

    @pytest.mark.asyncio
    async def test_empty_body(self) -> None:
        """Test that an empty body yields None."""
        provider = _provider(httpx.MockTransport(lambda request: httpx.Response(200)))

        content = await provider.get_file_content(
            "github", "acme", "shop", "main", "package-lock.json", token="t"
        )

        assert content is None
