"""Tests for the GitHub REST client."""

import logging
from datetime import UTC, datetime

import httpx
import pytest

from ttrak.providers import (
    ProviderAuthError,
    ProviderError,
    ProviderForbiddenError,
    ProviderNotFoundError,
    ProviderRateLimitError,
    ProviderTransportError,
)
from ttrak.providers.github import GitHubClient
from ttrak.providers.github.client import MAX_PAGES


def client_for(handler) -> GitHubClient:
    return GitHubClient("test-token", transport=httpx.MockTransport(handler))


class TestGitHubClientInit:
    """Tests for GitHubClient initialization."""

    def test_default_base_url(self):
        client = GitHubClient("test-token")
        assert client.token == "test-token"
        assert client.base_url == "https://api.github.com"

    def test_custom_base_url_trailing_slash(self):
        """Enterprise base URLs are accepted with or without a trailing slash."""
        client = GitHubClient("t", base_url="https://github.example.com/api/v3/")
        assert client.base_url == "https://github.example.com/api/v3"

    @pytest.mark.asyncio
    async def test_request_headers(self):
        seen: dict[str, str] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen.update(request.headers)
            return httpx.Response(200, json={"login": "octocat"})

        async with client_for(handler) as client:
            assert await client.get_authenticated_user() == "octocat"

        assert seen["authorization"] == "Bearer test-token"
        assert seen["accept"] == "application/vnd.github+json"
        assert seen["x-github-api-version"] == "2022-11-28"
        assert seen["user-agent"] == "ttrak"


class TestGitHubClientRequests:
    """Tests for the issue endpoints."""

    @pytest.mark.asyncio
    async def test_list_repo_issues_params(self):
        seen: list[httpx.URL] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url)
            return httpx.Response(200, json=[{"number": 1}])

        since = datetime(2025, 1, 1, 8, 30, tzinfo=UTC)
        async with client_for(handler) as client:
            issues = await client.list_repo_issues("acme", "app", since)

        assert issues == [{"number": 1}]
        assert seen[0].path == "/repos/acme/app/issues"
        assert seen[0].params["state"] == "all"
        assert seen[0].params["per_page"] == "100"
        assert seen[0].params["since"] == "2025-01-01T08:30:00Z"

    @pytest.mark.asyncio
    async def test_pagination_follows_link_header(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.params.get("page") == "2":
                return httpx.Response(200, json=[{"number": 2}])
            next_url = "https://api.github.com/repos/acme/app/issues?state=all&page=2"
            return httpx.Response(
                200, json=[{"number": 1}], headers={"link": f'<{next_url}>; rel="next"'}
            )

        async with client_for(handler) as client:
            issues = await client.list_repo_issues("acme", "app")

        assert [i["number"] for i in issues] == [1, 2]

    @pytest.mark.asyncio
    async def test_search_issues(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/search/issues"
            assert request.url.params["q"] == "is:pr author:octocat repo:acme/app"
            return httpx.Response(200, json={"total_count": 1, "items": [{"number": 9}]})

        async with client_for(handler) as client:
            items = await client.search_issues("is:pr author:octocat repo:acme/app")

        assert items == [{"number": 9}]

    @pytest.mark.asyncio
    async def test_search_follows_pages(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.params.get("page") == "2":
                return httpx.Response(200, json={"items": [{"number": 2}]})
            next_url = "https://api.github.com/search/issues?q=is%3Apr&page=2"
            return httpx.Response(
                200,
                json={"items": [{"number": 1}]},
                headers={"link": f'<{next_url}>; rel="next"'},
            )

        async with client_for(handler) as client:
            items = await client.search_issues("is:pr")

        assert [i["number"] for i in items] == [1, 2]

    @pytest.mark.asyncio
    async def test_search_since_qualifier(self):
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url.params["q"])
            return httpx.Response(200, json={"items": []})

        since = datetime(2025, 1, 1, tzinfo=UTC)
        async with client_for(handler) as client:
            await client.search_issues("is:pr author:octocat", since)

        assert seen == ["is:pr author:octocat updated:>=2025-01-01T00:00:00Z"]

    @pytest.mark.asyncio
    async def test_page_cap_logged(self, caplog: pytest.LogCaptureFixture):
        def handler(request: httpx.Request) -> httpx.Response:
            page = int(request.url.params.get("page", "1"))
            next_url = f"https://api.github.com/repos/acme/app/issues?page={page + 1}"
            return httpx.Response(
                200, json=[{"number": page}], headers={"link": f'<{next_url}>; rel="next"'}
            )

        with caplog.at_level(logging.WARNING, logger="ttrak.providers.github.client"):
            async with client_for(handler) as client:
                issues = await client.list_repo_issues("acme", "app")

        assert len(issues) == MAX_PAGES
        assert "later pages dropped" in caplog.text

    @pytest.mark.asyncio
    async def test_records_rate_limit(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                json={"login": "octocat"},
                headers={"x-ratelimit-remaining": "4999", "x-ratelimit-reset": "1735689600"},
            )

        async with client_for(handler) as client:
            await client.get_authenticated_user()

        assert client.rate_limit is not None
        assert client.rate_limit.remaining == 4999
        assert client.rate_limit.reset_at == datetime(2025, 1, 1, tzinfo=UTC)


class TestGitHubClientErrors:
    """Tests for mapping HTTP failures to provider errors."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("status", "error_type"),
        [
            (401, ProviderAuthError),
            (403, ProviderForbiddenError),
            (404, ProviderNotFoundError),
            (500, ProviderError),
        ],
    )
    async def test_status_mapping(self, status: int, error_type: type[ProviderError]):
        async with client_for(lambda request: httpx.Response(status, json={})) as client:
            with pytest.raises(error_type):
                await client.get_authenticated_user()

    @pytest.mark.asyncio
    async def test_rate_limit_with_reset_hint(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                403,
                json={"message": "API rate limit exceeded"},
                headers={"x-ratelimit-remaining": "0", "x-ratelimit-reset": "1735689600"},
            )

        async with client_for(handler) as client:
            with pytest.raises(ProviderRateLimitError) as exc_info:
                await client.get_authenticated_user()

        assert exc_info.value.reset_at == datetime(2025, 1, 1, tzinfo=UTC)
        assert "2025-01-01T00:00:00Z" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_429_is_rate_limit(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(429, headers={"retry-after": "60"})

        async with client_for(handler) as client:
            with pytest.raises(ProviderRateLimitError) as exc_info:
                await client.get_authenticated_user()

        assert exc_info.value.reset_at is not None

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        async with client_for(handler) as client:
            with pytest.raises(ProviderTransportError):
                await client.get_authenticated_user()
