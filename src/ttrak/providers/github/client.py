"""GitHub REST API client."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import httpx

from ...models import ProviderName
from ...utils import to_iso
from ..errors import (
    ProviderAuthError,
    ProviderError,
    ProviderForbiddenError,
    ProviderNotFoundError,
    ProviderRateLimitError,
    ProviderTransportError,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.github.com"
API_VERSION = "2022-11-28"
PER_PAGE = 100
MAX_PAGES = 10

_PROVIDER = ProviderName.GITHUB


@dataclass
class RateLimit:
    """Rate limit state reported by the last response."""

    remaining: int
    reset_at: datetime | None


class GitHubClient:
    """Async GitHub REST API client.

    Provides a thin wrapper around the issues endpoints with:
    - Bearer token authentication
    - Enterprise support via custom base_url
    - Error mapping to ProviderError kinds and rate limit tracking
    """

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the GitHub client.

        Args:
            token: GitHub personal access token
            base_url: API base URL (default: api.github.com, use custom for Enterprise)
            transport: Optional httpx transport (used by tests)
        """
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.rate_limit: RateLimit | None = None
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": API_VERSION,
                "User-Agent": "ttrak",
            },
            timeout=30.0,
            transport=transport,
        )

    async def aclose(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def get_authenticated_user(self) -> str:
        """Get the login of the token's owner."""
        response = await self._get("/user")
        return response.json()["login"]

    async def list_repo_issues(
        self, owner: str, repo: str, since: datetime | None = None
    ) -> list[dict[str, Any]]:
        """List issues and pull requests of a repository, open and closed."""
        params: dict[str, Any] = {"state": "all", "per_page": PER_PAGE}
        if since is not None:
            params["since"] = to_iso(since)
        return await self._get_paginated(f"/repos/{owner}/{repo}/issues", params)

    async def list_assigned_issues(self, since: datetime | None = None) -> list[dict[str, Any]]:
        """List issues assigned to the authenticated user across repositories."""
        params: dict[str, Any] = {"filter": "assigned", "state": "all", "per_page": PER_PAGE}
        if since is not None:
            params["since"] = to_iso(since)
        return await self._get_paginated("/issues", params)

    async def search_issues(
        self, query: str, since: datetime | None = None
    ) -> list[dict[str, Any]]:
        """Run an issue search and return the matching items of every page.

        ``since`` narrows the search to items updated at or after that time.
        """
        if since is not None:
            query = f"{query} updated:>={to_iso(since)}"
        params = {"q": query, "per_page": PER_PAGE}
        return await self._get_paginated("/search/issues", params, items_key="items")

    async def _get_paginated(
        self,
        path: str,
        params: dict[str, Any],
        items_key: str | None = None,
    ) -> list[dict[str, Any]]:
        """Follow Link rel="next" headers, up to MAX_PAGES pages.

        List endpoints return a JSON array; search endpoints wrap it in
        ``items_key``.
        """
        items: list[dict[str, Any]] = []
        url: str | None = path
        page_params: dict[str, Any] | None = params

        for _ in range(MAX_PAGES):
            if url is None:
                break
            response = await self._get(url, page_params)
            body = response.json()
            items.extend(body.get(items_key, []) if items_key else body)
            next_link = response.links.get("next")
            url = next_link["url"] if next_link else None
            # The next URL already carries the query string
            page_params = None

        if url is not None:
            logger.warning(
                "GET %s: stopped after %d pages, %d items kept, later pages dropped",
                path,
                MAX_PAGES,
                len(items),
            )
        return items

    async def _get(self, url: str, params: dict[str, Any] | None = None) -> httpx.Response:
        """Issue a GET request and map failures to ProviderError kinds.

        Raises:
            ProviderAuthError: Authentication failed
            ProviderNotFoundError: Resource not found
            ProviderForbiddenError: Permission denied
            ProviderRateLimitError: Rate limit exceeded
            ProviderTransportError: Network failure or timeout
            ProviderError: Other errors
        """
        logger.debug("GET %s params=%s", url, params)

        start_time = time.monotonic()
        try:
            response = await self._client.get(url, params=params)
        except httpx.RequestError as e:
            elapsed_ms = (time.monotonic() - start_time) * 1000
            logger.error("GET %s failed after %.0fms: %s", url, elapsed_ms, e)
            raise ProviderTransportError(_PROVIDER, f"Request failed: {e}") from e

        elapsed_ms = (time.monotonic() - start_time) * 1000
        self._record_rate_limit(response)

        if response.status_code == 401:
            logger.error("GET %s: 401 Unauthorized (%.0fms)", url, elapsed_ms)
            raise ProviderAuthError(_PROVIDER, "GitHub authentication failed. Check your token.")
        if response.status_code in (403, 429):
            if self._is_rate_limited(response):
                reset_at = self._reset_hint(response)
                logger.error(
                    "GET %s: %d Rate Limited (%.0fms)", url, response.status_code, elapsed_ms
                )
                hint = to_iso(reset_at) if reset_at else "unknown"
                raise ProviderRateLimitError(
                    _PROVIDER, f"Rate limit exceeded. Resets at {hint}", reset_at=reset_at
                )
            logger.error("GET %s: 403 Forbidden (%.0fms)", url, elapsed_ms)
            raise ProviderForbiddenError(
                _PROVIDER, "Permission denied. Check that your token has the 'repo' scope."
            )
        if response.status_code == 404:
            logger.error("GET %s: 404 Not Found (%.0fms)", url, elapsed_ms)
            raise ProviderNotFoundError(_PROVIDER, "Resource not found")
        if response.status_code >= 400:
            logger.error("GET %s: HTTP %d (%.0fms)", url, response.status_code, elapsed_ms)
            raise ProviderError(
                _PROVIDER,
                f"GitHub API error: {response.status_code} {response.reason_phrase}",
            )

        logger.info("GET %s: %d OK (%.0fms)", url, response.status_code, elapsed_ms)
        return response

    def _record_rate_limit(self, response: httpx.Response) -> None:
        remaining = response.headers.get("x-ratelimit-remaining")
        if remaining is None:
            return
        self.rate_limit = RateLimit(
            remaining=int(remaining),
            reset_at=self._reset_hint(response),
        )
        if self.rate_limit.remaining < 10:
            logger.warning("GitHub rate limit low: %d requests left", self.rate_limit.remaining)

    @staticmethod
    def _is_rate_limited(response: httpx.Response) -> bool:
        if response.status_code == 429:
            return True
        if response.headers.get("x-ratelimit-remaining") == "0":
            return True
        return "rate limit" in response.text.lower()

    @staticmethod
    def _reset_hint(response: httpx.Response) -> datetime | None:
        """When the rate limit resets, from x-ratelimit-reset or retry-after."""
        reset = response.headers.get("x-ratelimit-reset")
        if reset and reset.isdigit():
            return datetime.fromtimestamp(int(reset), tz=UTC)
        retry_after = response.headers.get("retry-after")
        if retry_after and retry_after.isdigit():
            return datetime.now(UTC) + timedelta(seconds=int(retry_after))
        return None
