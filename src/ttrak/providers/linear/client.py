"""Linear GraphQL API client."""

from __future__ import annotations

import logging
import re
import time
from typing import Any

import httpx

from ...models import ProviderName
from ..errors import (
    ProviderAuthError,
    ProviderError,
    ProviderForbiddenError,
    ProviderNotFoundError,
    ProviderRateLimitError,
    ProviderTransportError,
)
from .queries import GET_ISSUES, GET_VIEWER

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.linear.app/graphql"
MAX_PAGES = 10

_PROVIDER = ProviderName.LINEAR


class LinearClient:
    """Async Linear GraphQL API client.

    Linear API keys are sent as-is in the Authorization header (no
    "Bearer" prefix).
    """

    def __init__(
        self,
        api_key: str,
        api_url: str = DEFAULT_API_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the Linear client.

        Args:
            api_key: Linear personal API key
            api_url: GraphQL endpoint
            transport: Optional httpx transport (used by tests)
        """
        self.api_key = api_key
        self.api_url = api_url
        self._client = httpx.AsyncClient(
            headers={
                "Authorization": api_key,
                "Content-Type": "application/json",
            },
            timeout=30.0,
            transport=transport,
        )

    async def aclose(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> LinearClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def get_viewer(self) -> dict[str, Any]:
        """Get the API key's owner (id, name, email)."""
        data = await self.execute(GET_VIEWER)
        viewer = data.get("viewer")
        if not viewer:
            raise ProviderAuthError(_PROVIDER, "Linear authentication failed. Check your API key.")
        return viewer

    async def list_issues(self, issue_filter: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        """List issues matching an IssueFilter, following cursors."""
        issues: list[dict[str, Any]] = []
        cursor: str | None = None

        for _ in range(MAX_PAGES):
            variables: dict[str, Any] = {"cursor": cursor}
            if issue_filter:
                variables["filter"] = issue_filter
            data = await self.execute(GET_ISSUES, variables)
            connection = data["issues"]
            issues.extend(connection["nodes"])

            page_info = connection["pageInfo"]
            if not page_info["hasNextPage"]:
                break
            cursor = page_info["endCursor"]

        return issues

    async def execute(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """Execute a GraphQL query.

        Args:
            query: GraphQL query string
            variables: Query variables

        Returns:
            Response data (the 'data' field from GraphQL response)

        Raises:
            ProviderAuthError: Authentication failed
            ProviderForbiddenError: Permission denied
            ProviderNotFoundError: Entity not found
            ProviderRateLimitError: Rate limit exceeded
            ProviderTransportError: Network failure or timeout
            ProviderError: Other errors
        """
        # Extract operation name for logging (e.g., "query GetViewer" -> "GetViewer")
        op_match = re.search(r"(?:query|mutation)\s+(\w+)", query)
        op_name = op_match.group(1) if op_match else "anonymous"

        payload: dict[str, Any] = {"query": query}
        if variables:
            payload["variables"] = variables

        logger.debug("GraphQL %s: variables=%s", op_name, variables)

        start_time = time.monotonic()
        try:
            response = await self._client.post(self.api_url, json=payload)
        except httpx.RequestError as e:
            elapsed_ms = (time.monotonic() - start_time) * 1000
            logger.error("GraphQL %s failed after %.0fms: %s", op_name, elapsed_ms, e)
            raise ProviderTransportError(_PROVIDER, f"Request failed: {e}") from e

        elapsed_ms = (time.monotonic() - start_time) * 1000

        if response.status_code == 401:
            logger.error("GraphQL %s: 401 Unauthorized (%.0fms)", op_name, elapsed_ms)
            raise ProviderAuthError(_PROVIDER, "Linear authentication failed. Check your API key.")
        if response.status_code == 429:
            logger.error("GraphQL %s: 429 Rate Limited (%.0fms)", op_name, elapsed_ms)
            raise ProviderRateLimitError(
                _PROVIDER, "Linear API rate limit exceeded. Try again later."
            )
        if response.status_code == 403:
            logger.error("GraphQL %s: 403 Forbidden (%.0fms)", op_name, elapsed_ms)
            raise ProviderForbiddenError(_PROVIDER, "Permission denied for this API key.")
        if response.status_code == 404:
            logger.error("GraphQL %s: 404 Not Found (%.0fms)", op_name, elapsed_ms)
            raise ProviderNotFoundError(_PROVIDER, "Resource not found")

        # Linear reports GraphQL errors with 400 bodies, so parse before
        # treating >= 400 as a generic failure
        try:
            result = response.json()
        except ValueError as e:
            logger.error("GraphQL %s: Invalid JSON response (%.0fms)", op_name, elapsed_ms)
            if response.status_code >= 400:
                raise ProviderError(_PROVIDER, f"HTTP {response.status_code}") from e
            raise ProviderError(_PROVIDER, f"Invalid JSON response: {e}") from e

        if "errors" in result:
            self._raise_graphql_errors(op_name, result["errors"], elapsed_ms)

        if response.status_code >= 400:
            logger.error("GraphQL %s: HTTP %d (%.0fms)", op_name, response.status_code, elapsed_ms)
            raise ProviderError(_PROVIDER, f"HTTP {response.status_code}: {response.text}")

        logger.info("GraphQL %s: 200 OK (%.0fms)", op_name, elapsed_ms)
        return result.get("data") or {}

    def _raise_graphql_errors(
        self, op_name: str, errors: list[dict[str, Any]], elapsed_ms: float
    ) -> None:
        """Raise the most specific error for a GraphQL error list."""
        error_messages = [e.get("message", str(e)) for e in errors]

        for error in errors:
            code = (error.get("extensions") or {}).get("code", "")
            message = error.get("message", "")
            lowered = message.lower()

            if code == "RATELIMITED" or "rate limit" in lowered:
                logger.error("GraphQL %s: Rate Limited (%.0fms)", op_name, elapsed_ms)
                raise ProviderRateLimitError(_PROVIDER, message or "Rate limit exceeded")
            if (
                code == "AUTHENTICATION_ERROR"
                or "authentication" in lowered
                or "api key" in lowered
            ):
                logger.error(
                    "GraphQL %s: Authentication - %s (%.0fms)", op_name, message, elapsed_ms
                )
                raise ProviderAuthError(
                    _PROVIDER, "Linear authentication failed. Check your API key."
                )
            if code == "FORBIDDEN":
                logger.error("GraphQL %s: Forbidden - %s (%.0fms)", op_name, message, elapsed_ms)
                raise ProviderForbiddenError(_PROVIDER, message)
            if "not found" in lowered:
                logger.error("GraphQL %s: Not Found - %s (%.0fms)", op_name, message, elapsed_ms)
                raise ProviderNotFoundError(_PROVIDER, message)

        logger.error("GraphQL %s: errors=%s (%.0fms)", op_name, error_messages, elapsed_ms)
        raise ProviderError(_PROVIDER, f"GraphQL errors: {'; '.join(error_messages)}")
