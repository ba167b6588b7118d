"""GitHub provider adapter: issues and pull requests as Task records."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

import httpx

from ...models import (
    GitHubIntegrationConfig,
    GitHubItemType,
    GitHubMetadata,
    ProviderName,
    Task,
    TaskPriority,
    TaskSource,
    TaskStatus,
)
from ...models.task import clip_title
from ...utils import from_iso, now_utc
from ..errors import ProviderAuthError, ProviderConfigError
from .client import GitHubClient

logger = logging.getLogger(__name__)

ID_PREFIX = "GH"

# Checked in order; first label substring match wins
_PRIORITY_KEYWORDS: tuple[tuple[tuple[str, ...], TaskPriority], ...] = (
    (("urgent", "critical"), TaskPriority.URGENT),
    (("high",), TaskPriority.HIGH),
    (("medium",), TaskPriority.MEDIUM),
    (("low",), TaskPriority.LOW),
)


def infer_priority_from_labels(labels: list[dict[str, Any]]) -> TaskPriority:
    """Guess a priority from label names by substring."""
    names = [label.get("name", "").lower() for label in labels]
    for keywords, priority in _PRIORITY_KEYWORDS:
        if any(keyword in name for name in names for keyword in keywords):
            return priority
    return TaskPriority.NONE


def map_github_state(state: str) -> TaskStatus:
    """Map an issue state to a task status."""
    return TaskStatus.TODO if state == "open" else TaskStatus.DONE


def transform_issue(issue: dict[str, Any], repo: str, synced_at: datetime) -> Task:
    """Convert a GitHub issue or pull request payload into a Task."""
    number = issue["number"]
    labels = issue.get("labels") or []
    item_type = (
        GitHubItemType.PULL_REQUEST if issue.get("pull_request") else GitHubItemType.ISSUE
    )

    return Task(
        id=f"{ID_PREFIX}-{number}",
        title=clip_title(issue.get("title")),
        description=issue.get("body") or None,
        status=map_github_state(issue["state"]),
        priority=infer_priority_from_labels(labels),
        source=TaskSource.GITHUB,
        external_id=f"github:{repo}:{number}",
        created_at=from_iso(issue["created_at"]),
        updated_at=from_iso(issue["updated_at"]),
        github=GitHubMetadata(
            type=item_type,
            number=number,
            repo=repo,
            url=issue["html_url"],
            external_status=issue["state"],
            synced_at=synced_at,
        ),
        tags=[label["name"] for label in labels if label.get("name")],
    )


class GitHubAdapter:
    """Fetches a repository's issues (and optionally the viewer's PRs).

    Scope depends on config:
    - neither flag set: every issue in the repository, pull requests dropped
    - sync_assigned_issues: issues assigned to the viewer in the repository
    - sync_authored_prs: pull requests authored by the viewer in the repository
    """

    name = ProviderName.GITHUB

    def __init__(
        self,
        config: GitHubIntegrationConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._transport = transport

    async def fetch(self, since: datetime | None = None) -> list[Task]:
        """Fetch and transform GitHub items.

        Raises:
            ProviderConfigError: repo is not in owner/repo form
            ProviderAuthError: no token configured or token rejected
            ProviderError: any other API or transport failure
        """
        repo_parts = self.config.owner_and_name
        if repo_parts is None:
            raise ProviderConfigError(
                self.name, f'Invalid repo format: {self.config.repo}. Expected "owner/repo"'
            )
        if not self.config.token:
            raise ProviderAuthError(self.name, "GitHub token is not set")

        owner, repo = repo_parts
        async with GitHubClient(
            self.config.token, self.config.base_url, transport=self._transport
        ) as client:
            items = await self._collect_items(client, owner, repo, since)

        # Overlapping queries may return the same item twice; last seen wins
        unique = {item["number"]: item for item in items}
        synced_at = now_utc()
        tasks = [transform_issue(item, self.config.repo, synced_at) for item in unique.values()]

        logger.info(
            "GitHub %s: fetched %d items (%d unique)", self.config.repo, len(items), len(tasks)
        )
        return tasks

    async def _collect_items(
        self,
        client: GitHubClient,
        owner: str,
        repo: str,
        since: datetime | None,
    ) -> list[dict[str, Any]]:
        if not (self.config.sync_assigned_issues or self.config.sync_authored_prs):
            issues = await client.list_repo_issues(owner, repo, since)
            return [item for item in issues if not item.get("pull_request")]

        items: list[dict[str, Any]] = []
        username = await client.get_authenticated_user()

        if self.config.sync_assigned_issues:
            assigned = await client.list_assigned_issues(since)
            repo_marker = f"/{owner}/{repo}/".lower()
            items.extend(
                item
                for item in assigned
                if not item.get("pull_request") and repo_marker in item["html_url"].lower()
            )

        if self.config.sync_authored_prs:
            query = f"is:pr author:{username} repo:{owner}/{repo}"
            items.extend(await client.search_issues(query, since))

        return items
