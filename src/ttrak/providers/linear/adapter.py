"""Linear provider adapter: issues as Task records."""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Any

import httpx

from ...models import (
    LinearIntegrationConfig,
    LinearMetadata,
    ProviderName,
    Task,
    TaskPriority,
    TaskSource,
    TaskStatus,
)
from ...models.task import clip_title
from ...utils import from_iso, now_utc, to_iso
from ..errors import ProviderAuthError
from .client import LinearClient

logger = logging.getLogger(__name__)

FALLBACK_PREFIX = "LIN"

# Linear priority numbers: 0 = no priority, 1 = urgent ... 4 = low
_PRIORITY_BY_NUMBER: dict[int, TaskPriority] = {
    0: TaskPriority.NONE,
    1: TaskPriority.URGENT,
    2: TaskPriority.HIGH,
    3: TaskPriority.MEDIUM,
    4: TaskPriority.LOW,
}

# Checked in order; first state-name substring match wins
_STATUS_KEYWORDS: tuple[tuple[tuple[str, ...], TaskStatus], ...] = (
    (("backlog", "todo"), TaskStatus.TODO),
    (("progress", "review"), TaskStatus.IN_PROGRESS),
    (("done", "complete"), TaskStatus.DONE),
    (("cancel",), TaskStatus.CANCELLED),
)


def infer_priority_from_linear(priority: int | None) -> TaskPriority:
    """Map Linear's numeric priority to a task priority."""
    if priority is None:
        return TaskPriority.NONE
    return _PRIORITY_BY_NUMBER.get(int(priority), TaskPriority.NONE)


def map_linear_state(state_name: str) -> TaskStatus:
    """Map a workflow state name to a task status."""
    lower = state_name.lower()
    for keywords, status in _STATUS_KEYWORDS:
        if any(keyword in lower for keyword in keywords):
            return status
    return TaskStatus.TODO


def _id_prefix(team_key: str | None) -> str:
    """Team key as a display prefix (uppercase letters only)."""
    prefix = re.sub(r"[^A-Z]", "", (team_key or "").upper())
    return prefix or FALLBACK_PREFIX


def transform_issue(issue: dict[str, Any], synced_at: datetime) -> Task:
    """Convert a Linear issue payload into a Task."""
    state = issue.get("state") or {}
    team = issue.get("team") or {}
    labels = (issue.get("labels") or {}).get("nodes") or []
    team_id = team.get("id")
    due_date = issue.get("dueDate")

    return Task(
        id=f"{_id_prefix(team.get('key'))}-{issue['number']}",
        title=clip_title(issue.get("title")),
        description=issue.get("description") or None,
        status=map_linear_state(state.get("name", "")),
        priority=infer_priority_from_linear(issue.get("priority")),
        source=TaskSource.LINEAR,
        external_id=f"linear:{team_id or 'unknown'}:{issue['id']}",
        created_at=from_iso(issue["createdAt"]),
        updated_at=from_iso(issue["updatedAt"]),
        linear=LinearMetadata(
            id=issue["id"],
            url=issue["url"],
            team_id=team_id,
            external_status=state.get("name"),
            synced_at=synced_at,
        ),
        tags=[label["name"] for label in labels if label.get("name")],
        due_date=from_iso(due_date) if due_date else None,
    )


class LinearAdapter:
    """Fetches Linear issues, optionally limited to the viewer and a team."""

    name = ProviderName.LINEAR

    def __init__(
        self,
        config: LinearIntegrationConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._transport = transport

    async def fetch(self, since: datetime | None = None) -> list[Task]:
        """Fetch and transform Linear issues.

        Raises:
            ProviderAuthError: no API key configured or key rejected
            ProviderError: any other API or transport failure
        """
        if not self.config.api_key:
            raise ProviderAuthError(self.name, "Linear API key is not set")

        async with LinearClient(
            self.config.api_key, self.config.api_url, transport=self._transport
        ) as client:
            issue_filter = await self._build_filter(client, since)
            issues = await client.list_issues(issue_filter or None)

        # Pages can shift while paginating; keep one instance per issue
        unique = {issue["id"]: issue for issue in issues}
        synced_at = now_utc()
        tasks = [transform_issue(issue, synced_at) for issue in unique.values()]

        logger.info("Linear: fetched %d issues (%d unique)", len(issues), len(tasks))
        return tasks

    async def _build_filter(
        self, client: LinearClient, since: datetime | None
    ) -> dict[str, Any]:
        issue_filter: dict[str, Any] = {}
        if self.config.sync_only_assigned:
            viewer = await client.get_viewer()
            issue_filter["assignee"] = {"id": {"eq": viewer["id"]}}
        if self.config.team_id:
            issue_filter["team"] = {"id": {"eq": self.config.team_id}}
        if since is not None:
            issue_filter["updatedAt"] = {"gt": to_iso(since)}
        return issue_filter
