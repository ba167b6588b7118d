"""Task domain model.

A Task is the one shape every source normalizes into: tasks created in the
TUI, GitHub issues/pull requests and Linear issues. On disk the record uses
camelCase keys (``externalId``, ``updatedAt`` ...), exposed here through
pydantic aliases.
"""

from __future__ import annotations

import re
from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

LOCAL_PREFIX = "LOCAL"
TITLE_MAX_LENGTH = 200

TASK_ID_PATTERN = re.compile(r"^(LOCAL|[A-Z]+)-\d+$")

UNTITLED = "(untitled)"


def clip_title(title: str | None) -> str:
    """Fit a remote title into the task title bounds.

    Providers allow longer titles than tasks do; the excess is cut and an
    ellipsis marks the cut. Blank titles become a placeholder.
    """
    title = (title or "").strip()
    if not title:
        return UNTITLED
    if len(title) > TITLE_MAX_LENGTH:
        return title[: TITLE_MAX_LENGTH - 1].rstrip() + "…"
    return title


class TaskStatus(str, Enum):
    """Workflow status of a task."""

    TODO = "todo"
    IN_PROGRESS = "inProgress"
    DONE = "done"
    CANCELLED = "cancelled"


class TaskPriority(str, Enum):
    """Priority of a task, lowest first."""

    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class TaskSource(str, Enum):
    """Where a task came from. Immutable once set."""

    LOCAL = "local"
    GITHUB = "github"
    LINEAR = "linear"


class GitHubItemType(str, Enum):
    """Kind of GitHub item, decided once when the issue is transformed."""

    ISSUE = "issue"
    PULL_REQUEST = "pr"


# Order used when cycling status from the list view. Cancelled is only
# reachable through an explicit edit.
STATUS_CYCLE: tuple[TaskStatus, ...] = (
    TaskStatus.TODO,
    TaskStatus.IN_PROGRESS,
    TaskStatus.DONE,
)


def _ensure_aware(value: datetime | None) -> datetime | None:
    """Treat naive datetimes as UTC so timestamps always compare."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class _CamelModel(BaseModel):
    """Base for models persisted with camelCase keys."""

    model_config = ConfigDict(populate_by_name=True)


class GitHubMetadata(_CamelModel):
    """Passthrough metadata for tasks synced from GitHub."""

    type: GitHubItemType = GitHubItemType.ISSUE
    number: int
    repo: str  # "owner/repo"
    url: str
    external_status: str | None = Field(default=None, alias="externalStatus")
    synced_at: datetime = Field(alias="syncedAt")

    @field_validator("synced_at")
    @classmethod
    def validate_synced_at(cls, v: datetime) -> datetime | None:
        return _ensure_aware(v)

    @property
    def is_pull_request(self) -> bool:
        return self.type == GitHubItemType.PULL_REQUEST


class LinearMetadata(_CamelModel):
    """Passthrough metadata for tasks synced from Linear."""

    id: str
    url: str
    team_id: str | None = Field(default=None, alias="teamId")
    external_status: str | None = Field(default=None, alias="externalStatus")
    synced_at: datetime = Field(alias="syncedAt")

    @field_validator("synced_at")
    @classmethod
    def validate_synced_at(cls, v: datetime) -> datetime | None:
        return _ensure_aware(v)


class Task(_CamelModel):
    """A single task record."""

    # Display identifier, e.g. "LOCAL-3", "GH-42", "ENG-7"
    id: str
    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    description: str | None = None
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.NONE
    source: TaskSource = TaskSource.LOCAL

    # Merge key for synced tasks: "<provider>:<scope>:<nativeId>"
    external_id: str | None = Field(default=None, alias="externalId")

    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    github: GitHubMetadata | None = None
    linear: LinearMetadata | None = None

    tags: list[str] = Field(default_factory=list)
    due_date: datetime | None = Field(default=None, alias="dueDate")

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        """Validate id is PREFIX-number with an uppercase prefix."""
        if not TASK_ID_PATTERN.match(v):
            raise ValueError(f"Invalid task id '{v}' (expected PREFIX-<number>)")
        return v

    @field_validator("created_at", "updated_at", "due_date")
    @classmethod
    def validate_timezone(cls, v: datetime | None) -> datetime | None:
        return _ensure_aware(v)

    @model_validator(mode="after")
    def validate_external_id(self) -> Task:
        """External id is present exactly when the task is not local."""
        if self.source == TaskSource.LOCAL and self.external_id is not None:
            raise ValueError("Local tasks cannot have an externalId")
        if self.source != TaskSource.LOCAL and not self.external_id:
            raise ValueError(f"Tasks from {self.source.value} require an externalId")
        return self

    @property
    def is_local(self) -> bool:
        return self.source == TaskSource.LOCAL

    @property
    def local_number(self) -> int | None:
        """Numeric suffix for LOCAL-<n> ids, None for other ids."""
        prefix, _, number = self.id.partition("-")
        if prefix != LOCAL_PREFIX:
            return None
        return int(number)

    @property
    def url(self) -> str | None:
        """Link to the task in its source system, if any."""
        if self.github:
            return self.github.url
        if self.linear:
            return self.linear.url
        return None

    def to_document(self) -> dict:
        """Convert to the JSON-ready dict stored in data.json."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
