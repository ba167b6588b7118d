"""Service for parsing and applying filters to tasks."""

import contextlib
import re
from dataclasses import dataclass, field

from ..models import Task, TaskPriority, TaskSource, TaskStatus
from ..models.ttrak_config import DefaultView

VIEWS: tuple[DefaultView, ...] = ("all", "todo", "inProgress", "done")


@dataclass
class Filter:
    """Represents a parsed filter expression."""

    text: str | None = None  # Free text search
    tags: list[str] = field(default_factory=list)  # tag:value
    exclude_tags: list[str] = field(default_factory=list)  # -tag:value
    statuses: list[TaskStatus] = field(default_factory=list)  # status:value
    priorities: list[TaskPriority] = field(default_factory=list)  # priority:value
    sources: list[TaskSource] = field(default_factory=list)  # source:value

    @property
    def is_empty(self) -> bool:
        return not (
            self.text
            or self.tags
            or self.exclude_tags
            or self.statuses
            or self.priorities
            or self.sources
        )


class FilterService:
    """Service for parsing and applying filters to tasks."""

    # Pattern for key:value tokens
    TOKEN_PATTERN = re.compile(r"(-?)(?:(tag|status|priority|source):)?(\S+)")

    # Lowercased spellings accepted for statuses
    STATUS_ALIASES = {
        "todo": TaskStatus.TODO,
        "inprogress": TaskStatus.IN_PROGRESS,
        "in_progress": TaskStatus.IN_PROGRESS,
        "progress": TaskStatus.IN_PROGRESS,
        "done": TaskStatus.DONE,
        "cancelled": TaskStatus.CANCELLED,
        "canceled": TaskStatus.CANCELLED,
    }

    def parse(self, expression: str) -> Filter:
        """
        Parse a filter expression string.

        Syntax:
        - Free text: matches title, id or description
        - tag:value / -tag:value: include / exclude tag
        - status:todo/inprogress/done/cancelled
        - priority:none/low/medium/high/urgent
        - source:local/github/linear

        Multiple conditions are ANDed together; repeated keys are ORed.
        """
        f = Filter()
        text_parts: list[str] = []

        for match in self.TOKEN_PATTERN.finditer(expression):
            negated = match.group(1) == "-"
            key = match.group(2)
            value = match.group(3).lower()

            if key is None:
                if not negated:
                    text_parts.append(match.group(3))

            elif key == "tag":
                if negated:
                    f.exclude_tags.append(value)
                else:
                    f.tags.append(value)

            elif key == "status":
                status = self.STATUS_ALIASES.get(value)
                if status is not None:
                    f.statuses.append(status)

            elif key == "priority":
                with contextlib.suppress(ValueError):
                    f.priorities.append(TaskPriority(value))

            elif key == "source":
                with contextlib.suppress(ValueError):
                    f.sources.append(TaskSource(value))

        if text_parts:
            f.text = " ".join(text_parts)

        return f

    def apply(
        self,
        tasks: list[Task],
        filter_: Filter | None = None,
        view: DefaultView = "all",
    ) -> list[Task]:
        """Apply a view tab and an optional filter, keeping order."""
        result: list[Task] = []

        for task in tasks:
            if view != "all" and task.status.value != view:
                continue
            if filter_ is not None and not self._matches(task, filter_):
                continue
            result.append(task)

        return result

    def _matches(self, task: Task, f: Filter) -> bool:
        """Check if a task matches the filter."""
        # Text search (case-insensitive)
        if f.text:
            search_text = f.text.lower()
            haystacks = [task.title.lower(), task.id.lower(), (task.description or "").lower()]
            if not any(search_text in h for h in haystacks):
                return False

        # Tag inclusion (any match)
        if f.tags:
            task_tags = [t.lower() for t in task.tags]
            if not any(tag in task_tags for tag in f.tags):
                return False

        # Tag exclusion (no matches)
        if f.exclude_tags:
            task_tags = [t.lower() for t in task.tags]
            if any(tag in task_tags for tag in f.exclude_tags):
                return False

        if f.statuses and task.status not in f.statuses:
            return False

        if f.priorities and task.priority not in f.priorities:
            return False

        if f.sources and task.source not in f.sources:
            return False

        return True
