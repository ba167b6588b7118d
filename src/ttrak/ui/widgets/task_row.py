"""Task row widget."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.markup import escape
from textual.widget import Widget
from textual.widgets import Static

from ...models import Task, TaskPriority, TaskSource, TaskStatus

# Status display mapping: (icon, theme color variable)
STATUS_DISPLAY: dict[TaskStatus, tuple[str, str]] = {
    TaskStatus.TODO: ("○", "$foreground"),
    TaskStatus.IN_PROGRESS: ("◉", "$warning"),
    TaskStatus.DONE: ("✓", "$success"),
    TaskStatus.CANCELLED: ("✗", "$error"),
}

PRIORITY_COLORS: dict[TaskPriority, str] = {
    TaskPriority.URGENT: "$error",
    TaskPriority.HIGH: "$warning",
    TaskPriority.MEDIUM: "$accent",
    TaskPriority.LOW: "$text-muted",
    TaskPriority.NONE: "$text-muted",
}

SOURCE_BADGES: dict[TaskSource, str] = {
    TaskSource.LINEAR: "[L]",
    TaskSource.GITHUB: "[G]",
    TaskSource.LOCAL: "[▸]",
}

ID_WIDTH = 10


def status_icon(status: TaskStatus) -> str:
    return STATUS_DISPLAY[status][0]


def priority_badge(priority: TaskPriority) -> str:
    """Three-letter badge like [URG], empty for no priority."""
    if priority == TaskPriority.NONE:
        return ""
    return f"[{priority.value.upper()[:3]}]"


def source_badge(source: TaskSource) -> str:
    return SOURCE_BADGES[source]


class TaskRow(Widget, can_focus=True):
    """One task in the list: status icon, id, title, priority and source."""

    DEFAULT_CSS = """
    TaskRow {
        height: 1;
        layout: horizontal;
    }

    TaskRow:focus {
        background: $primary;
        color: $background;
    }

    TaskRow .task-status {
        width: 2;
    }

    TaskRow .task-id {
        width: 10;
        color: $text-muted;
    }

    TaskRow .task-title {
        width: 1fr;
    }

    TaskRow .task-meta {
        width: 12;
        text-align: right;
    }

    TaskRow:focus .task-id, TaskRow:focus .task-meta {
        color: $background;
    }
    """

    def __init__(self, task_data: Task, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._task_data = task_data

    @property
    def task(self) -> Task:  # pyrefly: ignore[bad-override]
        """Get the task for this row."""
        return self._task_data

    def compose(self) -> ComposeResult:
        icon, color = STATUS_DISPLAY[self._task_data.status]
        yield Static(f"[{color}]{icon}[/]", classes="task-status")
        yield Static(self._task_data.id.ljust(ID_WIDTH), classes="task-id")
        yield Static(escape(self._task_data.title), classes="task-title")
        yield Static(self._format_meta(), classes="task-meta")

    def _format_meta(self) -> str:
        """Priority badge and source badge, colored by priority."""
        badge = priority_badge(self._task_data.priority)
        meta = f"{badge} {source_badge(self._task_data.source)}".strip()
        color = PRIORITY_COLORS[self._task_data.priority]
        return f"[{color}]{escape(meta)}[/]"
