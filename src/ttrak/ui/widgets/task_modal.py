"""Create/edit task dialog."""

from __future__ import annotations

from dataclasses import dataclass

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Input, Label, Select, Static

from ...models import Task, TaskPriority, TaskStatus
from ...models.task import TITLE_MAX_LENGTH

PRIORITY_OPTIONS: list[tuple[str, TaskPriority]] = [
    ("None", TaskPriority.NONE),
    ("Low", TaskPriority.LOW),
    ("Med", TaskPriority.MEDIUM),
    ("High", TaskPriority.HIGH),
    ("Urgent", TaskPriority.URGENT),
]

STATUS_OPTIONS: list[tuple[str, TaskStatus]] = [
    ("Todo", TaskStatus.TODO),
    ("In Progress", TaskStatus.IN_PROGRESS),
    ("Done", TaskStatus.DONE),
    ("Cancelled", TaskStatus.CANCELLED),
]


@dataclass
class TaskFormResult:
    """Values submitted from the task dialog."""

    title: str
    status: TaskStatus
    priority: TaskPriority


class TaskModal(ModalScreen[TaskFormResult | None]):
    """Dialog for a new task, or for editing one when ``task`` is given.

    Dismisses with the entered values, or None when cancelled.
    """

    DEFAULT_CSS = """
    TaskModal {
        align: center middle;
    }

    TaskModal > Vertical {
        width: 54;
        height: auto;
        padding: 1 2;
        background: $surface;
        border: solid $primary;
    }

    TaskModal .modal-heading {
        width: 100%;
        text-style: bold;
        margin-bottom: 1;
    }

    TaskModal Input, TaskModal Select {
        margin-bottom: 1;
    }

    TaskModal .modal-error {
        color: $error;
        height: auto;
    }

    TaskModal .modal-footer {
        color: $text-muted;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
        Binding("ctrl+s", "submit", "Save", show=False),
    ]

    def __init__(self, task: Task | None = None) -> None:
        super().__init__()
        self._editing = task

    @property
    def is_edit(self) -> bool:
        return self._editing is not None

    def compose(self) -> ComposeResult:
        task = self._editing
        with Vertical():
            heading = f"Edit {task.id}" if task else "New Task"
            yield Label(heading, classes="modal-heading")
            yield Label("Title:")
            yield Input(
                value=task.title if task else "",
                placeholder="Enter task title...",
                max_length=TITLE_MAX_LENGTH,
                id="title-input",
            )
            yield Label("Priority:")
            yield Select(
                PRIORITY_OPTIONS,
                value=task.priority if task else TaskPriority.NONE,
                allow_blank=False,
                id="priority-select",
            )
            yield Label("Status:")
            yield Select(
                STATUS_OPTIONS,
                value=task.status if task else TaskStatus.TODO,
                allow_blank=False,
                id="status-select",
            )
            yield Static("", id="modal-error", classes="modal-error")
            yield Static("tab:switch fields  enter:save  esc:cancel", classes="modal-footer")

    def on_mount(self) -> None:
        self.query_one("#title-input", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self.action_submit()

    def action_submit(self) -> None:
        result = self.collect()
        if result is None:
            self.query_one("#modal-error", Static).update("Title cannot be empty")
            return
        self.dismiss(result)

    def action_cancel(self) -> None:
        self.dismiss(None)

    def collect(self) -> TaskFormResult | None:
        """Current form values, None while the title is blank."""
        title = self.query_one("#title-input", Input).value.strip()
        if not title:
            return None
        priority = self.query_one("#priority-select", Select).value
        status = self.query_one("#status-select", Select).value
        return TaskFormResult(
            title=title,
            status=TaskStatus(status),
            priority=TaskPriority(priority),
        )
