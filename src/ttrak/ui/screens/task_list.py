"""Main task list screen."""

from textual.app import ComposeResult
from textual.screen import Screen
from textual.widgets import Static

from ...models import Task
from ...models.ttrak_config import DefaultView
from ...services import Filter
from ..widgets.command_bar import CommandBar
from ..widgets.task_list import TaskList
from ..widgets.view_tabs import ViewTabs

FOOTER_TEXT = (
    "/:search j/k:nav n:new e:edit d:del space:status 1-4:filter s:setup r:sync q:quit"
)


class TaskListScreen(Screen):
    """Task list with view tabs, search and cursor navigation."""

    # Layers for z-ordering (later = higher)
    LAYERS = ["base", "command"]

    DEFAULT_CSS = """
    TaskListScreen #list-header {
        height: 1;
        padding: 0 1;
        background: $panel;
        text-style: bold;
    }

    TaskListScreen #search-status {
        height: 1;
        padding: 0 1;
        display: none;
    }

    TaskListScreen #list-footer {
        height: 1;
        dock: bottom;
        padding: 0 1;
        color: $text-muted;
    }
    """

    def __init__(self, view: DefaultView = "all", *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._view: DefaultView = view
        self._filter: Filter | None = None
        self._current = 0
        self._pending_focus_id: str | None = None

    def compose(self) -> ComposeResult:
        yield Static("", id="list-header")
        yield ViewTabs(self._view, id="view-tabs")
        yield TaskList(id="task-list")
        yield Static("", id="search-status")
        yield CommandBar()
        yield Static(FOOTER_TEXT, id="list-footer")

    def on_mount(self) -> None:
        self.load_tasks()
        self.call_after_refresh(self._schedule_pending_focus)

    @property
    def view(self) -> DefaultView:
        return self._view

    @property
    def task_list(self) -> TaskList:
        return self.query_one(TaskList)

    def visible_tasks(self) -> list[Task]:
        """Tasks after applying the view tab and the search filter."""
        tasks = self.app.task_service.get_all_tasks()  # pyrefly: ignore[missing-attribute]
        return self.app.filter_service.apply(  # pyrefly: ignore[missing-attribute]
            tasks, self._filter, self._view
        )

    def load_tasks(self) -> None:
        """Populate the list and the header counts."""
        total = len(self.app.task_service.tasks)  # pyrefly: ignore[missing-attribute]
        shown = self.visible_tasks()
        self.task_list.set_tasks(shown)
        self.query_one("#list-header", Static).update(header_text(len(shown), total))

    def refresh_list(self, focus_task_id: str | None = None) -> None:
        """
        Reload the list.

        Args:
            focus_task_id: If provided, focus this task after refresh.
                           If None, keeps the cursor position.
        """
        self._pending_focus_id = focus_task_id
        self.load_tasks()
        # Rows are mounted after a refresh; focus once they exist
        self.call_after_refresh(self._schedule_pending_focus)

    def _schedule_pending_focus(self) -> None:
        self.call_after_refresh(self._apply_pending_focus)

    def _apply_pending_focus(self) -> None:
        task_list = self.task_list
        if self._pending_focus_id is not None:
            index = task_list.index_of(self._pending_focus_id)
            self._pending_focus_id = None
            if index is not None:
                self._current = index
                self._update_focus()
                return

        self._current = max(0, min(self._current, task_list.task_count - 1))
        self._update_focus()

    def set_view(self, view: DefaultView) -> None:
        """Switch the status tab and reset the cursor."""
        self._view = view
        self._current = 0
        self.query_one(ViewTabs).set_view(view)
        self.refresh_list()

    def set_filter(self, filter_: Filter | None, expression: str = "") -> None:
        """Set the active search filter."""
        self._filter = filter_
        self._current = 0
        status = self.query_one("#search-status", Static)
        status.update(CommandBar.status_text(expression.strip()))
        status.display = bool(expression.strip())

    def navigate_task(self, delta: int) -> None:
        """Move the cursor by ``delta`` rows, clamped to the list."""
        count = self.task_list.task_count
        if count == 0:
            return
        new_index = max(0, min(self._current + delta, count - 1))
        if new_index != self._current:
            self._current = new_index
            self._update_focus()

    def navigate_to_task(self, index: int) -> None:
        """Jump to a row (-1 for last)."""
        count = self.task_list.task_count
        if count == 0:
            return
        self._current = count - 1 if index < 0 else min(index, count - 1)
        self._update_focus()

    def _update_focus(self) -> None:
        self.task_list.focus_task(self._current)

    def get_current_task(self) -> Task | None:
        """Get the task under the cursor."""
        return self.task_list.get_task(self._current)

    @property
    def current_index(self) -> int:
        return self._current


def header_text(shown: int, total: int) -> str:
    return f"TTRAK - {shown}/{total} tasks"
