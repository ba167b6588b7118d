"""Scrollable task list widget."""

from textual.actions import SkipAction
from textual.app import ComposeResult
from textual.containers import VerticalScroll
from textual.widget import Widget
from textual.widgets import Static

from ...models import Task
from .task_row import TaskRow


def _row_css_id(index: int) -> str:
    # Keyed by position: display ids are not unique across Linear teams
    return f"task-row-{index}"


class TaskListScroll(VerticalScroll):
    """Scroll container for task rows.

    Raises SkipAction for navigation keys so they bubble up to the App
    for task navigation instead of being handled as scroll actions.
    """

    def action_scroll_up(self) -> None:
        raise SkipAction()

    def action_scroll_down(self) -> None:
        raise SkipAction()

    def action_scroll_home(self) -> None:
        raise SkipAction()

    def action_scroll_end(self) -> None:
        raise SkipAction()


class EmptyListMessage(Static):
    """Displayed when no task matches the view and filter."""

    pass


class TaskList(Widget):
    """The list of visible tasks, one TaskRow each."""

    DEFAULT_CSS = """
    TaskList {
        height: 1fr;
    }

    TaskList EmptyListMessage {
        color: $text-muted;
        padding: 1 2;
    }
    """

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._tasks: list[Task] = []

    def compose(self) -> ComposeResult:
        yield TaskListScroll(id="task-list-content")

    def set_tasks(self, tasks: list[Task]) -> None:
        """Replace the displayed tasks."""
        self._tasks = tasks
        # DOM may not be ready yet
        self.call_after_refresh(self._refresh_rows)

    async def _refresh_rows(self) -> None:
        content = self.query_one("#task-list-content", TaskListScroll)
        await content.remove_children()

        if not self._tasks:
            await content.mount(EmptyListMessage("No tasks"))
            return

        await content.mount_all(
            TaskRow(task, id=_row_css_id(i)) for i, task in enumerate(self._tasks)
        )

    @property
    def tasks(self) -> list[Task]:
        return self._tasks

    @property
    def task_count(self) -> int:
        return len(self._tasks)

    def index_of(self, task_id: str) -> int | None:
        """Position of a task in the displayed list."""
        for i, task in enumerate(self._tasks):
            if task.id == task_id:
                return i
        return None

    def focus_task(self, index: int) -> bool:
        """
        Focus the row at the given index.

        Returns:
            True if a row was focused, False otherwise
        """
        if not 0 <= index < len(self._tasks):
            return False

        rows = self.query(f"#{_row_css_id(index)}")
        if not rows:
            return False
        row = rows.first(TaskRow)
        row.focus()
        row.scroll_visible()
        return True

    def get_task(self, index: int) -> Task | None:
        """Get task at index."""
        if 0 <= index < len(self._tasks):
            return self._tasks[index]
        return None
