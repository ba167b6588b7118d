"""ttrak TUI application."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from functools import partial
from typing import TypeVar

from textual.app import App
from textual.binding import Binding
from textual.widgets import Input

from .config import Settings
from .models import DataStore, SyncReport, Task, TaskPriority, TaskStatus
from .models.ttrak_config import DefaultView
from .repositories import JsonTaskStore, TaskStoreProtocol
from .services import (
    ConfigService,
    FilterService,
    SetupService,
    TaskService,
    TaskValidationError,
)
from .sync import SyncEngine
from .ui.screens import SetupScreen, TaskListScreen
from .ui.theme import build_themes, theme_name
from .ui.widgets import CommandBar, ConfirmModal, TaskFormResult, TaskModal

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TtrakApp(App):
    """ttrak - terminal task tracker with GitHub and Linear sync."""

    TITLE = "ttrak"

    CSS_PATH = "ui/styles.tcss"

    BINDINGS = [
        # Core bindings
        Binding("q", "quit_list", "Quit", show=True),
        Binding("s", "setup", "Setup", show=True),
        Binding("r", "sync_now", "Sync", show=True),
        # Navigation - vim style
        Binding("j", "nav_down", "↓ Task", show=False),
        Binding("k", "nav_up", "↑ Task", show=False),
        Binding("down", "nav_down", "↓ Task", show=False),
        Binding("up", "nav_up", "↑ Task", show=False),
        # Jump navigation
        Binding("g", "nav_first", "First", show=False),
        Binding("G", "nav_last", "Last", show=False),
        Binding("home", "nav_first", "First", show=False),
        Binding("end", "nav_last", "Last", show=False),
        # Task actions
        Binding("n", "new_task", "New", show=True),
        Binding("e", "edit_task", "Edit", show=True),
        Binding("d", "delete_task", "Delete", show=True),
        Binding("space", "cycle_status", "Status", show=False),
        # View tabs
        Binding("1", "set_view('all')", "All", show=False),
        Binding("2", "set_view('todo')", "Todo", show=False),
        Binding("3", "set_view('inProgress')", "In Progress", show=False),
        Binding("4", "set_view('done')", "Done", show=False),
        # Search mode
        Binding("/", "enter_search", "Search", show=True),
        Binding("escape", "escape", "Back", show=False),
    ]

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        store: DataStore | None = None,
        config_service: ConfigService | None = None,
        repository: TaskStoreProtocol | None = None,
        sync_engine: SyncEngine | None = None,
        startup_report: SyncReport | None = None,
    ) -> None:
        super().__init__()
        self.settings = settings or Settings()
        self.startup_report = startup_report
        self._init_services(store, config_service, repository, sync_engine)

    def _init_services(
        self,
        store: DataStore | None,
        config_service: ConfigService | None,
        repository: TaskStoreProtocol | None,
        sync_engine: SyncEngine | None,
    ) -> None:
        """Initialize repository and services, reusing any passed in."""
        self.config_service = config_service or ConfigService(self.settings.config_dir)
        self.repository = repository or JsonTaskStore(self.settings.data_path)
        self.task_service = TaskService(self.repository, store)
        self.filter_service = FilterService()
        self.setup_service = SetupService(self.config_service)
        self.sync_engine = sync_engine or SyncEngine(self.config_service, self.repository)

    def on_mount(self) -> None:
        """Called when app is mounted."""
        config = self.config_service.get_config()

        for theme in build_themes():
            self.register_theme(theme)
        name = theme_name(config.theme)
        if name in self.available_themes:
            self.theme = name

        self.push_screen(TaskListScreen(config.default_view))

        if self.config_service.has_config_error:
            self.notify(self.config_service.config_error or "", severity="warning", timeout=5)
        if self.startup_report is not None:
            self.report_sync(self.startup_report)

    def _list_screen(self) -> TaskListScreen | None:
        screen = self.screen
        return screen if isinstance(screen, TaskListScreen) else None

    def _refresh_list(self, focus_task_id: str | None = None) -> None:
        screen = self._list_screen()
        if screen is not None:
            screen.refresh_list(focus_task_id=focus_task_id)

    # Navigation actions
    def action_nav_up(self) -> None:
        """Move the cursor to the previous task."""
        screen = self._list_screen()
        if screen is not None:
            screen.navigate_task(-1)

    def action_nav_down(self) -> None:
        """Move the cursor to the next task."""
        screen = self._list_screen()
        if screen is not None:
            screen.navigate_task(1)

    def action_nav_first(self) -> None:
        screen = self._list_screen()
        if screen is not None:
            screen.navigate_to_task(0)

    def action_nav_last(self) -> None:
        screen = self._list_screen()
        if screen is not None:
            screen.navigate_to_task(-1)

    def action_set_view(self, view: DefaultView) -> None:
        """Switch the status tab."""
        screen = self._list_screen()
        if screen is not None:
            screen.set_view(view)

    # Task actions
    def action_new_task(self) -> None:
        """Open the dialog for a new task."""
        if self._list_screen() is None:
            return
        self.push_screen(TaskModal(), callback=self._handle_new_task)

    def _handle_new_task(self, result: TaskFormResult | None) -> None:
        if result is not None:
            self.create_task(result.title, result.status, result.priority)

    def action_edit_task(self) -> None:
        """Open the dialog for the task under the cursor."""
        screen = self._list_screen()
        if screen is None:
            return

        task = screen.get_current_task()
        if task is None:
            return

        self.push_screen(  # pyrefly: ignore[no-matching-overload]
            TaskModal(task),
            callback=partial(self._handle_edit_task, task.id),
        )

    def _handle_edit_task(self, task_id: str, result: TaskFormResult | None) -> None:
        if result is not None:
            self.edit_task(task_id, result.title, result.status, result.priority)

    def action_delete_task(self) -> None:
        """Delete the task under the cursor (with confirmation)."""
        screen = self._list_screen()
        if screen is None:
            return

        task = screen.get_current_task()
        if task is None:
            return

        self.push_screen(  # pyrefly: ignore[no-matching-overload]
            ConfirmModal(f"Delete {task.id}?", task.title),
            callback=partial(self._handle_delete_confirm, task.id),
        )

    def _handle_delete_confirm(self, task_id: str, confirmed: bool | None) -> None:
        if confirmed:
            self.delete_task(task_id)

    def action_cycle_status(self) -> None:
        """Advance the status of the task under the cursor."""
        screen = self._list_screen()
        if screen is None:
            return

        task = screen.get_current_task()
        if task is not None:
            self.cycle_status(task.id)

    def action_quit_list(self) -> None:
        """Quit, unless a dialog or the setup screen is open."""
        if self._list_screen() is not None:
            self.exit()

    def action_setup(self) -> None:
        if self._list_screen() is not None:
            self.trigger_setup()

    def action_sync_now(self) -> None:
        """Sync every configured provider now, regardless of schedule."""
        if self._list_screen() is None:
            return
        if self.sync_engine.is_running:
            self.notify("Sync already running", timeout=2)
            return
        if not self.config_service.get_config().configured_providers:
            self.notify("No integrations configured. Press s to set up.", severity="warning")
            return
        self.run_worker(self.sync_now(), exclusive=True, group="sync")

    # View events: every task mutation goes through these
    def create_task(
        self, title: str, status: TaskStatus, priority: TaskPriority
    ) -> Task | None:
        task = self._persist(self.task_service.create_task, title, status, priority)
        if task is not None:
            self._refresh_list(focus_task_id=task.id)
            self.notify("Task created", timeout=2)
        return task

    def edit_task(
        self, task_id: str, title: str, status: TaskStatus, priority: TaskPriority
    ) -> Task | None:
        task = self._persist(self.task_service.edit_task, task_id, title, status, priority)
        if task is not None:
            self._refresh_list(focus_task_id=task.id)
            self.notify("Task updated", timeout=2)
        return task

    def delete_task(self, task_id: str) -> bool:
        deleted = bool(self._persist(self.task_service.delete_task, task_id))
        if deleted:
            self._refresh_list()
            self.notify("Task deleted", timeout=2)
        return deleted

    def cycle_status(self, task_id: str) -> Task | None:
        task = self._persist(self.task_service.cycle_status, task_id)
        if task is not None:
            # Focus follows the task unless the view tab hides it now
            self._refresh_list(focus_task_id=task.id)
            self.notify(f"Status: {task.status.value}", timeout=2)
        return task

    def trigger_setup(self) -> None:
        """Open the integration setup screen."""
        self.push_screen(SetupScreen(self.setup_service), callback=self._handle_setup_done)

    def _handle_setup_done(self, saved: bool | None) -> None:
        if not saved:
            return
        providers = self.config_service.get_config().configured_providers
        if providers:
            names = ", ".join(p.label for p in providers)
            self.notify(f"Integrations saved ({names}). Press r to sync.", timeout=4)
        else:
            self.notify("Integrations cleared", timeout=3)
        self._refresh_list()

    def _persist(self, operation: Callable[..., T], *args) -> T | None:
        """Run a task mutation, reporting rejected input and failed saves."""
        try:
            return operation(*args)
        except TaskValidationError as e:
            self.notify(str(e), severity="warning", timeout=3)
        except OSError as e:
            logger.error("Failed to save tasks: %s", e)
            self.notify(f"Failed to save: {e}", severity="error", timeout=5)
        return None

    # Sync
    async def sync_now(self) -> SyncReport | None:
        """Run a forced sync cycle against the live collection."""
        self.notify("Syncing...", timeout=1)
        try:
            report = await self.sync_engine.run(self.task_service.store, force=True)
        except OSError as e:
            logger.error("Failed to save sync results: %s", e)
            self.notify(f"Failed to save: {e}", severity="error", timeout=5)
            return None

        self.report_sync(report)
        self._refresh_list()
        return report

    def report_sync(self, report: SyncReport) -> None:
        """Show a sync cycle's outcome as notifications."""
        for failure in report.failures:
            message = str(failure)
            if failure.reset_at is not None:
                message += f" (resets at {failure.reset_at.astimezone():%H:%M})"
            self.notify(message, title="Sync failed", severity="error", timeout=8)

        if report.changed:
            self.notify(
                f"Synced: {len(report.added_ids)} new, {len(report.updated_ids)} updated",
                timeout=3,
            )
        elif report.succeeded and not report.has_errors:
            self.notify("Already up to date", timeout=2)

    # Search actions
    def action_enter_search(self) -> None:
        """Enter search mode."""
        screen = self._list_screen()
        if screen is None:
            return
        screen.query_one(CommandBar).enter_search_mode()

    def action_escape(self) -> None:
        """Exit search mode, or clear the active search."""
        screen = self._list_screen()
        if screen is None:
            return

        command_bar = screen.query_one(CommandBar)
        if command_bar.is_visible:
            command_bar.exit_search_mode()
            screen.refresh_list()
        elif command_bar.active_query:
            command_bar.clear_query()
            self._apply_search("")

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Handle search input submission."""
        if event.input.id != "search-input":
            return
        screen = self._list_screen()
        if screen is not None:
            command_bar = screen.query_one(CommandBar)
            command_bar.apply_query(event.value)
            command_bar.exit_search_mode()
            self._apply_search(event.value)

    def _apply_search(self, expression: str) -> None:
        """Apply a search expression to the list."""
        screen = self._list_screen()
        if screen is None:
            return

        if expression.strip():
            screen.set_filter(self.filter_service.parse(expression), expression)
        else:
            screen.set_filter(None, "")
        screen.refresh_list()


def run(settings: Settings | None = None) -> None:
    """Run the startup sync, then the ttrak application.

    The startup sync finishes before the app exists, so nothing else touches
    the collection while it runs.

    Raises:
        OSError: If the task collection or config could not be saved
    """
    settings = settings or Settings()
    config_service = ConfigService(settings.config_dir)
    repository = JsonTaskStore(settings.data_path)
    repository.ensure_directory()
    store = repository.load()

    sync_engine = SyncEngine(config_service, repository)
    startup_report: SyncReport | None = None
    if sync_engine.should_sync():
        startup_report = asyncio.run(sync_engine.run(store))

    app = TtrakApp(
        settings,
        store=store,
        config_service=config_service,
        repository=repository,
        sync_engine=sync_engine,
        startup_report=startup_report,
    )
    app.run()
