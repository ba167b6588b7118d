"""Integration setup screen."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.markup import escape
from textual.screen import Screen
from textual.widgets import Input, Label, Static

from ...services import SetupError

if TYPE_CHECKING:
    from ...services import SetupService, ValidationResult

logger = logging.getLogger(__name__)


class SetupScreen(Screen[bool]):
    """Edit GitHub and Linear credentials.

    Enter on a credential field checks it against the provider; Esc saves
    and returns to the task list. Dismisses with True once saved.
    """

    DEFAULT_CSS = """
    SetupScreen {
        padding: 2;
    }

    SetupScreen .setup-title {
        color: $accent;
        text-style: bold;
        margin-bottom: 1;
    }

    SetupScreen .setup-description {
        color: $text-muted;
        margin-bottom: 2;
    }

    SetupScreen #setup-status {
        height: 1;
        margin-bottom: 1;
        color: $text-muted;
    }

    SetupScreen #setup-status.-valid {
        color: $success;
    }

    SetupScreen #setup-status.-invalid {
        color: $error;
    }

    SetupScreen .setup-field {
        height: auto;
        margin-bottom: 1;
    }

    SetupScreen Input {
        width: 72;
    }

    SetupScreen .setup-footer {
        color: $text-muted;
        margin-top: 2;
    }
    """

    BINDINGS = [
        Binding("escape", "save_and_exit", "Save & exit"),
    ]

    def __init__(self, setup_service: SetupService) -> None:
        super().__init__()
        self.setup_service = setup_service
        self._validating = False

    def compose(self) -> ComposeResult:
        github_token, github_repo, linear_key = self.setup_service.current_values()

        yield Static(" Integration Setup", classes="setup-title")
        yield Static(
            "Configure GitHub and Linear integrations. "
            "Press Tab to navigate, Esc to save and exit.",
            classes="setup-description",
        )
        yield Static("", id="setup-status")
        with Vertical(classes="setup-field"):
            yield Label("GitHub Token (github.com/settings/tokens):")
            yield Input(value=github_token, placeholder="ghp_...", password=True, id="github-token")
        with Vertical(classes="setup-field"):
            yield Label("GitHub Repository (owner/repo):")
            yield Input(value=github_repo, placeholder="owner/repo", id="github-repo")
        with Vertical(classes="setup-field"):
            yield Label("Linear API Key (linear.app/settings/api):")
            yield Input(value=linear_key, placeholder="lin_api_...", password=True, id="linear-key")
        yield Static(
            "tab:next  shift+tab:prev  enter:validate  esc:save&exit",
            classes="setup-footer",
        )

    def on_mount(self) -> None:
        self.query_one("#github-token", Input).focus()

    def on_input_changed(self, event: Input.Changed) -> None:
        if not self._validating:
            self.set_status("")

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        if self._validating:
            return
        if event.input.id == "github-token":
            self.run_worker(self.validate_github(event.value), exclusive=True)
        elif event.input.id == "linear-key":
            self.run_worker(self.validate_linear(event.value), exclusive=True)

    async def validate_github(self, token: str) -> None:
        self._validating = True
        self.set_status("Validating GitHub token...")
        try:
            result = await self.setup_service.validate_github(token)
        finally:
            self._validating = False
        self.show_result(result)

    async def validate_linear(self, api_key: str) -> None:
        self._validating = True
        self.set_status("Validating Linear token...")
        try:
            result = await self.setup_service.validate_linear(api_key)
        finally:
            self._validating = False
        self.show_result(result)

    def show_result(self, result: ValidationResult) -> None:
        self.set_status(result.message, valid=result.valid)

    def set_status(self, message: str, valid: bool | None = None) -> None:
        status = self.query_one("#setup-status", Static)
        status.update(escape(message))
        status.set_class(valid is True, "-valid")
        status.set_class(valid is False, "-invalid")

    def action_save_and_exit(self) -> None:
        if self._validating:
            return
        try:
            self.setup_service.save(
                self.query_one("#github-token", Input).value,
                self.query_one("#github-repo", Input).value,
                self.query_one("#linear-key", Input).value,
            )
        except SetupError as e:
            self.set_status(f"✗ {e}", valid=False)
            return
        except OSError as e:
            logger.error("Failed to save configuration: %s", e)
            self.set_status(f"✗ Failed to save configuration: {e}", valid=False)
            return
        self.dismiss(True)
