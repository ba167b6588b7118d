"""Search bar widget."""

from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.markup import escape
from textual.widget import Widget
from textual.widgets import Input, Static


class CommandBar(Widget):
    """Search input docked at the bottom, shown while typing a query."""

    DEFAULT_CSS = """
    CommandBar {
        height: 1;
        dock: bottom;
        background: $surface;
        display: none;
        layer: command;
    }

    CommandBar.-visible {
        display: block;
    }

    CommandBar .mode-indicator {
        width: auto;
        padding: 0 1;
        background: $primary;
        color: $background;
    }

    CommandBar .search-input {
        width: 1fr;
        border: none;
        height: 1;
        padding: 0 1;
        background: $surface;
    }

    CommandBar .search-input:focus {
        border: none;
    }
    """

    def __init__(self) -> None:
        super().__init__()
        self._active_query: str = ""

    def compose(self) -> ComposeResult:
        with Horizontal():
            yield Static("/", classes="mode-indicator")
            yield Input(
                placeholder="text status:todo priority:high source:github tag:bug",
                id="search-input",
                classes="search-input",
            )

    def enter_search_mode(self) -> None:
        """Show the bar and focus the input, prefilled with the active query."""
        self.add_class("-visible")
        input_widget = self.query_one("#search-input", Input)
        input_widget.value = self._active_query
        input_widget.focus()

    def exit_search_mode(self) -> None:
        """Hide the bar without changing the active query."""
        self.remove_class("-visible")

    def apply_query(self, expression: str) -> None:
        self._active_query = expression.strip()

    def clear_query(self) -> None:
        self._active_query = ""
        self.query_one("#search-input", Input).value = ""

    @property
    def active_query(self) -> str:
        return self._active_query

    @property
    def is_visible(self) -> bool:
        return self.has_class("-visible")

    @staticmethod
    def status_text(expression: str) -> str:
        """Status line text for an active query."""
        if not expression:
            return ""
        return f"[dim]Search:[/] {escape(expression)} [dim](Esc to clear)[/]"
