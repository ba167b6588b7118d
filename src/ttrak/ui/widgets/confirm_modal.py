"""Yes/no confirmation dialog."""

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.markup import escape
from textual.screen import ModalScreen
from textual.widgets import Label, Static


class ConfirmModal(ModalScreen[bool]):
    """Asks a yes/no question; dismisses with True only on "y"."""

    DEFAULT_CSS = """
    ConfirmModal {
        align: center middle;
    }

    ConfirmModal > Vertical {
        width: 60;
        height: auto;
        padding: 1 2;
        background: $surface;
        border: solid $error;
    }

    ConfirmModal .confirm-message {
        width: 100%;
        text-align: center;
    }

    ConfirmModal .confirm-detail {
        width: 100%;
        text-align: center;
        color: $text-muted;
        margin-bottom: 1;
    }

    ConfirmModal .confirm-hint {
        width: 100%;
        text-align: center;
        color: $text-muted;
    }
    """

    BINDINGS = [
        Binding("y", "confirm", "Yes"),
        Binding("n", "cancel", "No"),
        Binding("escape", "cancel", "Cancel"),
    ]

    def __init__(self, message: str, detail: str = "") -> None:
        super().__init__()
        self.message = message
        self.detail = detail

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Label(escape(self.message), classes="confirm-message")
            yield Static(escape(self.detail), classes="confirm-detail")
            yield Static("y:yes  n:no", classes="confirm-hint")

    def action_confirm(self) -> None:
        self.dismiss(True)

    def action_cancel(self) -> None:
        self.dismiss(False)
