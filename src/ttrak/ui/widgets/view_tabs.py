"""Status view tabs (1-4)."""

from textual.widgets import Static

from ...models.ttrak_config import DefaultView
from ...services.filter_service import VIEWS

VIEW_LABELS: dict[DefaultView, str] = {
    "all": "All",
    "todo": "Todo",
    "inProgress": "In Progress",
    "done": "Done",
}


class ViewTabs(Static):
    """One line of tabs, the active view highlighted."""

    DEFAULT_CSS = """
    ViewTabs {
        height: 1;
        padding: 0 1;
        color: $text-muted;
    }
    """

    def __init__(self, view: DefaultView = "all", *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._view: DefaultView = view

    def on_mount(self) -> None:
        self.update(self.render_tabs())

    @property
    def view(self) -> DefaultView:
        return self._view

    def set_view(self, view: DefaultView) -> None:
        self._view = view
        self.update(self.render_tabs())

    def render_tabs(self) -> str:
        parts = []
        for number, view in enumerate(VIEWS, start=1):
            label = f"{number}:{VIEW_LABELS[view]}"
            if view == self._view:
                label = f"[bold $accent]{label}[/]"
            parts.append(label)
        return "  ".join(parts)
