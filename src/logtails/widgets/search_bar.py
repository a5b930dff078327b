"""Top search input bar."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from textual.binding import Binding
from textual.containers import Horizontal
from textual.widgets import Input, Label

if TYPE_CHECKING:
    from textual.app import ComposeResult
    from textual.binding import BindingType


class SearchBar(Horizontal):
    """Search box; typing restarts the debounce, the settled value filters and highlights."""

    DEFAULT_CSS = """
    SearchBar {
        height: 3;
        padding: 0 1;
        background: $surface;
    }

    SearchBar > Label {
        width: auto;
        padding: 1 1 0 0;
        color: $text-muted;
    }

    SearchBar > Input {
        width: 1fr;
    }
    """

    BINDINGS: ClassVar[list[BindingType]] = [
        Binding("escape", "clear", "Clear", show=False),
    ]

    def __init__(self, value: str = "", id: str | None = None) -> None:  # noqa: A002
        super().__init__(id=id)
        self._initial = value

    def compose(self) -> ComposeResult:
        yield Label("Search")
        yield Input(value=self._initial, placeholder="Search...", id="search-input")

    @property
    def input(self) -> Input:
        return self.query_one("#search-input", Input)

    def action_clear(self) -> None:
        """Clear the query and hand focus back to the log."""
        self.input.value = ""
        self.screen.focus_next()
