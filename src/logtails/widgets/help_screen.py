"""Help screen listing key bindings and stream behavior."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from rich.table import Table
from rich.text import Text
from textual.containers import VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Static
from typing_extensions import override

if TYPE_CHECKING:
    from textual.app import ComposeResult
    from textual.binding import BindingType

HELP_SECTIONS: tuple[tuple[str, tuple[tuple[str, str], ...]], ...] = (
    (
        "Navigation",
        (
            ("PgUp/PgDn", "Page up/down"),
            ("Home/End", "Jump to first/last line"),
            ("G", "Jump to last line and follow new lines"),
            ("#", "Toggle line numbers"),
        ),
    ),
    (
        "Search",
        (
            ("/", "Focus the search box"),
            ("Escape", "Clear search and return to the log"),
        ),
    ),
    (
        "Stream",
        (
            ("p", "Pause/resume the view (lines keep buffering)"),
            ("y", "Copy all retained lines to the clipboard"),
            ("o", "Save retained lines to a file"),
        ),
    ),
    (
        "General",
        (
            ("h", "Show this help"),
            ("q", "Quit"),
        ),
    ),
)

HELP_NOTES = (
    "Search filters to lines containing the query (case-insensitive) and "
    "highlights every occurrence once typing pauses.\n"
    "Lines arriving during the connect warm-up are skipped. Only one viewer "
    "may read a served stream: when another connects, this one stops."
)


def help_table() -> Table:
    """Render HELP_SECTIONS as a two-column grid."""
    table = Table.grid(padding=(0, 3))
    table.add_column(style="bold cyan", no_wrap=True)
    table.add_column()
    for index, (title, keys) in enumerate(HELP_SECTIONS):
        if index:
            table.add_row("", "")
        table.add_row(Text(title, style="bold"), "")
        for key, description in keys:
            table.add_row(f"  {key}", description)
    return table


class HelpScreen(ModalScreen[None]):
    """Modal key reference; any of escape, h or q closes it."""

    DEFAULT_CSS = """
    HelpScreen {
        align: center middle;
    }

    HelpScreen > VerticalScroll {
        width: 70;
        height: auto;
        max-height: 90%;
        background: $surface;
        border: tall $accent;
        padding: 1 2;
    }

    HelpScreen .help-notes {
        margin-top: 1;
        color: $text-muted;
    }
    """

    BINDINGS: ClassVar[list[BindingType]] = [
        ("escape", "close", "Close"),
        ("h", "close", "Close"),
        ("q", "close", "Close"),
    ]

    @override
    def compose(self) -> ComposeResult:
        with VerticalScroll():
            yield Static(help_table())
            yield Static(HELP_NOTES, classes="help-notes")

    def action_close(self) -> None:
        self.dismiss(None)
