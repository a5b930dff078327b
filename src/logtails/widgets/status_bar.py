"""Bottom status bar."""

from __future__ import annotations

from rich.text import Text
from textual.widget import Widget

from logtails.models import GateState

_MILLION = 1_000_000
_TEN_THOUSAND = 10_000
_THOUSAND = 1_000

_GATE_BADGES: dict[GateState, tuple[str, str]] = {
    GateState.WARMING: (" WARMING ", "bold reverse yellow"),
    GateState.OPEN: (" LIVE ", "bold reverse green"),
    GateState.CLOSED: (" CLOSED ", "bold reverse red"),
}


def _format_count(n: int) -> str:
    """Format a line count compactly: 1234 -> '1,234', 1234567 -> '1.2M'."""
    if n >= _MILLION:
        return f"{n / _MILLION:.1f}M"
    if n >= _TEN_THOUSAND:
        return f"{n / _THOUSAND:.0f}K"
    return f"{n:,}"


class StatusBar(Widget):
    """Bottom status bar showing stream state, line counts, search, and source."""

    DEFAULT_CSS = """
    StatusBar {
        height: 1;
        background: $primary;
        color: $text;
        padding: 0 1;
    }
    """

    def __init__(self, source: str = "", id: str | None = None) -> None:  # noqa: A002
        super().__init__(id=id)
        self._source = source
        self._gate: GateState | None = None
        self._taken_over: bool = False
        self._paused: bool = False
        self._total: int = 0
        self._visible: int | None = None
        self._capacity: int = 0
        self._evicted: int = 0
        self._query: str = ""
        self._new_lines: int = 0

    def set_gate(self, state: GateState | None, *, taken_over: bool = False) -> None:
        """Set the admission gate indicator."""
        self._gate = state
        self._taken_over = taken_over
        self.refresh()

    def set_paused(self, *, paused: bool) -> None:
        self._paused = paused
        self.refresh()

    def update_counts(self, total: int, capacity: int, evicted: int, visible: int | None = None) -> None:
        """Update the line counts."""
        self._total = total
        self._capacity = capacity
        self._evicted = evicted
        self._visible = visible
        self.refresh()

    def set_query(self, query: str) -> None:
        """Show the settled search query."""
        self._query = query
        self.refresh()

    def set_new_lines(self, count: int) -> None:
        """Set new lines indicator (while paused)."""
        self._new_lines = count
        self.refresh()

    def render(self) -> Text:
        text = Text()

        if self._taken_over:
            text.append(" TAKEN OVER ", style="bold reverse magenta")
            text.append(" ")
        elif self._gate is not None:
            label, style = _GATE_BADGES[self._gate]
            text.append(label, style=style)
            text.append(" ")

        if self._paused:
            text.append(" PAUSED ", style="bold reverse")
            text.append(" ")

        total = _format_count(self._total)
        if self._visible is not None:
            text.append(f"{_format_count(self._visible)} of {total} lines")
        else:
            text.append(f"{total} lines")

        if self._capacity and self._total >= self._capacity:
            text.append(f"  (cap {_format_count(self._capacity)}, {_format_count(self._evicted)} dropped)")

        if self._new_lines > 0:
            text.append(f"  +{self._new_lines} new", style="bold")

        if self._query:
            text.append(f"  search: {self._query!r}", style="bold italic")

        right_part = self._source
        if right_part:
            used = len(text.plain)
            padding = max(1, self.size.width - used - len(right_part))
            text.append(" " * padding)
            text.append(right_part)

        return text
