"""Scrollable live log display drawing highlighted spans."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from rich.cells import cell_len
from rich.segment import Segment
from textual.binding import Binding, BindingType
from textual.geometry import Size
from textual.scroll_view import ScrollView
from textual.strip import Strip

from logtails.colors import span_segments
from logtails.search import matches_query

if TYPE_CHECKING:
    from logtails.models import Line
    from logtails.session import TailSession

_TAB = "    "


class LogView(ScrollView, can_focus=True):
    """Virtual log viewer using the Line API; only visible rows are tokenized."""

    DEFAULT_CSS = """
    LogView {
        background: $surface;
        height: 1fr;
    }

    LogView > .logview--line-number {
        color: $text-disabled;
    }

    LogView > .logview--text {
        color: $text;
    }
    """

    COMPONENT_CLASSES: ClassVar[set[str]] = {
        "logview--line-number",
        "logview--text",
    }

    BINDINGS: ClassVar[list[BindingType]] = [
        Binding("pageup", "page_up", "Page Up", show=False),
        Binding("pagedown", "page_down", "Page Down", show=False),
        Binding("home", "scroll_home", "Home", show=False),
        Binding("end", "scroll_end", "End", show=False),
        Binding("G", "scroll_end", "Bottom", show=False),
        Binding("#", "toggle_line_numbers", "Lines#"),
    ]

    def __init__(self, session: TailSession, **kwargs: Any) -> None:  # noqa: ANN401
        super().__init__(**kwargs)
        self._session = session
        self._visible: list[Line] = []
        self._max_width: int = 0
        self._show_line_numbers: bool = True

    @property
    def lines(self) -> list[Line]:
        """Lines currently shown (buffer contents narrowed by the settled search)."""
        return self._visible

    @property
    def visible_count(self) -> int:
        return len(self._visible)

    def on_mount(self) -> None:
        self.refresh_lines()

    def refresh_lines(self) -> None:
        """Recompute the visible lines from the buffer and settled query."""
        follow = self._is_at_bottom()
        self._visible = self._session.visible_lines()
        self._max_width = max((self._line_width(line) for line in self._visible), default=0)
        self._update_virtual_size()
        self.refresh()
        if follow:
            self.call_after_refresh(self.scroll_end, animate=False)

    def append_line(self, line: Line) -> None:
        """Show a newly accepted line if it passes the settled query; auto-scrolls when at the bottom."""
        follow = self._is_at_bottom()
        self._trim_evicted()
        if matches_query(line, self._session.search.debounced_query):
            self._visible.append(line)
            self._max_width = max(self._max_width, self._line_width(line))
        self._update_virtual_size()
        self.refresh()
        if follow:
            self.scroll_end(animate=False)

    def _trim_evicted(self) -> None:
        """Drop lines from the head that the ring buffer has evicted."""
        oldest = next(iter(self._session.buffer), None)
        if oldest is None:
            self._visible.clear()
            return
        drop = 0
        while drop < len(self._visible) and self._visible[drop].id < oldest.id:
            drop += 1
        if drop:
            del self._visible[:drop]

    def _line_width(self, line: Line) -> int:
        return cell_len(line.text.replace("\t", _TAB)) + self._gutter_width

    @property
    def _gutter_width(self) -> int:
        return 8 if self._show_line_numbers else 0

    def _update_virtual_size(self) -> None:
        self.virtual_size = Size(self._max_width + 2, len(self._visible))

    def _is_at_bottom(self) -> bool:
        return self.scroll_offset.y >= self.max_scroll_y

    def render_line(self, y: int) -> Strip:
        scroll_x, scroll_y = self.scroll_offset
        index = scroll_y + y
        content_width = self.scrollable_content_region.width

        if content_width <= 0:
            return Strip.blank(self.size.width, self.rich_style)
        if index < 0 or index >= len(self._visible):
            return Strip.blank(content_width, self.rich_style)

        line = self._visible[index]
        text_style = self.get_component_rich_style("logview--text")

        segments: list[Segment] = []
        if self._show_line_numbers:
            lineno_style = self.get_component_rich_style("logview--line-number")
            segments.append(Segment(f"{line.id:>7} ", lineno_style))
        segments.extend(span_segments(self._session.render(line), text_style))

        strip = Strip(segments).crop(scroll_x, scroll_x + content_width)
        strip = strip.extend_cell_length(content_width)
        return strip.apply_style(self.rich_style)

    def action_toggle_line_numbers(self) -> None:
        self._show_line_numbers = not self._show_line_numbers
        self._max_width = max((self._line_width(line) for line in self._visible), default=0)
        self._update_virtual_size()
        self.refresh()
