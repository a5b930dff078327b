"""Style tag palette for highlighted spans."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.segment import Segment
from rich.style import Style

from logtails.models import SEARCH_HIGHLIGHT

if TYPE_CHECKING:
    from collections.abc import Iterable

    from logtails.models import Span

# Foreground colors per severity tag, plus the search overlay.
_TAG_STYLES: dict[str, Style] = {
    "info": Style(color="#3b82f6"),  # blue
    "notice": Style(color="#06b6d4"),  # cyan
    "success": Style(color="#22c55e"),  # green
    "notification": Style(color="#f59e0b"),  # amber
    "address": Style(color="#ec4899"),  # pink
    "warning": Style(color="#eab308"),  # yellow
    "error": Style(color="#ef4444"),  # red
    SEARCH_HIGHLIGHT: Style(bgcolor="#6e5600", color="#ffffff", bold=True),
}

_PLAIN = Style()


def tag_style(style_tag: str) -> Style:
    """Return the style for a tag. Unknown tags (including the catch-all "") render plain."""
    return _TAG_STYLES.get(style_tag, _PLAIN)


def span_segments(spans: Iterable[Span], base_style: Style = _PLAIN, *, tab: str = "    ") -> list[Segment]:
    """Convert spans to Segments for the Line API, expanding tabs for display."""
    return [Segment(span.text.replace("\t", tab), base_style + tag_style(span.style_tag)) for span in spans]
