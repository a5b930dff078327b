"""Tests for span styling."""

from __future__ import annotations

from rich.style import Style

from logtails.colors import span_segments, tag_style
from logtails.models import SEARCH_HIGHLIGHT, Span


class TestColors:
    def test_known_tags_styled(self) -> None:
        for tag in ["info", "notice", "success", "notification", "address", "warning", "error"]:
            assert tag_style(tag).color is not None

    def test_catch_all_and_unknown_plain(self) -> None:
        assert tag_style("") == Style()
        assert tag_style("no-such-tag") == Style()

    def test_search_highlight_has_background(self) -> None:
        assert tag_style(SEARCH_HIGHLIGHT).bgcolor is not None

    def test_segments_expand_tabs(self) -> None:
        spans = [Span(id="a", style_tag="error", text="bad\tthing"), Span(id="b", style_tag="", text=" ok")]
        segments = span_segments(spans)
        assert [seg.text for seg in segments] == ["bad    thing", " ok"]
        assert segments[0].style == tag_style("error")

    def test_base_style_combined(self) -> None:
        segments = span_segments([Span(id="a", style_tag="error", text="x")], Style(italic=True))
        assert segments[0].style is not None
        assert segments[0].style.italic
        assert segments[0].style.color == tag_style("error").color
