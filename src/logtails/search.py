"""Debounced search query and the filtered view it derives."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from logtails.highlight import build_spans, search_pattern
from logtails.models import SearchState

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from logtails.models import Line, Span
    from logtails.rules import RuleSet


def matches_query(line: Line, query: str) -> bool:
    """Check if a line contains query, compared case-insensitively."""
    matcher = search_pattern(query)
    return matcher is None or matcher.search(line.text) is not None


class SearchController:
    """Hold the live query and the settled value used for filtering and highlighting.

    ``set_query`` restarts a quiet period; ``settle`` promotes the live query
    only once that period has passed without another ``set_query``.
    """

    def __init__(self, delay: float, *, clock: Callable[[], float] = time.monotonic) -> None:
        self._delay = delay
        self._clock = clock
        self._raw = ""
        self._debounced = ""
        self._settle_at: float | None = None

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def raw_query(self) -> str:
        return self._raw

    @property
    def debounced_query(self) -> str:
        return self._debounced

    @property
    def pending(self) -> bool:
        return self._settle_at is not None

    @property
    def state(self) -> SearchState:
        return SearchState(raw_query=self._raw, debounced_query=self._debounced)

    def set_query(self, raw: str) -> None:
        self._raw = raw
        self._settle_at = self._clock() + self._delay

    def settle(self) -> bool:
        """Apply the live query if the quiet period elapsed. Returns True if the settled value changed."""
        if self._settle_at is None or self._clock() < self._settle_at:
            return False
        self._settle_at = None
        changed = self._debounced != self._raw
        self._debounced = self._raw
        return changed

    def remaining(self) -> float:
        """Seconds left in the pending quiet period (0 when none is pending)."""
        if self._settle_at is None:
            return 0.0
        return max(0.0, self._settle_at - self._clock())

    def cancel(self) -> None:
        """Forget any pending quiet period."""
        self._settle_at = None

    def visible_lines(self, lines: Iterable[Line]) -> list[Line]:
        """Return lines containing the settled query, or all lines when it is empty."""
        query = self._debounced
        if not query:
            return list(lines)
        return [line for line in lines if matches_query(line, query)]

    def spans_for(self, line: Line, rule_set: RuleSet) -> list[Span]:
        return build_spans(line.text, rule_set, self._debounced)
