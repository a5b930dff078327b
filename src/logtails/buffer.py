"""Bounded ring buffer holding the tail of the stream."""

from __future__ import annotations

from collections import deque
from itertools import count
from typing import TYPE_CHECKING

from logtails.models import Line

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


class RingBuffer:
    """Fixed-capacity, arrival-ordered line store with oldest-first eviction."""

    def __init__(self, capacity: int) -> None:
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
            msg = f"Buffer capacity must be a positive integer, got {capacity!r}"
            raise ValueError(msg)
        self._capacity = capacity
        self._entries: deque[Line] = deque()
        self._ids = count(1)
        self._evicted = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def evicted(self) -> int:
        """Number of lines dropped from the head since creation."""
        return self._evicted

    def append(self, line: Line) -> RingBuffer:
        """Add a line at the tail, evicting exactly the oldest entry when full."""
        if len(self._entries) >= self._capacity:
            self._entries.popleft()
            self._evicted += 1
        self._entries.append(line)
        return self

    def ingest(self, text: str) -> Line:
        """Wrap text in a Line with the next id and append it."""
        line = Line(id=next(self._ids), text=text)
        self.append(line)
        return line

    def filter(self, predicate: Callable[[Line], bool]) -> list[Line]:
        """Return entries satisfying predicate, in arrival order."""
        return [line for line in self._entries if predicate(line)]

    def snapshot(self) -> tuple[Line, ...]:
        return tuple(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Line]:
        return iter(self._entries)
