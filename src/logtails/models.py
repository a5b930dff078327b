"""Pydantic models for logtails."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

SEARCH_HIGHLIGHT = "search-highlight"
FORCE_SHUTDOWN = "!FORCE_SHUTDOWN!"


class Line(BaseModel):
    """A single ingested log line."""

    model_config = ConfigDict(frozen=True)

    id: int
    text: str


class Span(BaseModel):
    """A contiguous styled substring of a rendered line."""

    model_config = ConfigDict(frozen=True)

    id: str
    style_tag: str
    text: str


class GateState(StrEnum):
    """Admission gate state."""

    WARMING = "warming"
    OPEN = "open"
    CLOSED = "closed"


class DecisionKind(StrEnum):
    """Outcome of offering a message to the admission gate."""

    ACCEPT = "accept"
    DROP = "drop"
    TERMINATE = "terminate"


class Decision(BaseModel):
    """Admission gate verdict for one inbound message."""

    model_config = ConfigDict(frozen=True)

    kind: DecisionKind
    text: str | None = None

    @classmethod
    def accept(cls, text: str) -> Decision:
        return cls(kind=DecisionKind.ACCEPT, text=text)

    @classmethod
    def drop(cls) -> Decision:
        return _DROP

    @classmethod
    def terminate(cls) -> Decision:
        return _TERMINATE

    @property
    def accepted(self) -> bool:
        return self.kind == DecisionKind.ACCEPT


_DROP = Decision(kind=DecisionKind.DROP)
_TERMINATE = Decision(kind=DecisionKind.TERMINATE)


class SearchState(BaseModel):
    """Live and settled search query. Empty string means no filtering."""

    raw_query: str = ""
    debounced_query: str = ""


class RuleConfig(BaseModel):
    """A highlight rule as written in config.toml."""

    style_tag: str = ""
    pattern: str


class AppConfig(BaseModel):
    """Application configuration persisted to disk."""

    theme: str = "textual-dark"
    capacity: int = Field(default=40_000, gt=0)
    warmup_seconds: float = Field(default=0.01, ge=0)
    debounce_seconds: float = Field(default=1.0, ge=0)
    max_line_length: int = Field(default=16_384, gt=0)
    reconnect: bool = False
    reconnect_delay: float = Field(default=2.0, ge=0)
    sentinel: str = FORCE_SHUTDOWN
    rules: list[RuleConfig] = []


class StreamOutcome(StrEnum):
    """How a subscription ended."""

    ENDED = "ended"
    TAKEN_OVER = "taken-over"
