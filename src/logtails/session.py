"""Tailing session: admission gate, ring buffer, and search threaded together."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING

import httpx

from logtails.buffer import RingBuffer
from logtails.export import export_text
from logtails.gate import AdmissionGate
from logtails.models import AppConfig, Decision, DecisionKind, GateState, StreamOutcome
from logtails.rules import DEFAULT_RULES
from logtails.search import SearchController
from logtails.stream import StreamError

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable

    from logtails.models import Line, Span
    from logtails.rules import RuleSet

logger = logging.getLogger(__name__)

_TRANSPORT_ERRORS = (StreamError, httpx.HTTPError, OSError)


class SessionClosedError(RuntimeError):
    """Raised when resubscribing after a takeover or a local close."""


class TailSession:
    """Single owner of the buffer, search state and the current subscription's gate.

    All mutation happens from the stream consumer and timer callbacks on one
    event loop, so no locking is needed.
    """

    def __init__(
        self,
        config: AppConfig | None = None,
        rule_set: RuleSet | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config or AppConfig()
        self.rule_set = rule_set or DEFAULT_RULES
        self._clock = clock
        self.buffer = RingBuffer(self.config.capacity)
        self.search = SearchController(self.config.debounce_seconds, clock=clock)
        self._gate: AdmissionGate | None = None
        self._warmup_handle: asyncio.TimerHandle | None = None
        self._terminated_by_peer = False
        self._closed = False

    @property
    def gate(self) -> AdmissionGate | None:
        return self._gate

    @property
    def gate_state(self) -> GateState | None:
        return self._gate.state if self._gate is not None else None

    @property
    def terminated_by_peer(self) -> bool:
        """True once the server sent the shutdown sentinel."""
        return self._terminated_by_peer

    @property
    def closed(self) -> bool:
        """True once close() was called; the session never subscribes again."""
        return self._closed

    def start_gate(self) -> AdmissionGate:
        """Create a fresh gate for a new subscription."""
        if self._terminated_by_peer:
            msg = "Stream was taken over by another reader; not resubscribing"
            raise SessionClosedError(msg)
        if self._closed:
            msg = "Session is closed; not resubscribing"
            raise SessionClosedError(msg)
        self._cancel_warmup()
        self._gate = AdmissionGate(self.config.warmup_seconds, sentinel=self.config.sentinel, clock=self._clock)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop: the gate opens from its own deadline check
            pass
        else:
            self._warmup_handle = loop.call_later(self.config.warmup_seconds, self._gate.on_tick)
        return self._gate

    def feed(self, raw: str) -> Decision:
        """Offer one inbound message; accepted lines enter the buffer."""
        decision, _ = self._admit(raw)
        return decision

    def _admit(self, raw: str) -> tuple[Decision, Line | None]:
        gate = self._gate or self.start_gate()
        was_closed = gate.is_closed
        decision = gate.on_message(raw)
        line: Line | None = None
        if decision.kind == DecisionKind.ACCEPT and decision.text is not None:
            line = self.buffer.ingest(decision.text[: self.config.max_line_length])
        elif decision.kind == DecisionKind.TERMINATE and not was_closed:
            self._terminated_by_peer = True
            self._cancel_warmup()
        return decision, line

    def fail(self, exc: BaseException) -> None:
        if self._gate is not None:
            self._gate.on_failure(exc)
        self._cancel_warmup()

    def close(self) -> None:
        """Stop the subscription for good and cancel pending timers."""
        self._closed = True
        if self._gate is not None:
            self._gate.close()
        self._cancel_warmup()
        self.search.cancel()

    def _cancel_warmup(self) -> None:
        if self._warmup_handle is not None:
            self._warmup_handle.cancel()
            self._warmup_handle = None

    def visible_lines(self) -> list[Line]:
        return self.search.visible_lines(self.buffer)

    def render(self, line: Line) -> list[Span]:
        return self.search.spans_for(line, self.rule_set)

    def export_text(self) -> str:
        return export_text(self.buffer)

    async def consume(
        self,
        source: AsyncIterator[str],
        *,
        on_accept: Callable[[Line], None] | None = None,
    ) -> StreamOutcome:
        """Feed a subscription's messages through the gate until it ends.

        Returns TAKEN_OVER when the sentinel arrives and ENDED when the source
        is exhausted. Transport failures close the gate and raise StreamError.
        """
        self.start_gate()
        try:
            async for raw in source:
                decision, line = self._admit(raw)
                if decision.kind == DecisionKind.TERMINATE:
                    return StreamOutcome.TAKEN_OVER if self._terminated_by_peer else StreamOutcome.ENDED
                if line is not None and on_accept is not None:
                    on_accept(line)
        except _TRANSPORT_ERRORS as e:
            self.fail(e)
            if isinstance(e, StreamError):
                raise
            msg = f"Stream subscription failed: {e}"
            raise StreamError(msg) from e
        finally:
            await _aclose(source)
        self._cancel_warmup()
        return StreamOutcome.ENDED

    async def follow(
        self,
        source_factory: Callable[[], AsyncIterator[str]],
        *,
        on_accept: Callable[[Line], None] | None = None,
        on_retry: Callable[[StreamError | None], None] | None = None,
    ) -> StreamOutcome:
        """Consume subscriptions, resubscribing only if reconnect is configured.

        A sentinel or a local close() ends following for good regardless of
        configuration.
        """
        while True:
            if self._closed:
                return StreamOutcome.ENDED
            error: StreamError | None = None
            try:
                outcome = await self.consume(source_factory(), on_accept=on_accept)
            except StreamError as e:
                if not self.config.reconnect and not self._closed:
                    raise
                error = e
            else:
                if outcome == StreamOutcome.TAKEN_OVER or not self.config.reconnect:
                    return outcome
            if self._closed:
                return StreamOutcome.ENDED
            logger.info("Resubscribing in %.1fs", self.config.reconnect_delay)
            if on_retry is not None:
                on_retry(error)
            await asyncio.sleep(self.config.reconnect_delay)


async def _aclose(source: AsyncIterator[str]) -> None:
    aclose = getattr(source, "aclose", None)
    if aclose is not None:
        await aclose()
