"""Single-reader admission gate for the inbound stream."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from logtails.models import FORCE_SHUTDOWN, Decision, GateState

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


class AdmissionGate:
    """Decide whether each inbound message is accepted, dropped, or ends the stream.

    The gate starts WARMING and drops everything until the warm-up interval
    has elapsed, which keeps a connect-time backlog burst out of the buffer.
    Receiving the sentinel (or a transport failure) closes it for good.
    """

    def __init__(
        self,
        warmup: float,
        *,
        sentinel: str = FORCE_SHUTDOWN,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if warmup < 0:
            msg = f"Warm-up must not be negative, got {warmup!r}"
            raise ValueError(msg)
        self._clock = clock
        self._sentinel = sentinel
        self._warmup = warmup
        self._opens_at = clock() + warmup
        self._state = GateState.WARMING
        self._failure: BaseException | None = None

    @property
    def state(self) -> GateState:
        return self._state

    @property
    def warmup(self) -> float:
        return self._warmup

    @property
    def opens_at(self) -> float:
        """Monotonic deadline after which the gate opens."""
        return self._opens_at

    @property
    def is_closed(self) -> bool:
        return self._state == GateState.CLOSED

    @property
    def failure(self) -> BaseException | None:
        return self._failure

    def on_tick(self) -> None:
        """Warm-up timer callback."""
        if self._state == GateState.WARMING:
            self._state = GateState.OPEN
            logger.debug("Admission gate open")

    def on_message(self, raw: str) -> Decision:
        if self._state == GateState.CLOSED:
            return Decision.terminate()

        if raw == self._sentinel:
            self._state = GateState.CLOSED
            logger.info("Shutdown sentinel received, another reader took over")
            return Decision.terminate()

        if self._state == GateState.WARMING:
            if self._clock() < self._opens_at:
                return Decision.drop()
            self.on_tick()

        if raw == "":
            return Decision.drop()

        return Decision.accept(raw)

    def on_failure(self, exc: BaseException) -> None:
        """Close the gate after a transport failure."""
        if self._state != GateState.CLOSED:
            logger.warning("Stream failed, closing admission gate: %s", exc)
        self._failure = exc
        self._state = GateState.CLOSED

    def close(self) -> None:
        self._state = GateState.CLOSED

    def __repr__(self) -> str:
        return f"AdmissionGate(state={self._state.value!r}, opens_at={self._opens_at!r})"
