"""Tests for the admission gate."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from logtails.gate import AdmissionGate
from logtails.models import FORCE_SHUTDOWN, Decision, DecisionKind, GateState

if TYPE_CHECKING:
    from tests.conftest import FakeClock


class TestWarmup:
    def test_starts_warming(self, clock: FakeClock) -> None:
        gate = AdmissionGate(10, clock=clock)
        assert gate.state == GateState.WARMING
        assert gate.opens_at == 10

    def test_drops_during_warmup_accepts_after(self, clock: FakeClock) -> None:
        gate = AdmissionGate(10, clock=clock)
        clock.now = 2
        assert gate.on_message("hello").kind == DecisionKind.DROP
        clock.now = 11
        assert gate.on_message("hello") == Decision.accept("hello")
        assert gate.state == GateState.OPEN

    def test_tick_opens(self, clock: FakeClock) -> None:
        gate = AdmissionGate(10, clock=clock)
        gate.on_tick()
        assert gate.state == GateState.OPEN
        assert gate.on_message("x").accepted

    def test_zero_warmup_opens_on_first_message(self, clock: FakeClock) -> None:
        gate = AdmissionGate(0, clock=clock)
        assert gate.on_message("x").accepted

    def test_negative_warmup_rejected(self) -> None:
        with pytest.raises(ValueError, match="negative"):
            AdmissionGate(-1)


class TestOpen:
    def test_empty_message_dropped(self, clock: FakeClock) -> None:
        gate = AdmissionGate(0, clock=clock)
        assert gate.on_message("").kind == DecisionKind.DROP
        assert gate.state == GateState.OPEN

    def test_accept_carries_text(self, clock: FakeClock) -> None:
        gate = AdmissionGate(0, clock=clock)
        decision = gate.on_message("line one")
        assert decision.kind == DecisionKind.ACCEPT
        assert decision.text == "line one"


class TestTermination:
    @pytest.mark.parametrize("opened", [False, True])
    def test_sentinel_closes_for_good(self, clock: FakeClock, opened: bool) -> None:  # noqa: FBT001
        gate = AdmissionGate(10, clock=clock)
        if opened:
            gate.on_tick()
        assert gate.on_message(FORCE_SHUTDOWN).kind == DecisionKind.TERMINATE
        assert gate.is_closed
        clock.advance(100)
        for raw in ["after", "", FORCE_SHUTDOWN]:
            assert gate.on_message(raw).kind == DecisionKind.TERMINATE

    def test_tick_after_close_is_noop(self, clock: FakeClock) -> None:
        gate = AdmissionGate(10, clock=clock)
        gate.on_message(FORCE_SHUTDOWN)
        gate.on_tick()
        assert gate.state == GateState.CLOSED

    def test_custom_sentinel(self, clock: FakeClock) -> None:
        gate = AdmissionGate(0, sentinel="BYE", clock=clock)
        assert gate.on_message(FORCE_SHUTDOWN).accepted
        assert gate.on_message("BYE").kind == DecisionKind.TERMINATE

    def test_failure_closes(self, clock: FakeClock) -> None:
        gate = AdmissionGate(0, clock=clock)
        error = OSError("connection reset")
        gate.on_failure(error)
        assert gate.is_closed
        assert gate.failure is error
        assert gate.on_message("x").kind == DecisionKind.TERMINATE

    def test_close(self, clock: FakeClock) -> None:
        gate = AdmissionGate(0, clock=clock)
        gate.close()
        assert gate.on_message("x").kind == DecisionKind.TERMINATE
