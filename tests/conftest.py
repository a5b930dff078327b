"""Shared test fixtures."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from pathlib import Path

SAMPLE_LINES = [
    "2024-01-15 10:30:00 server starting on port 8080",
    "Connection established from 192.168.1.1",
    "Notification sent to admin",
    "warning: disk usage at 91%",
    "request failed with error 500",
    "\tindented continuation line",
    "",
    "plain text with nothing special",
]


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sample_log_file(tmp_path: Path) -> Path:
    """Create a temporary log file with sample content."""
    log_file = tmp_path / "test.log"
    log_file.write_text("\n".join(SAMPLE_LINES) + "\n")
    return log_file


@pytest.fixture
def sample_lines() -> list[str]:
    return list(SAMPLE_LINES)
