"""Local log file reading (sync and async with tailing)."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import aiofiles

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterator
    from pathlib import Path

_POLL_INTERVAL = 0.1


def read_file(path: Path) -> Iterator[str]:
    """Yield the lines of a file without their trailing newline."""
    with path.open(encoding="utf-8", errors="replace") as f:
        for raw_line in f:
            yield raw_line.rstrip("\n")


async def read_file_async(path: Path, *, tail: bool = False, from_end: bool = False) -> AsyncIterator[str]:
    """Read lines from a file asynchronously, optionally following appended content.

    With from_end, existing content is skipped and only new lines are yielded.
    """
    async with aiofiles.open(path, encoding="utf-8", errors="replace") as f:
        if from_end:
            await f.seek(0, 2)
        else:
            async for raw_line in f:
                yield raw_line.rstrip("\n")

        if not tail:
            return

        # Tail mode: poll for new content
        last_size = path.stat().st_size
        pending = ""
        while True:
            chunk = await f.readline()
            if chunk:
                if not chunk.endswith("\n"):
                    # Partial write; wait for the rest of the line
                    pending += chunk
                    continue
                yield (pending + chunk).rstrip("\n")
                pending = ""
                continue
            try:
                current_size = path.stat().st_size
            except OSError:
                await asyncio.sleep(_POLL_INTERVAL * 2)
                continue
            if current_size < last_size:
                # File was truncated (log rotation), start over
                await f.seek(0)
                pending = ""
            last_size = current_size
            await asyncio.sleep(_POLL_INTERVAL)
