"""Server-Sent Events client for the inbound log stream."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from collections.abc import AsyncIterable, AsyncIterator

logger = logging.getLogger(__name__)

_CONNECT_TIMEOUT = 10.0


class StreamError(RuntimeError):
    """Raised when the push stream fails or disconnects abnormally."""


async def iter_sse_data(lines: AsyncIterable[str]) -> AsyncIterator[str]:
    """Decode SSE framing into event payloads.

    Multiple ``data:`` fields in one event are joined with newlines; an event
    ends at a blank line. Comments and other fields are ignored.
    """
    data: list[str] | None = None
    async for line in lines:
        if line == "":
            if data is not None:
                yield "\n".join(data)
            data = None
            continue
        if line.startswith(":"):
            continue
        field, _, value = line.partition(":")
        if field != "data":
            continue
        value = value.removeprefix(" ")
        if data is None:
            data = []
        data.append(value)
    if data is not None:
        yield "\n".join(data)


async def sse_source(
    url: str,
    *,
    timeout: float | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AsyncIterator[str]:
    """Subscribe to an SSE endpoint and yield each event's data payload.

    Read timeout defaults to none, since a quiet log is not a failure.
    """
    headers = {"Accept": "text/event-stream", "Cache-Control": "no-cache"}
    try:
        async with (
            httpx.AsyncClient(timeout=httpx.Timeout(timeout, connect=_CONNECT_TIMEOUT), transport=transport) as client,
            client.stream("GET", url, headers=headers) as resp,
        ):
            if resp.status_code != 200:  # noqa: PLR2004
                msg = f"HTTP {resp.status_code} from {url}"
                raise StreamError(msg)
            logger.info("Subscribed to %s", url)
            async for payload in iter_sse_data(resp.aiter_lines()):
                yield payload
    except httpx.HTTPError as e:
        msg = f"Stream from {url} failed: {e}"
        raise StreamError(msg) from e
