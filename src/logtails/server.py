"""SSE broadcast server that tails a file for a single active viewer."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request
from fastapi.responses import StreamingResponse

from logtails.models import FORCE_SHUTDOWN
from logtails.reader import read_file_async

if TYPE_CHECKING:
    from collections.abc import AsyncIterator
    from pathlib import Path

logger = logging.getLogger(__name__)

_QUEUE_SIZE = 10_000
_KEEPALIVE_SECONDS = 15.0


class Broker:
    """Fan published lines out to subscribers, allowing one reader at a time.

    A new subscriber demotes every existing one: each is sent the sentinel
    and removed from the registry.
    """

    def __init__(self, sentinel: str = FORCE_SHUTDOWN, queue_size: int = _QUEUE_SIZE) -> None:
        self._sentinel = sentinel
        self._queue_size = queue_size
        self._subscribers: list[asyncio.Queue[str]] = []

    @property
    def sentinel(self) -> str:
        return self._sentinel

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self) -> asyncio.Queue[str]:
        for existing in self._subscribers:
            _force_put(existing, self._sentinel)
        if self._subscribers:
            logger.info("Demoted %d reader(s) for a new subscriber", len(self._subscribers))
        queue: asyncio.Queue[str] = asyncio.Queue(maxsize=self._queue_size)
        self._subscribers = [queue]
        logger.info("Client added. %d registered clients", len(self._subscribers))
        return queue

    def unsubscribe(self, queue: asyncio.Queue[str]) -> None:
        if queue in self._subscribers:
            self._subscribers.remove(queue)
            logger.info("Removed client. %d registered clients", len(self._subscribers))

    def publish(self, line: str) -> None:
        """Fan a log line out to the current reader. A line equal to the sentinel is never forwarded."""
        if line == self._sentinel:
            logger.warning("Skipping log line equal to the shutdown sentinel")
            return
        for queue in self._subscribers:
            try:
                queue.put_nowait(line)
            except asyncio.QueueFull:
                logger.warning("Subscriber queue full, dropping line")


def _force_put(queue: asyncio.Queue[str], item: str) -> None:
    """Enqueue item, discarding the oldest pending entry if the queue is full."""
    if queue.full():
        queue.get_nowait()
        logger.debug("Demoted subscriber queue full, dropped oldest pending line")
    queue.put_nowait(item)


def format_event(data: str) -> str:
    """Frame a payload as one SSE event, one data field per line."""
    return "".join(f"data: {part}\n" for part in data.split("\n")) + "\n"


async def _event_stream(request: Request, broker: Broker, queue: asyncio.Queue[str]) -> AsyncIterator[str]:
    try:
        while True:
            if await request.is_disconnected():
                break
            try:
                line = await asyncio.wait_for(queue.get(), timeout=_KEEPALIVE_SECONDS)
            except TimeoutError:
                yield ": keep-alive\n\n"
                continue
            yield format_event(line)
            if line == broker.sentinel:
                break
    except asyncio.CancelledError:
        return
    finally:
        broker.unsubscribe(queue)


async def _publish_file(path: Path, broker: Broker) -> None:
    async for line in read_file_async(path, tail=True, from_end=True):
        broker.publish(line)


def create_app(path: Path, broker: Broker | None = None) -> FastAPI:
    """Build the FastAPI app serving ``GET /sse`` for the tailed file."""
    broker = broker or Broker()

    @contextlib.asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        task = asyncio.create_task(_publish_file(path, broker))
        logger.info("Tailing %s", path)
        try:
            yield
        finally:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

    app = FastAPI(title="logtails", lifespan=lifespan)
    app.state.broker = broker

    @app.get("/sse")
    async def sse(request: Request) -> StreamingResponse:
        queue = broker.subscribe()
        return StreamingResponse(
            _event_stream(request, broker, queue),
            media_type="text/event-stream",
            headers={
                "Cache-Control": "no-cache",
                "Connection": "keep-alive",
                "Access-Control-Allow-Origin": "*",
                "X-Accel-Buffering": "no",
            },
        )

    return app


def run_server(path: Path, host: str = "0.0.0.0", port: int = 8080) -> None:  # noqa: S104
    """Serve the tail of path over SSE until interrupted."""
    import uvicorn  # noqa: PLC0415

    uvicorn.run(create_app(path), host=host, port=port, log_level="info")
