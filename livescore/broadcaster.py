"""Fan-out of match snapshots to Server-Sent Events subscribers.

Each subscriber owns a bounded ``asyncio.Queue`` of ready-to-send SSE
frames. ``publish`` serializes the snapshot once and drops the same frame
into every queue without awaiting, so it can be called straight from a
store mutation running on the event loop.
"""
from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, AsyncIterator, Callable, List, Set

logger = logging.getLogger(__name__)

KEEPALIVE_FRAME = ": ping\n\n"


def format_event(snapshot: List[Any]) -> str:
    # SSE requires lines starting with 'data: '
    return f"data: {json.dumps(snapshot)}\n\n"


class Broadcaster:
    def __init__(self, queue_size: int = 16, keepalive: float = 30.0) -> None:
        self.queue_size = queue_size
        self.keepalive = keepalive
        self._subscribers: Set[asyncio.Queue] = set()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self, snapshot: List[Any]) -> asyncio.Queue:
        """Register a new subscriber and queue the current snapshot for it."""
        queue: asyncio.Queue = asyncio.Queue(maxsize=self.queue_size)
        queue.put_nowait(format_event(snapshot))
        self._subscribers.add(queue)
        logger.info("SSE client connected (%d active)", len(self._subscribers))
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        if queue in self._subscribers:
            self._subscribers.discard(queue)
            logger.info("SSE client disconnected (%d active)", len(self._subscribers))

    def publish(self, snapshot: List[Any]) -> int:
        """Queue `snapshot` for every subscriber; returns how many got it."""
        frame = format_event(snapshot)
        delivered = 0
        for queue in list(self._subscribers):
            if queue.full():
                # newest snapshot supersedes anything still waiting
                try:
                    queue.get_nowait()
                except asyncio.QueueEmpty:
                    pass
                logger.warning("SSE client queue full, dropped oldest frame")
            queue.put_nowait(frame)
            delivered += 1
        logger.debug("broadcast %d matches to %d clients", len(snapshot), delivered)
        return delivered

    async def stream(self, current: Callable[[], List[Any]]) -> AsyncIterator[str]:
        """Subscribe and yield SSE frames until the consumer goes away.

        Registration happens on first iteration with the snapshot returned by
        `current`, so a response that is never iterated leaves no subscriber
        behind.

        A comment frame is emitted whenever nothing arrived within the
        keep-alive interval. The subscriber is removed when the generator is
        closed or cancelled.
        """
        queue = self.subscribe(current())
        try:
            while True:
                try:
                    frame = await asyncio.wait_for(queue.get(), timeout=self.keepalive)
                except asyncio.TimeoutError:
                    yield KEEPALIVE_FRAME
                    continue
                yield frame
        finally:
            self.unsubscribe(queue)
