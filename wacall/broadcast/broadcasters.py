"""In-process broadcaster implementations."""

from __future__ import annotations

import asyncio
import json
from typing import Any

from wacall.core.logging.logger import get_logger
from wacall.domain.interfaces import BroadcastEventName, IBroadcaster


class LoggingBroadcaster(IBroadcaster):
    """Writes every emission to the log and delivers it nowhere."""

    def __init__(self):
        self.logger = get_logger(__name__)

    async def emit(
        self, event_name: BroadcastEventName, payload: dict[str, Any]
    ) -> None:
        self.logger.info(f"📡 {event_name}: {json.dumps(payload, default=str)}")


class MemoryBroadcaster(IBroadcaster):
    """
    Fan-out to in-process asyncio queues.

    Every subscriber gets its own queue of (event_name, payload) tuples.
    Emissions are also kept in ``history`` in emission order, which makes
    this the broadcaster of choice in tests.
    """

    def __init__(self, max_queue_size: int = 1000):
        self.logger = get_logger(__name__)
        self.max_queue_size = max_queue_size
        self.history: list[tuple[str, dict[str, Any]]] = []
        self._subscribers: list[asyncio.Queue[tuple[str, dict[str, Any]]]] = []

    def subscribe(self) -> asyncio.Queue[tuple[str, dict[str, Any]]]:
        """Register a new subscriber queue."""
        queue: asyncio.Queue[tuple[str, dict[str, Any]]] = asyncio.Queue(
            maxsize=self.max_queue_size
        )
        self._subscribers.append(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue[tuple[str, dict[str, Any]]]) -> None:
        if queue in self._subscribers:
            self._subscribers.remove(queue)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    async def emit(
        self, event_name: BroadcastEventName, payload: dict[str, Any]
    ) -> None:
        self.history.append((event_name, payload))
        for queue in list(self._subscribers):
            try:
                queue.put_nowait((event_name, payload))
            except asyncio.QueueFull:
                # Slow subscriber: drop for that subscriber only
                self.logger.warning(f"Subscriber queue full, dropping {event_name}")

    async def close(self) -> None:
        self._subscribers.clear()
