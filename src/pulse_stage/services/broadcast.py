"""Publish-only broadcast channel for real-time events such as ``newPost``.

Publishing is fire-and-forget: callers never wait for, or depend on, delivery.
Subscribers receive messages through bounded queues; a full queue drops the
message for that subscriber only.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from pulse_stage.core.settings import settings

logger = logging.getLogger(__name__)

EVENT_NEW_POST = "newPost"


class Broadcaster:
    """In-process fan-out of broadcast events."""

    def __init__(self, queue_size: int | None = None) -> None:
        self.queue_size = queue_size if queue_size is not None else settings.broadcast_queue_size
        self._subscribers: set[asyncio.Queue[dict[str, Any]]] = set()

    def subscribe(self) -> asyncio.Queue[dict[str, Any]]:
        """Register a new subscriber queue."""
        queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue(maxsize=self.queue_size)
        self._subscribers.add(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue[dict[str, Any]]) -> None:
        self._subscribers.discard(queue)

    def emit(self, event: str, payload: Mapping[str, Any]) -> None:
        """Publish ``event`` to every subscriber without waiting."""
        message = {"event": event, "payload": dict(payload)}
        for queue in list(self._subscribers):
            try:
                queue.put_nowait(message)
            except asyncio.QueueFull:
                logger.warning("Dropping %s event for a slow subscriber", event)
        logger.debug("Broadcast %s to %d subscribers", event, len(self._subscribers))


_broadcaster: Broadcaster | None = None


def get_broadcaster() -> Broadcaster:
    """Return the process-wide broadcaster."""

    global _broadcaster
    if _broadcaster is None:
        _broadcaster = Broadcaster()
    return _broadcaster
