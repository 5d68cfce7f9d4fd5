"""Redis Pub/Sub broadcaster for real-time webhook notifications."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Any

from redis.asyncio import Redis

from wacall.domain.interfaces import BroadcastEventName, IBroadcaster

logger = logging.getLogger("RedisBroadcaster")


class RedisBroadcaster(IBroadcaster):
    """
    Publishes webhook events on a Redis Pub/Sub channel.

    Channel Pattern: {channel_prefix}:{event_name}

    Publish failures are logged but don't propagate: a missing subscriber
    transport should never break call handling for the same webhook.
    """

    def __init__(
        self,
        redis_url: str | None = None,
        channel_prefix: str = "wacall:events",
        client: Redis | None = None,
    ):
        if client is None and redis_url is None:
            raise ValueError("Either redis_url or client is required")
        self.channel_prefix = channel_prefix
        self._redis_url = redis_url
        self._client = client

    @property
    def client(self) -> Redis:
        if self._client is None:
            self._client = Redis.from_url(self._redis_url, decode_responses=True)
        return self._client

    def get_channel(self, event_name: BroadcastEventName) -> str:
        """Get channel name for an event."""
        return f"{self.channel_prefix}:{event_name}"

    async def emit(
        self, event_name: BroadcastEventName, payload: dict[str, Any]
    ) -> None:
        channel = self.get_channel(event_name)
        message = {
            "event": event_name,
            "data": payload,
            "timestamp": datetime.now(UTC).isoformat(),
            "v": "1",
        }

        try:
            subscribers = await self.client.publish(
                channel, json.dumps(message, ensure_ascii=False, default=str)
            )
            logger.debug(
                f"Published {event_name} to {channel}: {subscribers} subscriber(s)"
            )
        except Exception as e:
            logger.error(f"Failed to publish to {channel}: {e}", exc_info=True)

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
