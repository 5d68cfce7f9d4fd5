"""Real-time broadcast interface for webhook events."""

from abc import ABC, abstractmethod
from typing import Any, Literal

BroadcastEventName = Literal[
    "call-status",  # Call status the dispatcher could not classify
    "webhook-event",  # Interactive/button messages and message statuses
]


class IBroadcaster(ABC):
    """
    Interface for pushing webhook events to real-time subscribers.

    Event Types:
        call-status: {"callId": ..., "status": ...}
        webhook-event: {"type": "message" | "message-status", "data": {...}}
    """

    @abstractmethod
    async def emit(
        self, event_name: BroadcastEventName, payload: dict[str, Any]
    ) -> None:
        """
        Emit an event to all subscribers.

        Args:
            event_name: Broadcast event name
            payload: JSON-serializable event payload
        """
        ...

    async def close(self) -> None:
        """Release transport resources. No-op by default."""
        return None
