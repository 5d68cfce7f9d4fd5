"""
Event dispatcher for routing parsed webhook records to the call manager
and the broadcaster.

Records are handled one at a time in the order the parser produced them.
Call-state transitions are order dependent, so nothing here runs
concurrently and nothing is reordered.
"""

from __future__ import annotations

import time
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from wacall.core.logging.context import clear_request_context, set_request_context
from wacall.core.logging.logger import ContextLogger, get_logger
from wacall.domain.interfaces import IBroadcaster, ICallManager
from wacall.webhooks.parser import (
    CallDispatch,
    CallStatusDispatch,
    DispatchableEvent,
    MessageDispatch,
    MessageStatusDispatch,
)

# Call statuses with a dedicated call manager transition
CLASSIFIED_CALL_STATUSES = frozenset({"RINGING", "ACCEPTED", "REJECTED"})

# Message types forwarded to real-time subscribers
BROADCAST_MESSAGE_TYPES = frozenset({"interactive", "button"})


@dataclass
class DispatchSummary:
    """Counters for one dispatch run."""

    total: int = 0
    dispatched: int = 0
    ignored: int = 0
    failed: int = 0
    dispatch_time: float = 0.0
    errors: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.failed == 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "total": self.total,
            "dispatched": self.dispatched,
            "ignored": self.ignored,
            "failed": self.failed,
            "dispatch_time": self.dispatch_time,
            "errors": list(self.errors),
        }


class EventDispatcher:
    """
    Maps each dispatch record to exactly one downstream action.

    Interactive call permission replies are the exception: they can both
    notify the call manager and be broadcast as a message.
    """

    def __init__(
        self,
        call_manager: ICallManager,
        broadcaster: IBroadcaster,
        logger: ContextLogger | None = None,
    ):
        self.call_manager = call_manager
        self.broadcaster = broadcaster
        self.logger = logger or get_logger(__name__)

    async def dispatch(self, events: Iterable[DispatchableEvent]) -> DispatchSummary:
        """
        Dispatch records sequentially.

        A failure while handling one record is logged and counted; the
        remaining records are still dispatched.

        Args:
            events: Records produced by EventParser.parse

        Returns:
            DispatchSummary with per-outcome counters
        """
        summary = DispatchSummary()
        start = time.perf_counter()

        for event in events:
            summary.total += 1
            try:
                self._bind_context(event)
                handled = await self.dispatch_one(event)
            except Exception as e:
                summary.failed += 1
                summary.errors.append(f"{type(event).__name__}: {e}")
                self.logger.error(
                    f"Error dispatching {type(event).__name__}: {e}", exc_info=True
                )
            else:
                if handled:
                    summary.dispatched += 1
                else:
                    summary.ignored += 1
            finally:
                clear_request_context()

        summary.dispatch_time = time.perf_counter() - start
        if summary.total:
            self.logger.info(
                f"⚡ Dispatched {summary.dispatched}/{summary.total} event(s) "
                f"({summary.ignored} ignored, {summary.failed} failed) "
                f"in {summary.dispatch_time:.3f}s"
            )
        return summary

    async def dispatch_one(self, event: DispatchableEvent) -> bool:
        """
        Route a single record.

        Returns:
            True if a downstream action ran, False if the record was ignored
        """
        if isinstance(event, CallDispatch):
            return await self._handle_call_event(event)
        if isinstance(event, CallStatusDispatch):
            return await self._handle_call_status(event)
        if isinstance(event, MessageDispatch):
            return await self._handle_message(event)
        if isinstance(event, MessageStatusDispatch):
            return await self._handle_message_status(event)

        self.logger.warning(f"Unknown dispatch record type: {type(event).__name__}")
        return False

    async def _handle_call_event(self, event: CallDispatch) -> bool:
        call = event.call
        self.logger.info(
            f"📞 Call event id={call.id} event={call.event} "
            f"direction={call.direction}"
        )

        if call.event == "connect":
            if call.direction == "BUSINESS_INITIATED":
                # Outbound call answered, session carries the SDP answer
                await self.call_manager.handle_outbound_sdp_answer(call.id, call.sdp)
                return True
            if call.direction == "USER_INITIATED":
                # Inbound call, session carries the SDP offer
                await self.call_manager.handle_inbound_call(
                    call.id, call.from_, call.sdp
                )
                return True
            self.logger.info(f"Unknown connect direction: {call.direction}")
            return False

        if call.event == "status":
            await self.call_manager.handle_outbound_status(call.id, call.status)
            return True

        if call.event == "terminate":
            await self.call_manager.handle_terminate(call.id)
            return True

        self.logger.info(f"Unknown call event: {call.event}")
        return False

    async def _handle_call_status(self, event: CallStatusDispatch) -> bool:
        record = event.status
        self.logger.info(f"📊 Call status id={record.id} status={record.status}")

        status = record.status
        if isinstance(status, str) and status in CLASSIFIED_CALL_STATUSES:
            await self.call_manager.handle_outbound_status(record.id, status.lower())
            return True

        self.logger.info(f"Unknown call status: {record.status}")
        await self.broadcaster.emit(
            "call-status", {"callId": record.id, "status": record.status}
        )
        return True

    async def _handle_message(self, event: MessageDispatch) -> bool:
        message = event.message
        handled = False

        if message.is_call_permission_reply:
            granted = message.permission_granted
            self.logger.info(f"🔐 Permission phone={message.from_} granted={granted}")
            if granted:
                await self.call_manager.handle_permission_granted(message.from_)
                handled = True

        # Independent of the permission branch: both can fire for one message
        if message.type in BROADCAST_MESSAGE_TYPES:
            self.logger.info(f"💬 Message type={message.type} from={message.from_}")
            await self.broadcaster.emit(
                "webhook-event", {"type": "message", "data": event.raw}
            )
            handled = True

        return handled

    async def _handle_message_status(self, event: MessageStatusDispatch) -> bool:
        record = event.status
        self.logger.info(f"📬 Message status id={record.id} status={record.status}")
        await self.broadcaster.emit(
            "webhook-event", {"type": "message-status", "data": event.raw}
        )
        return True

    @staticmethod
    def _bind_context(event: DispatchableEvent) -> None:
        if isinstance(event, CallDispatch):
            set_request_context(call_id=event.call.id, user_id=event.call.from_)
        elif isinstance(event, CallStatusDispatch):
            set_request_context(call_id=event.status.id)
        elif isinstance(event, MessageDispatch):
            set_request_context(user_id=event.message.from_)
        elif isinstance(event, MessageStatusDispatch):
            recipient = event.status.recipient_id
            if recipient is not None:
                set_request_context(user_id=str(recipient))
