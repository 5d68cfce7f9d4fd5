"""
Default call manager that only logs what it is asked to do.

Used by the CLI server so the webhook URL can be registered and exercised
with the platform before a real call-state manager is wired in.
"""

from collections import Counter
from typing import Any

from wacall.core.logging.logger import get_logger
from wacall.domain.interfaces import ICallManager


class LoggingCallManager(ICallManager):
    """Logs every call manager invocation and keeps per-method counters."""

    def __init__(self, sdp_preview_length: int = 40):
        self.logger = get_logger(__name__)
        self.sdp_preview_length = sdp_preview_length
        self._calls: Counter[str] = Counter()

    def _preview(self, sdp: str | None) -> str:
        if not sdp:
            return "<none>"
        flat = sdp.replace("\r\n", " ").replace("\n", " ")
        if len(flat) <= self.sdp_preview_length:
            return flat
        return f"{flat[: self.sdp_preview_length]}..."

    async def handle_outbound_sdp_answer(self, call_id: str, sdp: str | None) -> None:
        self._calls["outbound_sdp_answer"] += 1
        self.logger.info(f"SDP answer for {call_id}: {self._preview(sdp)}")

    async def handle_inbound_call(
        self, call_id: str, from_number: str | None, sdp: str | None
    ) -> None:
        self._calls["inbound_call"] += 1
        self.logger.info(
            f"Inbound call {call_id} from {from_number}: {self._preview(sdp)}"
        )

    async def handle_outbound_status(self, call_id: str, status: str | None) -> None:
        self._calls["outbound_status"] += 1
        self.logger.info(f"Call {call_id} status -> {status}")

    async def handle_terminate(self, call_id: str) -> None:
        self._calls["terminate"] += 1
        self.logger.info(f"Call {call_id} terminated")

    async def handle_permission_granted(self, phone: str | None) -> None:
        self._calls["permission_granted"] += 1
        self.logger.info(f"Call permission granted by {phone}")

    def get_stats(self) -> dict[str, Any]:
        """Invocation counters per method."""
        return {"total": sum(self._calls.values()), "by_method": dict(self._calls)}
