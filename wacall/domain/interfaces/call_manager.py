"""Call-state manager interface invoked by the webhook dispatcher."""

from abc import ABC, abstractmethod


class ICallManager(ABC):
    """
    Interface of the external call-state manager.

    The dispatcher only decides which method to call and with which
    arguments. Ringing/connect/terminate semantics, persistence and
    deduplication of redelivered webhooks live behind this interface:
    the platform may deliver the same event more than once and every
    method must tolerate that.
    """

    @abstractmethod
    async def handle_outbound_sdp_answer(self, call_id: str, sdp: str | None) -> None:
        """A business-initiated call was answered; sdp is the callee's answer."""
        ...

    @abstractmethod
    async def handle_inbound_call(
        self, call_id: str, from_number: str | None, sdp: str | None
    ) -> None:
        """A user-initiated call arrived; sdp is the caller's offer."""
        ...

    @abstractmethod
    async def handle_outbound_status(self, call_id: str, status: str | None) -> None:
        """Status change of a call (ringing, accepted, rejected, ...)."""
        ...

    @abstractmethod
    async def handle_terminate(self, call_id: str) -> None:
        """The call ended."""
        ...

    @abstractmethod
    async def handle_permission_granted(self, phone: str | None) -> None:
        """The user accepted a call permission request."""
        ...
