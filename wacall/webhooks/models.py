"""
Pydantic models for WhatsApp Business calling and messaging webhooks.

Only the fields the dispatcher routes on are declared. Everything else the
platform sends is kept (extra="allow") and every field that the platform may
omit is optional, so unknown enum values and missing sub-objects never fail
validation. Numeric identifiers and phone numbers are coerced to strings,
and values that are only forwarded (statuses, message status fields) are
kept as sent, whatever their JSON type. Call identifiers are the exception:
a call event or call status without a string ID cannot be routed and is
rejected as malformed.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

WHATSAPP_BUSINESS_ACCOUNT = "whatsapp_business_account"


class CallSession(BaseModel):
    """WebRTC session description attached to connect events."""

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    sdp_type: str | None = Field(None, description="SDP type (offer or answer)")
    sdp: str | None = Field(None, description="SDP body")


class CallEvent(BaseModel):
    """
    Call lifecycle event from a change with field="calls".

    The event and direction fields are plain strings so values the platform
    adds later pass through to the dispatcher unchanged.
    """

    model_config = ConfigDict(
        extra="allow", populate_by_name=True, coerce_numbers_to_str=True
    )

    id: str = Field(..., strict=True, description="Platform call ID")
    from_: str | None = Field(None, alias="from", description="Caller phone number")
    to: str | None = Field(None, description="Callee phone number")
    event: str | None = Field(None, description="connect, status, terminate, ...")
    direction: str | None = Field(
        None, description="BUSINESS_INITIATED or USER_INITIATED"
    )
    session: CallSession | None = Field(None, description="SDP offer or answer")
    status: Any = Field(
        None, description="Status for event='status', forwarded as sent"
    )

    @property
    def sdp(self) -> str | None:
        """SDP body of the session, if present."""
        return self.session.sdp if self.session else None


class CallStatusRecord(BaseModel):
    """Call status update (RINGING, ACCEPTED, REJECTED, ...) for field="calls"."""

    model_config = ConfigDict(extra="allow")

    id: str = Field(..., strict=True, description="Platform call ID")
    status: Any = Field(None, description="Raw call status, forwarded as sent")


class CallPermissionReply(BaseModel):
    """User answer to a call permission request."""

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    response: str | None = Field(None, description="accept, reject, ...")
    is_permanent: bool | None = Field(
        None, description="Whether the permission does not expire"
    )


class InteractiveReply(BaseModel):
    """Interactive message content; only call permission replies are modelled."""

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    type: str | None = Field(None, description="Interactive reply type")
    call_permission_reply: CallPermissionReply | None = Field(
        None, description="Present when type='call_permission_reply'"
    )


class MessageEvent(BaseModel):
    """Inbound user message from a change with field="messages"."""

    model_config = ConfigDict(
        extra="allow", populate_by_name=True, coerce_numbers_to_str=True
    )

    id: str | None = Field(None, description="WhatsApp message ID")
    type: str | None = Field(
        None, description="Message type (interactive, button, ...)"
    )
    from_: str | None = Field(None, alias="from", description="Sender phone number")
    timestamp: Any = Field(None, description="Unix timestamp")
    interactive: InteractiveReply | None = Field(
        None, description="Interactive reply content"
    )

    @property
    def is_call_permission_reply(self) -> bool:
        return (
            self.type == "interactive"
            and self.interactive is not None
            and self.interactive.type == "call_permission_reply"
        )

    @property
    def permission_granted(self) -> bool:
        """True when the user accepted a call permission request."""
        if not self.is_call_permission_reply:
            return False
        reply = self.interactive.call_permission_reply
        return reply is not None and reply.response == "accept"


class MessageStatusRecord(BaseModel):
    """Message delivery status (sent, delivered, read, failed, ...)."""

    model_config = ConfigDict(extra="allow")

    id: Any = Field(None, description="WhatsApp message ID")
    status: Any = Field(None, description="Raw delivery status")
    recipient_id: Any = Field(None, description="Recipient phone number")
