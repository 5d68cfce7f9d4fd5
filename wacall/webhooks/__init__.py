"""
Webhook authentication and parsing for the WhatsApp Business platform.

Signature validation and the subscription handshake gate the HTTP surface;
the parser turns an authenticated envelope into typed dispatch records.
"""

from .errors import (
    AuthenticationError,
    InvalidSignatureError,
    MalformedPayloadError,
    MissingSignatureError,
    WebhookError,
)
from .handshake import HandshakeResult, SubscriptionHandshake
from .parser import (
    CallDispatch,
    CallStatusDispatch,
    DispatchableEvent,
    EventParser,
    MessageDispatch,
    MessageStatusDispatch,
)
from .signature import SIGNATURE_HEADER, SignatureVerifier, compute_signature

__all__ = [
    # Authentication
    "SIGNATURE_HEADER",
    "SignatureVerifier",
    "compute_signature",
    "SubscriptionHandshake",
    "HandshakeResult",
    # Parsing
    "EventParser",
    "DispatchableEvent",
    "CallDispatch",
    "CallStatusDispatch",
    "MessageDispatch",
    "MessageStatusDispatch",
    # Errors
    "WebhookError",
    "AuthenticationError",
    "MissingSignatureError",
    "InvalidSignatureError",
    "MalformedPayloadError",
]
