"""
Webhook controller.

Routes handle HTTP concerns only; the controller owns the pipeline:
authenticate -> acknowledge -> parse -> dispatch.

The platform enforces a short delivery timeout and redelivers events whose
acknowledgment is late, so processing is split into two explicit phases.
acknowledge() decides the HTTP response from the raw body and headers
alone. process() runs afterwards, once the response is on the wire, and
never raises: nothing that happens there can change what the platform saw.
"""

import json
from typing import Any

from wacall.core.events import DispatchSummary, EventDispatcher
from wacall.core.logging.logger import get_logger
from wacall.webhooks import (
    AuthenticationError,
    EventParser,
    HandshakeResult,
    SignatureVerifier,
    SubscriptionHandshake,
)


class WebhookController:
    """Owns the verifier, handshake, parser and dispatcher of one app."""

    def __init__(
        self,
        verifier: SignatureVerifier,
        handshake: SubscriptionHandshake,
        parser: EventParser,
        dispatcher: EventDispatcher,
    ):
        self.verifier = verifier
        self.handshake = handshake
        self.parser = parser
        self.dispatcher = dispatcher
        self.logger = get_logger(__name__)

    def verify_subscription(
        self,
        hub_mode: str | None,
        hub_verify_token: str | None,
        hub_challenge: str | None,
    ) -> HandshakeResult:
        """Answer the platform verification challenge."""
        return self.handshake.verify(hub_mode, hub_verify_token, hub_challenge)

    def acknowledge(self, raw_body: bytes, signature_header: str | None) -> bool:
        """
        Phase one: authenticate the delivery.

        Args:
            raw_body: Request body bytes exactly as received
            signature_header: x-hub-signature-256 header value

        Returns:
            True if the delivery is authentic and should be acknowledged with
            200, False if it must be rejected with 403 and not processed
        """
        try:
            self.verifier.verify(raw_body, signature_header)
        except AuthenticationError as e:
            self.logger.warning(f"Rejecting webhook delivery: {e}")
            return False
        return True

    async def process(self, raw_body: bytes) -> DispatchSummary | None:
        """
        Phase two: decode, parse and dispatch an acknowledged delivery.

        Args:
            raw_body: The same bytes that were authenticated

        Returns:
            DispatchSummary, or None if the body could not be processed
        """
        try:
            envelope = self._decode(raw_body)
            if envelope is None:
                return None

            events = self.parser.parse(envelope)
            summary = await self.dispatcher.dispatch(events)

            if not summary.success:
                self.logger.error(
                    f"❌ {summary.failed} of {summary.total} webhook event(s) failed"
                )
            return summary

        except Exception as e:
            # Already acknowledged: log and drop
            self.logger.error(f"❌ Error in webhook processing: {e}", exc_info=True)
            return None

    def _decode(self, raw_body: bytes) -> Any:
        try:
            envelope = json.loads(raw_body)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            self.logger.warning(f"Dropping webhook with invalid JSON body: {e}")
            return None

        self.logger.debug(f"Received webhook: {json.dumps(envelope, indent=2)}")
        return envelope

    def get_health_status(self) -> dict[str, Any]:
        """Get health status of the webhook controller."""
        return {
            "controller": "healthy",
            "call_manager": type(self.dispatcher.call_manager).__name__,
            "broadcaster": type(self.dispatcher.broadcaster).__name__,
        }
