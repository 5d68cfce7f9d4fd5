"""
Subscription verification handshake.

The platform calls the webhook URL with hub.mode, hub.verify_token and
hub.challenge when the subscription is configured (and periodically after
that). The challenge must be echoed back verbatim as plain text.
"""

from dataclasses import dataclass

from wacall.core.logging.logger import ContextLogger, get_logger

SUBSCRIBE_MODE = "subscribe"


@dataclass(frozen=True)
class HandshakeResult:
    """HTTP status and plain-text body to answer the handshake with."""

    status_code: int
    body: str = ""

    @property
    def accepted(self) -> bool:
        return self.status_code == 200


class SubscriptionHandshake:
    """Answers the platform verification challenge."""

    def __init__(self, expected_token: str, logger: ContextLogger | None = None):
        self._expected_token = expected_token
        self.logger = logger or get_logger(__name__)

    def verify(
        self,
        mode: str | None,
        token: str | None,
        challenge: str | None,
    ) -> HandshakeResult:
        """
        Check the handshake parameters.

        Args:
            mode: hub.mode query parameter
            token: hub.verify_token query parameter
            challenge: hub.challenge query parameter

        Returns:
            200 with the challenge when mode is "subscribe" and the token
            matches exactly, otherwise 403 with an empty body
        """
        if mode == SUBSCRIBE_MODE and token == self._expected_token:
            self.logger.info("Webhook verification successful")
            return HandshakeResult(status_code=200, body=challenge or "")

        self.logger.warning("Webhook verification failed")
        return HandshakeResult(status_code=403)
