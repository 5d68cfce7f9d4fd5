"""
HMAC-SHA256 validation of the x-hub-signature-256 header.

The digest is computed over the raw request body exactly as received.
Re-serializing a parsed JSON object changes whitespace and key order and
produces a different signature.
"""

import hashlib
import hmac

from wacall.core.logging.logger import ContextLogger, get_logger
from wacall.webhooks.errors import InvalidSignatureError, MissingSignatureError

SIGNATURE_HEADER = "x-hub-signature-256"
SIGNATURE_PREFIX = "sha256="


def compute_signature(secret: bytes | str, body: bytes) -> str:
    """
    Compute the header value the platform sends for a body.

    Args:
        secret: App secret used as the HMAC key
        body: Raw request body

    Returns:
        "sha256=" followed by the lowercase hex digest
    """
    if isinstance(secret, str):
        secret = secret.encode("utf-8")
    digest = hmac.new(secret, body, hashlib.sha256).hexdigest()
    return f"{SIGNATURE_PREFIX}{digest}"


class SignatureVerifier:
    """Validates inbound webhook deliveries against the app secret."""

    def __init__(self, app_secret: bytes | str, logger: ContextLogger | None = None):
        if isinstance(app_secret, str):
            app_secret = app_secret.encode("utf-8")
        self._secret = app_secret
        self.logger = logger or get_logger(__name__)

    def verify(self, raw_body: bytes, signature_header: str | None) -> None:
        """
        Validate the signature header, raising on failure.

        Args:
            raw_body: Request body bytes exactly as received
            signature_header: Value of the x-hub-signature-256 header, if any

        Raises:
            MissingSignatureError: If the header is absent or empty
            InvalidSignatureError: If the header does not match the digest
        """
        if not signature_header:
            self.logger.warning("Missing signature header")
            raise MissingSignatureError()

        expected = compute_signature(self._secret, raw_body)

        # Constant-time over the whole header, prefix included
        if not hmac.compare_digest(
            signature_header.encode("utf-8"), expected.encode("utf-8")
        ):
            self.logger.warning("Invalid signature")
            raise InvalidSignatureError()

    def validate(self, raw_body: bytes, signature_header: str | None) -> bool:
        """
        Check the signature header.

        Returns:
            True if the header exactly matches the expected signature
        """
        try:
            self.verify(raw_body, signature_header)
        except (MissingSignatureError, InvalidSignatureError):
            return False
        return True
