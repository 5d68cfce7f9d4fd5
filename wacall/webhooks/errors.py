"""
Exception hierarchy for webhook authentication and payload handling.

Authentication errors are surfaced to the platform as HTTP 403. Payload
errors never leave the processing phase: the delivery was already
acknowledged by the time they can happen.
"""

from typing import Any


class WebhookError(Exception):
    """Base class for all webhook pipeline errors."""


class AuthenticationError(WebhookError):
    """The request could not be authenticated and must be rejected with 403."""


class MissingSignatureError(AuthenticationError):
    """The x-hub-signature-256 header was absent or empty."""

    def __init__(self, message: str = "Missing signature header"):
        super().__init__(message)


class InvalidSignatureError(AuthenticationError):
    """The x-hub-signature-256 header did not match the computed digest."""

    def __init__(self, message: str = "Invalid signature"):
        super().__init__(message)


class MalformedPayloadError(WebhookError):
    """A single payload element had an unexpected shape."""

    def __init__(self, message: str, location: str | None = None, value: Any = None):
        self.message = message
        self.location = location
        self.value = value
        super().__init__(message)
