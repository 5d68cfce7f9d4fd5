"""
Webhook envelope parser.

Walks entry -> changes -> value arrays and produces a flat list of typed
dispatch records in the order the platform sent them. Within one change,
events always come before statuses.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from wacall.core.logging.logger import ContextLogger, get_logger
from wacall.webhooks.errors import MalformedPayloadError
from wacall.webhooks.models import (
    WHATSAPP_BUSINESS_ACCOUNT,
    CallEvent,
    CallStatusRecord,
    MessageEvent,
    MessageStatusRecord,
)

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass(frozen=True)
class CallDispatch:
    """A call lifecycle event (connect, status, terminate, ...)."""

    call: CallEvent
    raw: dict[str, Any] = field(repr=False)


@dataclass(frozen=True)
class CallStatusDispatch:
    """A call status update from the statuses array of a calls change."""

    status: CallStatusRecord
    raw: dict[str, Any] = field(repr=False)


@dataclass(frozen=True)
class MessageDispatch:
    """An inbound message together with the change value it arrived in."""

    message: MessageEvent
    value: dict[str, Any] = field(repr=False)
    raw: dict[str, Any] = field(repr=False)


@dataclass(frozen=True)
class MessageStatusDispatch:
    """A message delivery status from the statuses array of a messages change."""

    status: MessageStatusRecord
    raw: dict[str, Any] = field(repr=False)


DispatchableEvent = (
    CallDispatch | CallStatusDispatch | MessageDispatch | MessageStatusDispatch
)


def _as_list(container: dict[str, Any], key: str, location: str) -> list[Any]:
    """Return container[key] as a list; absent or null means empty."""
    value = container.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise MalformedPayloadError(
            f"{location}.{key} must be an array, got {type(value).__name__}",
            location=f"{location}.{key}",
            value=value,
        )
    return value


def _as_dict(value: Any, location: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise MalformedPayloadError(
            f"{location} must be an object, got {type(value).__name__}",
            location=location,
            value=value,
        )
    return value


class EventParser:
    """
    Turns a decoded webhook envelope into an ordered list of dispatch records.

    Parsing never raises. An element with an unexpected shape is logged and
    skipped and its siblings are still produced.
    """

    def __init__(self, logger: ContextLogger | None = None):
        self.logger = logger or get_logger(__name__)

    def parse(self, envelope: Any) -> list[DispatchableEvent]:
        """
        Parse a webhook envelope.

        Args:
            envelope: Decoded JSON body of the webhook delivery

        Returns:
            Dispatch records in platform order; empty when the envelope is not
            a WhatsApp Business Account notification
        """
        object_name = envelope.get("object") if isinstance(envelope, dict) else None
        if object_name != WHATSAPP_BUSINESS_ACCOUNT:
            self.logger.debug(f"Ignoring webhook for object: {object_name}")
            return []

        events = list(self._iter_envelope(envelope))
        self.logger.debug(f"Parsed {len(events)} event(s) from webhook")
        return events

    def _iter_envelope(self, envelope: dict[str, Any]) -> Iterator[DispatchableEvent]:
        entries = self._safe_list(envelope, "entry", "envelope")
        for entry_index, entry in enumerate(entries):
            entry_location = f"entry[{entry_index}]"
            try:
                entry = _as_dict(entry, entry_location)
            except MalformedPayloadError as e:
                self._log_malformed(e)
                continue

            changes = self._safe_list(entry, "changes", entry_location)
            for change_index, change in enumerate(changes):
                yield from self._iter_change(
                    change, f"{entry_location}.changes[{change_index}]"
                )

    def _iter_change(self, change: Any, location: str) -> Iterator[DispatchableEvent]:
        try:
            change = _as_dict(change, location)
            change_field = change.get("field")
            if change_field not in ("calls", "messages"):
                self.logger.debug(f"Ignoring change field: {change_field}")
                return
            value = change.get("value")
            value = {} if value is None else _as_dict(value, f"{location}.value")
        except MalformedPayloadError as e:
            self._log_malformed(e)
            return

        value_location = f"{location}.value"
        if change_field == "calls":
            for raw, call in self._iter_models(
                value, "calls", CallEvent, value_location
            ):
                yield CallDispatch(call=call, raw=raw)
            for raw, status in self._iter_models(
                value, "statuses", CallStatusRecord, value_location
            ):
                yield CallStatusDispatch(status=status, raw=raw)
        else:
            for raw, message in self._iter_models(
                value, "messages", MessageEvent, value_location
            ):
                yield MessageDispatch(message=message, value=value, raw=raw)
            for raw, status in self._iter_models(
                value, "statuses", MessageStatusRecord, value_location
            ):
                yield MessageStatusDispatch(status=status, raw=raw)

    def _iter_models(
        self,
        value: dict[str, Any],
        key: str,
        model: type[ModelT],
        location: str,
    ) -> Iterator[tuple[dict[str, Any], ModelT]]:
        for index, element in enumerate(self._safe_list(value, key, location)):
            element_location = f"{location}.{key}[{index}]"
            try:
                raw = _as_dict(element, element_location)
                yield raw, model.model_validate(raw)
            except MalformedPayloadError as e:
                self._log_malformed(e)
            except ValidationError as e:
                self.logger.warning(
                    f"Skipping malformed {model.__name__} at {element_location}: "
                    f"{e.error_count()} validation error(s)"
                )
                self.logger.debug(str(e))

    def _safe_list(
        self, container: dict[str, Any], key: str, location: str
    ) -> list[Any]:
        try:
            return _as_list(container, key, location)
        except MalformedPayloadError as e:
            self._log_malformed(e)
            return []

    def _log_malformed(self, error: MalformedPayloadError) -> None:
        self.logger.warning(f"Skipping malformed payload element: {error.message}")
