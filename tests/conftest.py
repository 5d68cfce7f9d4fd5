"""
Pytest configuration and common fixtures for wacall tests.

Provides recording doubles for the call manager and broadcaster that write
into one shared journal, so tests can assert on the exact interleaving of
downstream calls, plus builders for webhook payloads.
"""

import json
import logging
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from wacall import create_app
from wacall.core.logging.logger import ContextLogger
from wacall.domain.interfaces import IBroadcaster, ICallManager
from wacall.webhooks import compute_signature

TEST_APP_SECRET = "test_app_secret"
TEST_VERIFY_TOKEN = "test_verify_token"


class RecordingCallManager(ICallManager):
    """Call manager double appending every invocation to a journal."""

    def __init__(self, journal: list[tuple[Any, ...]]):
        self.journal = journal

    async def handle_outbound_sdp_answer(self, call_id, sdp):
        self.journal.append(("handle_outbound_sdp_answer", call_id, sdp))

    async def handle_inbound_call(self, call_id, from_number, sdp):
        self.journal.append(("handle_inbound_call", call_id, from_number, sdp))

    async def handle_outbound_status(self, call_id, status):
        self.journal.append(("handle_outbound_status", call_id, status))

    async def handle_terminate(self, call_id):
        self.journal.append(("handle_terminate", call_id))

    async def handle_permission_granted(self, phone):
        self.journal.append(("handle_permission_granted", phone))


class RecordingBroadcaster(IBroadcaster):
    """Broadcaster double appending every emission to a journal."""

    def __init__(self, journal: list[tuple[Any, ...]]):
        self.journal = journal

    async def emit(self, event_name, payload):
        self.journal.append(("emit", event_name, payload))


@pytest.fixture
def journal() -> list[tuple[Any, ...]]:
    return []


@pytest.fixture
def call_manager_class() -> type[RecordingCallManager]:
    """Recording double class, for tests that override a single method."""
    return RecordingCallManager


@pytest.fixture
def call_manager(journal) -> RecordingCallManager:
    return RecordingCallManager(journal)


@pytest.fixture
def broadcaster(journal) -> RecordingBroadcaster:
    return RecordingBroadcaster(journal)


@pytest.fixture
def silent_logger() -> ContextLogger:
    """Logger that tests can inject to keep component output deterministic."""
    return ContextLogger(logging.getLogger("wacall.tests"))


@pytest.fixture
def app(call_manager, broadcaster) -> FastAPI:
    return create_app(
        call_manager,
        broadcaster,
        verify_token=TEST_VERIFY_TOKEN,
        app_secret=TEST_APP_SECRET,
        configure_logging=False,
    )


@pytest.fixture
def test_client(app: FastAPI) -> TestClient:
    return TestClient(app)


# Payload builders


def make_envelope(
    *changes: dict[str, Any], object_name: str = "whatsapp_business_account"
):
    """Envelope with a single entry holding the given changes."""
    return {
        "object": object_name,
        "entry": [{"id": "102290129340398", "changes": list(changes)}],
    }


def calls_change(calls=None, statuses=None) -> dict[str, Any]:
    value: dict[str, Any] = {"messaging_product": "whatsapp"}
    if calls is not None:
        value["calls"] = calls
    if statuses is not None:
        value["statuses"] = statuses
    return {"field": "calls", "value": value}


def messages_change(messages=None, statuses=None) -> dict[str, Any]:
    value: dict[str, Any] = {"messaging_product": "whatsapp"}
    if messages is not None:
        value["messages"] = messages
    if statuses is not None:
        value["statuses"] = statuses
    return {"field": "messages", "value": value}


def permission_reply(phone: str, response: str = "accept") -> dict[str, Any]:
    return {
        "from": phone,
        "id": "wamid.HBgLMTU1NTAwMDExMTEVAgASGBQzQTVCNjc4",
        "timestamp": "1718000000",
        "type": "interactive",
        "interactive": {
            "type": "call_permission_reply",
            "call_permission_reply": {"response": response, "is_permanent": False},
        },
    }


def signed_request(payload: dict[str, Any], secret: str = TEST_APP_SECRET):
    """Serialize a payload and return (body, headers) with a valid signature."""
    body = json.dumps(payload).encode("utf-8")
    return body, {
        "content-type": "application/json",
        "x-hub-signature-256": compute_signature(secret, body),
    }
