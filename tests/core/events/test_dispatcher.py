"""Tests for routing dispatch records to the call manager and broadcaster."""

import pytest

from conftest import calls_change, make_envelope, messages_change, permission_reply
from wacall.core.events import EventDispatcher
from wacall.webhooks import EventParser


@pytest.fixture
def dispatcher(call_manager, broadcaster, silent_logger) -> EventDispatcher:
    return EventDispatcher(call_manager, broadcaster, logger=silent_logger)


@pytest.fixture
def run(dispatcher, silent_logger):
    parser = EventParser(logger=silent_logger)

    async def _run(envelope):
        return await dispatcher.dispatch(parser.parse(envelope))

    return _run


@pytest.mark.asyncio
class TestCallEvents:
    async def test_user_initiated_connect_is_inbound_call(self, run, journal):
        await run(
            make_envelope(
                calls_change(
                    calls=[
                        {
                            "id": "c1",
                            "from": "+1555",
                            "event": "connect",
                            "direction": "USER_INITIATED",
                            "session": {"sdp_type": "offer", "sdp": "v=0..."},
                        }
                    ]
                )
            )
        )

        assert journal == [("handle_inbound_call", "c1", "+1555", "v=0...")]

    async def test_business_initiated_connect_is_sdp_answer(self, run, journal):
        await run(
            make_envelope(
                calls_change(
                    calls=[
                        {
                            "id": "c1",
                            "event": "connect",
                            "direction": "BUSINESS_INITIATED",
                            "session": {"sdp_type": "answer", "sdp": "v=0 answer"},
                        }
                    ]
                )
            )
        )

        assert journal == [("handle_outbound_sdp_answer", "c1", "v=0 answer")]

    async def test_connect_without_session_passes_none_sdp(self, run, journal):
        await run(
            make_envelope(
                calls_change(
                    calls=[
                        {"id": "c1", "event": "connect", "direction": "BUSINESS_INITIATED"}
                    ]
                )
            )
        )

        assert journal == [("handle_outbound_sdp_answer", "c1", None)]

    async def test_status_event_forwards_raw_status(self, run, journal):
        await run(
            make_envelope(
                calls_change(calls=[{"id": "c1", "event": "status", "status": "RINGING"}])
            )
        )

        assert journal == [("handle_outbound_status", "c1", "RINGING")]

    async def test_terminate(self, run, journal):
        await run(make_envelope(calls_change(calls=[{"id": "c1", "event": "terminate"}])))

        assert journal == [("handle_terminate", "c1")]

    @pytest.mark.parametrize(
        "call",
        [
            {"id": "c1", "event": "hold"},
            {"id": "c1", "event": "CONNECT", "direction": "USER_INITIATED"},
            {"id": "c1", "event": "connect", "direction": "user_initiated"},
            {"id": "c1"},
        ],
    )
    async def test_unknown_call_event_is_log_only(self, run, journal, call):
        summary = await run(make_envelope(calls_change(calls=[call])))

        assert journal == []
        assert summary.ignored == 1
        assert summary.failed == 0


@pytest.mark.asyncio
class TestCallStatuses:
    @pytest.mark.parametrize(
        "status,expected",
        [("RINGING", "ringing"), ("ACCEPTED", "accepted"), ("REJECTED", "rejected")],
    )
    async def test_known_status_is_lowercased(self, run, journal, status, expected):
        await run(make_envelope(calls_change(statuses=[{"id": "c1", "status": status}])))

        assert journal == [("handle_outbound_status", "c1", expected)]

    @pytest.mark.parametrize("status", ["FOO", "ringing", "COMPLETED"])
    async def test_unknown_status_is_broadcast(self, run, journal, status):
        await run(make_envelope(calls_change(statuses=[{"id": "c1", "status": status}])))

        assert journal == [("emit", "call-status", {"callId": "c1", "status": status})]

    @pytest.mark.parametrize("status", [None, 42, {"code": "RINGING"}, ["RINGING"]])
    async def test_non_string_status_is_broadcast_as_sent(self, run, journal, status):
        raw = {"id": "c1"} if status is None else {"id": "c1", "status": status}

        summary = await run(make_envelope(calls_change(statuses=[raw])))

        assert journal == [("emit", "call-status", {"callId": "c1", "status": status})]
        assert summary.failed == 0


@pytest.mark.asyncio
class TestMessages:
    async def test_accepted_permission_notifies_and_broadcasts(self, run, journal):
        message = permission_reply("+1555", "accept")

        await run(make_envelope(messages_change(messages=[message])))

        assert journal == [
            ("handle_permission_granted", "+1555"),
            ("emit", "webhook-event", {"type": "message", "data": message}),
        ]

    async def test_rejected_permission_only_broadcasts(self, run, journal):
        message = permission_reply("+1555", "reject")

        await run(make_envelope(messages_change(messages=[message])))

        assert journal == [
            ("emit", "webhook-event", {"type": "message", "data": message}),
        ]

    async def test_button_message_is_broadcast(self, run, journal):
        message = {
            "from": "+1555",
            "id": "wamid.2",
            "type": "button",
            "button": {"payload": "CALL_ME", "text": "Call me"},
        }

        await run(make_envelope(messages_change(messages=[message])))

        assert journal == [
            ("emit", "webhook-event", {"type": "message", "data": message}),
        ]

    async def test_interactive_without_reply_content_is_broadcast(self, run, journal):
        message = {"from": "+1555", "type": "interactive"}

        await run(make_envelope(messages_change(messages=[message])))

        assert journal == [
            ("emit", "webhook-event", {"type": "message", "data": message}),
        ]

    async def test_other_message_types_are_ignored(self, run, journal):
        message = {"from": "+1555", "type": "text", "text": {"body": "hi"}}

        summary = await run(make_envelope(messages_change(messages=[message])))

        assert journal == []
        assert summary.ignored == 1

    async def test_message_status_always_broadcast(self, run, journal):
        statuses = [
            {"id": "wamid.1", "status": "delivered", "recipient_id": "+1555"},
            {"id": "wamid.2", "status": "something-new"},
            {"id": "wamid.3", "status": {"code": 7}, "recipient_id": 15550001111},
        ]

        await run(make_envelope(messages_change(statuses=statuses)))

        assert journal == [
            ("emit", "webhook-event", {"type": "message-status", "data": statuses[0]}),
            ("emit", "webhook-event", {"type": "message-status", "data": statuses[1]}),
            ("emit", "webhook-event", {"type": "message-status", "data": statuses[2]}),
        ]


@pytest.mark.asyncio
class TestOrderingAndIsolation:
    async def test_calls_then_call_statuses_in_order(self, run, journal):
        await run(
            make_envelope(
                calls_change(
                    calls=[
                        {"id": "c2", "event": "terminate"},
                        {"id": "c1", "event": "status", "status": "ACCEPTED"},
                    ],
                    statuses=[
                        {"id": "c3", "status": "RINGING"},
                        {"id": "c4", "status": "BAR"},
                        {"id": "c5", "status": "REJECTED"},
                    ],
                )
            )
        )

        assert journal == [
            ("handle_terminate", "c2"),
            ("handle_outbound_status", "c1", "ACCEPTED"),
            ("handle_outbound_status", "c3", "ringing"),
            ("emit", "call-status", {"callId": "c4", "status": "BAR"}),
            ("handle_outbound_status", "c5", "rejected"),
        ]

    async def test_failure_does_not_abort_later_events(
        self, call_manager_class, broadcaster, journal, silent_logger
    ):
        class FlakyCallManager(call_manager_class):
            async def handle_terminate(self, call_id):
                if call_id == "boom":
                    raise RuntimeError("call store unavailable")
                await super().handle_terminate(call_id)

        dispatcher = EventDispatcher(
            FlakyCallManager(journal), broadcaster, logger=silent_logger
        )
        events = EventParser(logger=silent_logger).parse(
            make_envelope(
                calls_change(
                    calls=[
                        {"id": "boom", "event": "terminate"},
                        {"id": "c2", "event": "terminate"},
                    ],
                    statuses=[{"id": "c3", "status": "RINGING"}],
                )
            )
        )

        summary = await dispatcher.dispatch(events)

        assert journal == [
            ("handle_terminate", "c2"),
            ("handle_outbound_status", "c3", "ringing"),
        ]
        assert summary.total == 3
        assert summary.dispatched == 2
        assert summary.failed == 1
        assert not summary.success
        assert "call store unavailable" in summary.errors[0]

    async def test_redelivery_produces_identical_sequence(self, run, journal):
        envelope = make_envelope(
            calls_change(
                calls=[{"id": "c1", "event": "connect", "direction": "USER_INITIATED"}],
                statuses=[{"id": "c1", "status": "FOO"}],
            ),
            messages_change(messages=[permission_reply("+1555")]),
        )

        await run(envelope)
        first = list(journal)
        journal.clear()
        await run(envelope)

        assert journal == first
        assert len(first) == 4

    async def test_summary_to_dict(self, run):
        summary = await run(
            make_envelope(calls_change(calls=[{"id": "c1", "event": "terminate"}]))
        )

        data = summary.to_dict()

        assert data["success"] is True
        assert data["total"] == 1
        assert data["dispatched"] == 1
        assert data["errors"] == []
