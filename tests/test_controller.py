"""ExchangeController: optimistic send/receive cycle, clear, failure recovery."""

from __future__ import annotations

import asyncio
import json
import threading

from chat_client.core.controller import ExchangeController
from chat_client.core.types import ExchangeState
from chat_client.runtime_state import MESSAGES_KEY, THREAD_ID_KEY, SessionStore

from conftest import GREETING, FailingStorage


def _texts_of(controller):
    return [(m.text, m.is_user) for m in controller.messages]


# ---------------------------------------------------------------------------
# Scenario A: fresh load
# ---------------------------------------------------------------------------


def test_fresh_load_has_only_greeting(make_controller):
    controller = make_controller()

    assert _texts_of(controller) == [(GREETING, False)]
    assert controller.thread_id
    assert controller.state is ExchangeState.IDLE
    assert controller.error_banner is None


# ---------------------------------------------------------------------------
# Scenario B: successful exchange
# ---------------------------------------------------------------------------


def test_submit_appends_user_then_assistant_and_adopts_thread_id(
    make_controller, transport, storage
):
    transport.replies = [{"response": "Starting training", "thread_id": "abc"}]
    transport.gate = threading.Event()
    controller = make_controller()
    original_thread = controller.thread_id

    async def scenario():
        task = asyncio.create_task(controller.submit("train model"))
        await asyncio.sleep(0)

        # Optimistic write is visible and persisted while the call is outstanding.
        assert controller.state is ExchangeState.SENDING
        assert _texts_of(controller) == [(GREETING, False), ("train model", True)]
        persisted = json.loads(storage.data[MESSAGES_KEY])
        assert persisted[-1]["text"] == "train model"
        assert persisted[-1]["isUser"] is True

        transport.gate.set()
        return await task

    assert asyncio.run(scenario()) is True
    assert transport.queries == [("train model", original_thread)]
    assert _texts_of(controller) == [
        (GREETING, False),
        ("train model", True),
        ("Starting training", False),
    ]
    assert controller.thread_id == "abc"
    assert controller.state is ExchangeState.IDLE
    assert storage.data[THREAD_ID_KEY] == "abc"


def test_reply_id_is_request_id_plus_one(make_controller):
    controller = make_controller()

    asyncio.run(controller.submit("hello"))

    user_msg, reply = controller.messages[-2:]
    assert reply.id == user_msg.id + 1
    ids = [m.id for m in controller.messages]
    assert ids == sorted(ids)
    assert len(set(ids)) == len(ids)


def test_missing_thread_id_keeps_existing_one(make_controller, transport):
    transport.replies = [{"response": "hi"}]
    controller = make_controller()
    before = controller.thread_id

    asyncio.run(controller.submit("hello"))

    assert controller.thread_id == before


def test_server_assigned_thread_id_always_wins(make_controller, transport):
    transport.replies = [
        {"response": "one", "thread_id": "first"},
        {"response": "two", "thread_id": "second"},
    ]
    controller = make_controller()

    asyncio.run(controller.submit("a"))
    asyncio.run(controller.submit("b"))

    assert controller.thread_id == "second"
    assert transport.queries[1] == ("b", "first")


def test_empty_response_uses_fallback_text(make_controller, transport, texts):
    transport.replies = [{"response": ""}, None, {"thread_id": "t"}]
    controller = make_controller()

    for text in ("a", "b", "c"):
        asyncio.run(controller.submit(text))

    replies = [m.text for m in controller.messages if not m.is_user][1:]
    assert replies == [texts.fallback_reply] * 3
    assert controller.error_banner is None


def test_each_submission_adds_exactly_one_pair(make_controller):
    controller = make_controller()

    for i in range(5):
        asyncio.run(controller.submit(f"message {i}"))

    flags = [m.is_user for m in controller.messages[1:]]
    assert flags == [True, False] * 5


# ---------------------------------------------------------------------------
# Blank input
# ---------------------------------------------------------------------------


def test_blank_input_is_a_silent_no_op(make_controller, transport, storage):
    controller = make_controller()
    before_messages = controller.messages
    before_thread = controller.thread_id

    for text in ("", "   ", "\n\t "):
        assert asyncio.run(controller.submit(text)) is False

    assert controller.messages == before_messages
    assert controller.thread_id == before_thread
    assert transport.queries == []
    assert MESSAGES_KEY not in storage.data


def test_submit_without_text_sends_input_buffer(make_controller, transport):
    controller = make_controller()
    controller.set_input("from the buffer")

    assert asyncio.run(controller.submit()) is True

    assert transport.queries[0][0] == "from the buffer"
    assert controller.input_buffer == ""


def test_rejected_submit_keeps_input_buffer(make_controller):
    controller = make_controller()
    controller.set_input("   ")

    assert asyncio.run(controller.submit()) is False
    assert controller.input_buffer == "   "


# ---------------------------------------------------------------------------
# Single request in flight
# ---------------------------------------------------------------------------


def test_second_submit_and_clear_refused_while_sending(make_controller, transport):
    transport.gate = threading.Event()
    controller = make_controller()

    async def scenario():
        first = asyncio.create_task(controller.submit("first"))
        await asyncio.sleep(0)
        assert controller.is_busy

        assert await controller.submit("second") is False
        assert await controller.clear() is False

        transport.gate.set()
        return await first

    assert asyncio.run(scenario()) is True
    assert [q[0] for q in transport.queries] == ["first"]
    assert transport.clears == []
    assert len(controller.messages) == 3


def test_submit_refused_while_clearing(make_controller, transport):
    transport.gate = threading.Event()
    controller = make_controller()

    async def scenario():
        clearing = asyncio.create_task(controller.clear())
        await asyncio.sleep(0)
        assert controller.is_busy
        assert await controller.submit("hello") is False
        transport.gate.set()
        return await clearing

    assert asyncio.run(scenario()) is True
    assert transport.queries == []


def test_cancelled_submit_settles_as_failure(make_controller, transport, texts):
    transport.gate = threading.Event()
    controller = make_controller()

    async def scenario():
        try:
            await asyncio.wait_for(controller.submit("x"), 0.05)
        except asyncio.TimeoutError:
            pass
        else:
            raise AssertionError("submit should have timed out")

        assert controller.state is ExchangeState.ERROR_DISPLAYED
        assert controller.error_banner == texts.error_banner
        assert _texts_of(controller)[-2:] == [("x", True), (texts.error_reply, False)]
        assert not controller.is_busy

        transport.gate.set()
        return await controller.submit("again")

    assert asyncio.run(scenario()) is True
    assert [q[0] for q in transport.queries] == ["x", "again"]
    assert controller.state is ExchangeState.IDLE


def test_cancelled_clear_keeps_transcript_and_unblocks(make_controller, transport):
    transport.gate = threading.Event()
    controller = make_controller()
    before_messages = controller.messages
    before_thread = controller.thread_id

    async def scenario():
        task = asyncio.create_task(controller.clear())
        await asyncio.sleep(0.01)
        assert controller.is_busy
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

        assert not controller.is_busy
        transport.gate.set()
        return await controller.submit("hello")

    assert asyncio.run(scenario()) is True
    assert controller.thread_id == before_thread
    assert controller.messages[: len(before_messages)] == before_messages
    assert [q[0] for q in transport.queries] == ["hello"]
# ---------------------------------------------------------------------------
# Scenario C: failed exchange
# ---------------------------------------------------------------------------


def test_failed_query_appends_error_and_sets_banner(
    make_controller, transport, transport_error, texts, storage
):
    transport.replies = [transport_error]
    controller = make_controller()
    before_thread = controller.thread_id

    assert asyncio.run(controller.submit("x")) is True

    assert _texts_of(controller)[-2:] == [("x", True), (texts.error_reply, False)]
    assert len(controller.messages) == 3
    assert controller.thread_id == before_thread
    assert controller.state is ExchangeState.ERROR_DISPLAYED
    assert controller.error_banner == texts.error_banner
    assert json.loads(storage.data[MESSAGES_KEY])[-1]["text"] == texts.error_reply


def test_any_exception_counts_as_transport_failure(make_controller, transport, texts):
    transport.replies = [TimeoutError("read timed out"), RuntimeError("boom"), "not an object"]
    controller = make_controller()

    for text in ("a", "b", "c"):
        asyncio.run(controller.submit(text))

    errors = [m.text for m in controller.messages if not m.is_user][1:]
    assert errors == [texts.error_reply] * 3


def test_error_banner_is_advisory(make_controller, transport, transport_error):
    transport.replies = [transport_error, {"response": "back again"}]
    controller = make_controller()

    asyncio.run(controller.submit("x"))
    assert controller.state is ExchangeState.ERROR_DISPLAYED

    assert asyncio.run(controller.submit("retry")) is True
    assert controller.state is ExchangeState.IDLE
    assert controller.error_banner is None
    assert controller.messages[-1].text == "back again"


def test_dismiss_error_returns_to_idle(make_controller, transport, transport_error):
    transport.replies = [transport_error]
    controller = make_controller()
    asyncio.run(controller.submit("x"))

    controller.dismiss_error()

    assert controller.state is ExchangeState.IDLE
    assert controller.error_banner is None


# ---------------------------------------------------------------------------
# Scenario D: clear
# ---------------------------------------------------------------------------


def test_successful_clear_resets_session(make_controller, transport, storage):
    controller = make_controller()
    asyncio.run(controller.submit("hello"))
    old_thread = controller.thread_id

    assert asyncio.run(controller.clear()) is True

    assert transport.clears == [old_thread]
    assert _texts_of(controller) == [(GREETING, False)]
    assert controller.thread_id != old_thread
    assert controller.state is ExchangeState.IDLE
    assert json.loads(storage.data[MESSAGES_KEY]) == [
        {"id": 1, "text": GREETING, "isUser": False}
    ]
    assert storage.data[THREAD_ID_KEY] == controller.thread_id


def test_failed_clear_leaves_everything_untouched(make_controller, transport, transport_error, storage):
    transport.clear_error = transport_error
    controller = make_controller()
    asyncio.run(controller.submit("keep me"))
    before_messages = controller.messages
    before_thread = controller.thread_id
    before_storage = dict(storage.data)

    assert asyncio.run(controller.clear()) is False

    assert controller.messages == before_messages
    assert controller.thread_id == before_thread
    assert storage.data == before_storage
    assert not controller.is_busy
    assert controller.error_banner is None


# ---------------------------------------------------------------------------
# Persistence interplay
# ---------------------------------------------------------------------------


def test_restart_restores_transcript(make_controller, store, transport):
    transport.replies = [{"response": "remembered", "thread_id": "t-9"}]
    controller = make_controller()
    asyncio.run(controller.submit("remember this"))

    reloaded = ExchangeController(SessionStore(store.storage, greeting_text=GREETING), transport)

    assert reloaded.messages == controller.messages
    assert reloaded.thread_id == "t-9"


def test_storage_failure_degrades_to_memory(transport, texts):
    storage = FailingStorage()
    store = SessionStore(storage, greeting_text=GREETING)
    controller = ExchangeController(store, transport, texts=texts)

    asyncio.run(controller.submit("one"))
    asyncio.run(controller.submit("two"))

    assert store.degraded is True
    assert storage.write_attempts == 1
    assert len(controller.messages) == 5


# ---------------------------------------------------------------------------
# Observer
# ---------------------------------------------------------------------------


def test_on_change_sees_every_step(make_controller):
    seen = []
    controller = make_controller(on_change=lambda c: seen.append(c.state))

    asyncio.run(controller.submit("hello"))

    assert seen == [ExchangeState.SENDING, ExchangeState.IDLE]


def test_failing_on_change_does_not_break_exchange(make_controller):
    def explode(_controller):
        raise ValueError("render bug")

    controller = make_controller(on_change=explode)

    assert asyncio.run(controller.submit("hello")) is True
    assert controller.state is ExchangeState.IDLE
    assert len(controller.messages) == 3
