# chat_client/core/transitions.py
# -*- coding: utf-8 -*-
"""
Assistant Chat Client — Exchange state machine
----------------------------------------------
Pure transition function:

    apply(snapshot, event, texts) -> Transition(snapshot', effect?, persist)

No I/O, no clock besides the message id, no logging side effects beyond
DEBUG lines. The controller (controller.py) performs the effects and feeds
their outcomes back in as new events.

Rules
-----
- Submitted      : blank text or a busy controller -> no change.
                   Otherwise append the user message, clear the input and
                   the banner, go to SENDING, emit SubmitQuery.
- QuerySucceeded : adopt the reply's thread id if it has one, append the
                   reply (or the fallback text), go to IDLE.
- QueryFailed    : append the error message, set the banner, go to
                   ERROR_DISPLAYED.
- ClearRequested : refused while busy; otherwise mark clearing and emit
                   ClearSession for the current thread id.
- ClearSucceeded : replace the session wholesale, back to IDLE.
- ClearFailed    : drop the clearing mark, nothing else.
- ErrorDismissed : ERROR_DISPLAYED -> IDLE.

Replies carry id `request_id + 1`. Outcomes for a request that is not the
pending one, and clear outcomes with no clear in flight, are ignored.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from chat_client.models import Message

from .types import (
    ClearFailed,
    ClearRequested,
    ClearSession,
    ClearSucceeded,
    ErrorDismissed,
    Event,
    ExchangeState,
    InputChanged,
    QueryFailed,
    QuerySucceeded,
    Snapshot,
    Submitted,
    SubmitQuery,
    Transition,
    TranscriptTexts,
)

logger = logging.getLogger(__name__)


def is_blank(text: object) -> bool:
    """True for None, non-strings and whitespace-only strings."""
    return not isinstance(text, str) or not text.strip()


def apply(snapshot: Snapshot, event: Event, texts: TranscriptTexts) -> Transition:
    """Apply one event. Inapplicable events return the snapshot unchanged."""
    if isinstance(event, InputChanged):
        return Transition(replace(snapshot, input_text=event.text))

    if isinstance(event, Submitted):
        return _on_submitted(snapshot, event)

    if isinstance(event, QuerySucceeded):
        return _on_query_succeeded(snapshot, event, texts)

    if isinstance(event, QueryFailed):
        return _on_query_failed(snapshot, event, texts)

    if isinstance(event, ClearRequested):
        if snapshot.busy:
            logger.debug("[Exchange] Clear refused: another call is in flight.")
            return Transition(snapshot)
        return Transition(
            replace(snapshot, clearing=True),
            effect=ClearSession(thread_id=snapshot.session.thread_id),
        )

    if isinstance(event, ClearSucceeded):
        if not snapshot.clearing:
            return Transition(snapshot)
        return Transition(
            Snapshot(session=event.session, input_text=snapshot.input_text),
        )

    if isinstance(event, ClearFailed):
        if not snapshot.clearing:
            return Transition(snapshot)
        return Transition(replace(snapshot, clearing=False))

    if isinstance(event, ErrorDismissed):
        if snapshot.state is not ExchangeState.ERROR_DISPLAYED:
            return Transition(snapshot)
        return Transition(replace(snapshot, state=ExchangeState.IDLE, error_banner=None))

    logger.debug("[Exchange] Ignoring unknown event %r", event)
    return Transition(snapshot)


# ---------------------------------------------------------------------------
# Query handling
# ---------------------------------------------------------------------------


def _on_submitted(snapshot: Snapshot, event: Submitted) -> Transition:
    text = snapshot.input_text if event.text is None else event.text

    if is_blank(text):
        return Transition(snapshot)
    if snapshot.busy:
        logger.debug("[Exchange] Submit refused: another call is in flight.")
        return Transition(snapshot)

    session = snapshot.session
    request_id = session.next_message_id()
    session = session.with_message(Message(id=request_id, text=text, is_user=True))

    new_snapshot = replace(
        snapshot,
        session=session,
        state=ExchangeState.SENDING,
        error_banner=None,
        pending_request_id=request_id,
        input_text="",
    )
    effect = SubmitQuery(text=text, thread_id=session.thread_id, request_id=request_id)
    return Transition(new_snapshot, effect=effect, persist=True)


def _is_pending(snapshot: Snapshot, request_id: int) -> bool:
    return (
        snapshot.state is ExchangeState.SENDING
        and snapshot.pending_request_id == request_id
    )


def _on_query_succeeded(
    snapshot: Snapshot, event: QuerySucceeded, texts: TranscriptTexts
) -> Transition:
    if not _is_pending(snapshot, event.request_id):
        logger.debug("[Exchange] Dropping reply for stale request %s", event.request_id)
        return Transition(snapshot)

    session = snapshot.session
    if event.payload.thread_id:
        session = session.with_thread_id(event.payload.thread_id)

    reply = Message(
        id=event.request_id + 1,
        text=event.payload.response or texts.fallback_reply,
        is_user=False,
    )
    new_snapshot = replace(
        snapshot,
        session=session.with_message(reply),
        state=ExchangeState.IDLE,
        pending_request_id=None,
    )
    return Transition(new_snapshot, persist=True)


def _on_query_failed(
    snapshot: Snapshot, event: QueryFailed, texts: TranscriptTexts
) -> Transition:
    if not _is_pending(snapshot, event.request_id):
        logger.debug("[Exchange] Dropping failure for stale request %s", event.request_id)
        return Transition(snapshot)

    error_message = Message(id=event.request_id + 1, text=texts.error_reply, is_user=False)
    new_snapshot = replace(
        snapshot,
        session=snapshot.session.with_message(error_message),
        state=ExchangeState.ERROR_DISPLAYED,
        error_banner=texts.error_banner,
        pending_request_id=None,
    )
    return Transition(new_snapshot, persist=True)
