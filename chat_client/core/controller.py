# chat_client/core/controller.py
# -*- coding: utf-8 -*-
"""
Assistant Chat Client — Exchange Controller
-------------------------------------------
Runs the exchange state machine (transitions.py) against a real transport
and a real session store.

Flow for one submission:

    submit(text)
      -> apply(Submitted)          user message appended + saved, SENDING
      -> await transport call      (worker thread; event loop stays free)
      -> apply(QuerySucceeded)     reply appended, thread id adopted, saved
         or apply(QueryFailed)     error message appended, banner set, saved

Flow for clear():

    clear()
      -> apply(ClearRequested)     refused while anything is in flight
      -> await transport call
      -> success: SessionStore.reset() then apply(ClearSucceeded)
         failure: logged, apply(ClearFailed); transcript untouched

Every remote failure (TransportError or anything else the transport raises)
is recovered here. Nothing from the transport reaches the caller.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

from chat_client.core.config import settings
from chat_client.models import ChatSession, QueryResponse
from chat_client.providers import AssistantTransport
from chat_client.runtime_state import SessionStore
from chat_client.utils import Stopwatch

from . import transitions
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


class ExchangeController:
    """
    One chat session's controller.

    Parameters
    ----------
    store:
        SessionStore used to load the initial session and persist changes.
    transport:
        Anything implementing AssistantTransport. Its calls are blocking and
        are run with asyncio.to_thread.
    texts:
        Transcript texts; defaults to the configured ones.
    on_change:
        Optional callback invoked with the controller after every change of
        state (used by a UI to re-render).
    """

    def __init__(
        self,
        store: SessionStore,
        transport: AssistantTransport,
        *,
        texts: Optional[TranscriptTexts] = None,
        on_change: Optional[Callable[["ExchangeController"], None]] = None,
    ) -> None:
        self.store = store
        self.transport = transport
        self.texts = texts or TranscriptTexts.from_settings(settings)
        self.on_change = on_change
        self._snapshot = Snapshot(session=store.load())

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    @property
    def session(self) -> ChatSession:
        return self._snapshot.session

    @property
    def thread_id(self) -> str:
        return self._snapshot.session.thread_id

    @property
    def messages(self):
        return self._snapshot.session.messages

    @property
    def state(self) -> ExchangeState:
        return self._snapshot.state

    @property
    def error_banner(self) -> Optional[str]:
        return self._snapshot.error_banner

    @property
    def input_buffer(self) -> str:
        return self._snapshot.input_text

    @property
    def is_busy(self) -> bool:
        return self._snapshot.busy

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def set_input(self, text: str) -> None:
        self._dispatch(InputChanged(text))

    def dismiss_error(self) -> None:
        self._dispatch(ErrorDismissed())

    async def submit(self, text: Optional[str] = None) -> bool:
        """
        Send `text` (or the input buffer when None) as one exchange.

        Returns False when nothing was sent (blank text, or another call in
        flight). Returns True once the exchange has settled, whether the
        assistant answered or the call failed.
        If the awaiting task is cancelled, the exchange is settled as a
        failure before CancelledError propagates.
        """
        transition = self._dispatch(Submitted(text))
        effect = transition.effect
        if not isinstance(effect, SubmitQuery):
            return False

        logger.info(
            "[Exchange] Sending query (thread=%s, request=%s, chars=%d)",
            effect.thread_id,
            effect.request_id,
            len(effect.text),
        )
        await self._run_query(effect)
        return True

    async def clear(self) -> bool:
        """
        Ask the service to drop the current thread, then reset locally.

        Returns True if the session was reset. On remote failure the
        transcript and thread id stay exactly as they were.
        """
        transition = self._dispatch(ClearRequested())
        effect = transition.effect
        if not isinstance(effect, ClearSession):
            return False

        try:
            await asyncio.to_thread(self.transport.clear_session, effect.thread_id)
        except asyncio.CancelledError:
            logger.warning("[Exchange] Clear cancelled (thread=%s)", effect.thread_id)
            self._dispatch(ClearFailed("cancelled"))
            raise
        except Exception as exc:  # noqa: BLE001 - any transport failure
            logger.error("[Exchange] Failed to clear chat (thread=%s): %s", effect.thread_id, exc)
            self._dispatch(ClearFailed(str(exc)))
            return False

        fresh = self.store.reset()
        self._dispatch(ClearSucceeded(fresh))
        logger.info(
            "[Exchange] Chat cleared (old thread=%s, new thread=%s)",
            effect.thread_id,
            fresh.thread_id,
        )
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _run_query(self, effect: SubmitQuery) -> None:
        try:
            with Stopwatch("[Exchange] query round-trip", logger, logging.DEBUG):
                raw = await asyncio.to_thread(
                    self.transport.submit_query, effect.text, effect.thread_id
                )
            # A reply with no body is still a reply: fallback text, same thread.
            payload = QueryResponse.model_validate(raw if raw is not None else {})
        except asyncio.CancelledError:
            # Caller gave up (wait_for timeout, shutdown): settle as a failure.
            logger.warning(
                "[Exchange] Query cancelled (thread=%s, request=%s)",
                effect.thread_id,
                effect.request_id,
            )
            self._dispatch(QueryFailed("cancelled", effect.request_id))
            raise
        except Exception as exc:  # noqa: BLE001 - any transport failure
            logger.warning(
                "[Exchange] Query failed (thread=%s, request=%s): %s",
                effect.thread_id,
                effect.request_id,
                exc,
            )
            self._dispatch(QueryFailed(str(exc), effect.request_id))
            return

        if payload.thread_id and payload.thread_id != effect.thread_id:
            logger.info(
                "[Exchange] Service assigned thread %s (was %s)",
                payload.thread_id,
                effect.thread_id,
            )
        self._dispatch(QuerySucceeded(payload, effect.request_id))

    def _dispatch(self, event: Event) -> Transition:
        transition = transitions.apply(self._snapshot, event, self.texts)
        changed = transition.snapshot is not self._snapshot
        self._snapshot = transition.snapshot

        if transition.persist:
            self.store.save(self._snapshot.session)

        if changed and self.on_change is not None:
            try:
                self.on_change(self)
            except Exception:  # noqa: BLE001
                logger.exception("[Exchange] on_change callback failed")

        return transition
