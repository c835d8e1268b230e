# chat_client/runtime_state/sessions.py
# -*- coding: utf-8 -*-
"""
Assistant Chat Client — Session Store
-------------------------------------

Owns the durable copy of the chat session: the ordered message log and the
thread id.

Purpose
~~~~~~~
- Restore the transcript and thread id after a reload.
- Produce the fresh-session state (greeting + new thread id).
- Persist after every mutation without ever breaking the chat flow.

Design notes
~~~~~~~~~~~~
- Storage is injected (see storage.KeyValueStorage); this module never
  touches files directly.
- Two keys are used: `chatMessages` (JSON list) and `chatThreadId` (string).
  Each key is restored independently: a missing thread id with a valid log
  keeps the log and generates a new id.
- Malformed persisted state is discarded silently (logged only).
- The first failed write switches the store into in-memory-only mode for
  the rest of the process (`degraded`).
"""

from __future__ import annotations

import json
import logging
import random
import time
import uuid
from typing import List, Optional

from pydantic import TypeAdapter, ValidationError

from chat_client.core.config import DEFAULT_GREETING
from chat_client.models import ChatSession, Message

from .storage import KeyValueStorage, StorageUnavailable

logger = logging.getLogger(__name__)

MESSAGES_KEY = "chatMessages"
THREAD_ID_KEY = "chatThreadId"

_MESSAGE_LIST = TypeAdapter(List[Message])


def generate_thread_id() -> str:
    """
    Return a new opaque thread id.

    Random UUID4 when the OS has a secure random source; otherwise
    `thread-<epoch ms>-<6 hex chars>`.
    """
    try:
        return str(uuid.uuid4())
    except (NotImplementedError, OSError) as exc:
        logger.warning(
            "[SessionStore] Secure random source unavailable (%s); "
            "using timestamp thread id.",
            exc,
        )
        now_ms = int(time.time() * 1000)
        return f"thread-{now_ms}-{random.getrandbits(24):06x}"


class SessionStore:
    """
    Load / save / reset the chat session through a key-value storage.

    Parameters
    ----------
    storage:
        Any KeyValueStorage (JsonFileStorage, MemoryStorage, ...).
    greeting_text:
        Text of the first assistant message in a fresh session.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        greeting_text: str = DEFAULT_GREETING,
    ) -> None:
        self.storage = storage
        self.greeting_text = greeting_text
        self.degraded = False

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @staticmethod
    def generate_thread_id() -> str:
        return generate_thread_id()

    def fresh_session(self) -> ChatSession:
        return ChatSession.fresh(generate_thread_id(), self.greeting_text)

    def load(self) -> ChatSession:
        """
        Return the persisted session, or a fresh one.

        Never raises: unreadable storage and malformed data both fall back
        to a fresh session.
        """
        raw_messages = self._read(MESSAGES_KEY)
        raw_thread_id = self._read(THREAD_ID_KEY)

        messages = self._parse_messages(raw_messages) if raw_messages is not None else None
        if messages is None:
            session = self.fresh_session()
            logger.info(
                "[SessionStore] No usable saved session; starting fresh (thread=%s).",
                session.thread_id,
            )
            return session

        thread_id = raw_thread_id if raw_thread_id and raw_thread_id.strip() else None
        if thread_id is None:
            thread_id = generate_thread_id()
            logger.info(
                "[SessionStore] Saved log has no thread id; generated %s.", thread_id
            )

        session = ChatSession(thread_id=thread_id, messages=messages)
        logger.info(
            "[SessionStore] Restored %d messages (thread=%s).",
            len(session.messages),
            session.thread_id,
        )
        return session

    def save(self, session: ChatSession) -> None:
        """
        Persist both keys in one write. Storage failures are logged once and then the
        store stays in memory-only mode; nothing is raised.
        """
        if self.degraded:
            return

        payload = json.dumps(session.messages_json_list(), ensure_ascii=False)
        try:
            self.storage.set_many({MESSAGES_KEY: payload, THREAD_ID_KEY: session.thread_id})
        except (StorageUnavailable, OSError) as exc:
            self.degraded = True
            logger.warning(
                "[SessionStore] Persistence unavailable (%s); continuing in memory only.",
                exc,
            )

    def reset(self) -> ChatSession:
        """Fresh session (greeting + new thread id), persisted and returned."""
        session = self.fresh_session()
        self.save(session)
        logger.info("[SessionStore] Session reset (thread=%s).", session.thread_id)
        return session

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _read(self, key: str) -> Optional[str]:
        try:
            return self.storage.get(key)
        except (StorageUnavailable, OSError) as exc:
            logger.warning("[SessionStore] Failed to read %s: %s", key, exc)
            return None

    @staticmethod
    def _parse_messages(raw: str) -> Optional[List[Message]]:
        # Strict: "7" is not an id and "yes" is not a bool.
        try:
            messages = _MESSAGE_LIST.validate_json(raw, strict=True)
        except ValidationError as exc:
            logger.warning(
                "[SessionStore] %s is malformed (%d validation errors); ignoring it.",
                MESSAGES_KEY,
                exc.error_count(),
            )
            return None

        if not messages:
            logger.warning("[SessionStore] %s is an empty list; ignoring it.", MESSAGES_KEY)
            return None
        return messages
