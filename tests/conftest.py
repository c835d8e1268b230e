"""Shared fixtures: fake transport, in-memory storage, controller factory."""

from __future__ import annotations

import threading
from typing import Any, Dict, List, Optional, Tuple

import pytest

from chat_client.core.config import Settings
from chat_client.core.controller import ExchangeController
from chat_client.core.types import TranscriptTexts
from chat_client.providers import TransportError
from chat_client.runtime_state import MemoryStorage, SessionStore, StorageUnavailable

GREETING = "Hi! I'm the test assistant."


class FakeTransport:
    """
    Scripted AssistantTransport.

    `replies` is consumed in order by submit_query: a dict (or None) is
    returned, an exception instance is raised. When `gate` is set to a
    threading.Event, calls block until it is released.
    """

    def __init__(self, replies: Optional[List[Any]] = None) -> None:
        self.replies: List[Any] = list(replies or [])
        self.clear_error: Optional[BaseException] = None
        self.queries: List[Tuple[str, str]] = []
        self.clears: List[str] = []
        self.gate: Optional[threading.Event] = None

    def _wait(self) -> None:
        if self.gate is not None:
            self.gate.wait(timeout=5)

    def submit_query(self, text: str, thread_id: str) -> Dict[str, Any]:
        self.queries.append((text, thread_id))
        self._wait()
        reply = self.replies.pop(0) if self.replies else {"response": "ok"}
        if isinstance(reply, BaseException):
            raise reply
        return reply

    def clear_session(self, thread_id: str) -> None:
        self.clears.append(thread_id)
        self._wait()
        if self.clear_error is not None:
            raise self.clear_error


class FailingStorage(MemoryStorage):
    """Reads fine, every write fails."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        super().__init__(initial)
        self.write_attempts = 0

    def set_many(self, items) -> None:
        self.write_attempts += 1
        raise StorageUnavailable("quota exceeded")


@pytest.fixture
def texts() -> TranscriptTexts:
    return TranscriptTexts.from_settings(Settings())


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def store(storage) -> SessionStore:
    return SessionStore(storage, greeting_text=GREETING)


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def make_controller(store, transport, texts):
    def _make(**kwargs) -> ExchangeController:
        return ExchangeController(store, transport, texts=texts, **kwargs)

    return _make


@pytest.fixture
def transport_error() -> TransportError:
    return TransportError("HTTP 502 from /chat/query: bad gateway")
