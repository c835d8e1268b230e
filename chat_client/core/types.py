# chat_client/core/types.py
# -*- coding: utf-8 -*-
"""
Assistant Chat Client — Shared type definitions
-----------------------------------------------
Central place for the small types the exchange state machine passes around:

- ExchangeState    : Idle / Sending / ErrorDisplayed
- TranscriptTexts  : fixed texts the client writes into the transcript
- Snapshot         : everything the state machine owns at one instant
- Events           : things that happened (user input, remote outcomes)
- Effects          : remote calls the executor must perform
- Transition       : result of applying one event to one snapshot
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional, Union

from chat_client.models import ChatSession, QueryResponse

if TYPE_CHECKING:
    from chat_client.core.config import Settings


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------


class ExchangeState(str, Enum):
    """Where the controller is in the send/receive cycle."""

    IDLE = "Idle"
    SENDING = "Sending"                  # one query in flight
    ERROR_DISPLAYED = "ErrorDisplayed"   # last query failed; banner shown


@dataclass(frozen=True)
class TranscriptTexts:
    """
    Texts the client itself writes.

    Attributes
    ----------
    fallback_reply:
        Assistant message used when a reply carries no response text.
    error_reply:
        Assistant-authored message appended when a query fails.
    error_banner:
        Advisory banner text shown after a failed query.
    """

    fallback_reply: str
    error_reply: str
    error_banner: str

    @classmethod
    def from_settings(cls, settings: "Settings") -> "TranscriptTexts":
        return cls(
            fallback_reply=settings.fallback_reply_text,
            error_reply=settings.error_reply_text,
            error_banner=settings.error_banner_text,
        )


@dataclass(frozen=True)
class Snapshot:
    """
    Full controller state.

    Attributes
    ----------
    session:
        Current message log + thread id.
    state:
        Exchange state (see ExchangeState).
    error_banner:
        Banner text while in ERROR_DISPLAYED, else None.
    clearing:
        True while a clear call is in flight.
    pending_request_id:
        Id of the user message whose reply is awaited (SENDING only).
    input_text:
        Pending input buffer (what the user has typed but not sent).
    """

    session: ChatSession
    state: ExchangeState = ExchangeState.IDLE
    error_banner: Optional[str] = None
    clearing: bool = False
    pending_request_id: Optional[int] = None
    input_text: str = ""

    @property
    def busy(self) -> bool:
        """True while any network-affecting call is outstanding."""
        return self.state is ExchangeState.SENDING or self.clearing


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class InputChanged:
    text: str


@dataclass(frozen=True)
class Submitted:
    # None means "send whatever is in the input buffer".
    text: Optional[str] = None


@dataclass(frozen=True)
class QuerySucceeded:
    payload: QueryResponse
    request_id: int


@dataclass(frozen=True)
class QueryFailed:
    error: str
    request_id: int


@dataclass(frozen=True)
class ClearRequested:
    pass


@dataclass(frozen=True)
class ClearSucceeded:
    # Fresh session already produced (and persisted) by SessionStore.reset().
    session: ChatSession


@dataclass(frozen=True)
class ClearFailed:
    error: str


@dataclass(frozen=True)
class ErrorDismissed:
    pass


Event = Union[
    InputChanged,
    Submitted,
    QuerySucceeded,
    QueryFailed,
    ClearRequested,
    ClearSucceeded,
    ClearFailed,
    ErrorDismissed,
]


# ---------------------------------------------------------------------------
# Effects
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SubmitQuery:
    text: str
    thread_id: str
    request_id: int


@dataclass(frozen=True)
class ClearSession:
    thread_id: str


Effect = Union[SubmitQuery, ClearSession]


@dataclass(frozen=True)
class Transition:
    """
    Outcome of one event.

    Attributes
    ----------
    snapshot:
        State after the event (the same object if nothing changed).
    effect:
        Remote call to perform next, if any.
    persist:
        True when the session changed and must be saved.
    """

    snapshot: Snapshot
    effect: Optional[Effect] = None
    persist: bool = False
