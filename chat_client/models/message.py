# chat_client/models/message.py
# -*- coding: utf-8 -*-
"""
Assistant Chat Client — Message / ChatSession models
----------------------------------------------------
The transcript the user sees, plus the thread id that ties it to one
conversation on the assistant service.

Persisted shape
---------------
Messages are written as `{"id": 1, "text": "...", "isUser": false}` so the
stored `chatMessages` value keeps the camelCase key. Both `isUser` and
`is_user` are accepted when loading.

IMPORTANT
---------
- Both models are frozen. Every change produces a new ChatSession, so a
  snapshot handed to a caller never changes under its feet.
- A ChatSession always holds at least one message (the greeting) and a
  non-blank thread id; the validators below reject anything else.
"""

from __future__ import annotations

import time
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator

GREETING_MESSAGE_ID = 1


class Message(BaseModel):
    """One entry of the visible transcript."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
    )

    id: int = Field(
        ...,
        description="Unique, non-decreasing id within the session.",
    )
    text: str = Field(
        ...,
        description="Message body as typed by the user or sent by the assistant.",
    )
    is_user: bool = Field(
        ...,
        alias="isUser",
        description="True for user-authored messages, False for assistant/system ones.",
    )

    def to_json_dict(self) -> dict:
        """Return the persisted `{id, text, isUser}` form."""
        return self.model_dump(by_alias=True)


class ChatSession(BaseModel):
    """
    Ordered message log + thread id.

    Fields
    ------
    thread_id:
        Opaque token correlating every exchange of this conversation.
        Generated locally, may be replaced by the assistant service.
    messages:
        Append-only transcript; never empty.
    """

    model_config = ConfigDict(frozen=True)

    thread_id: str
    messages: List[Message] = Field(..., min_length=1)

    @field_validator("thread_id")
    @classmethod
    def _thread_id_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("thread_id must be a non-empty string")
        return value

    # ----------------------------------------------------------------------
    # Constructors
    # ----------------------------------------------------------------------
    @classmethod
    def fresh(cls, thread_id: str, greeting_text: str) -> "ChatSession":
        """Initial state: just the greeting, under a new thread id."""
        greeting = Message(id=GREETING_MESSAGE_ID, text=greeting_text, is_user=False)
        return cls(thread_id=thread_id, messages=[greeting])

    # ----------------------------------------------------------------------
    # Derived values
    # ----------------------------------------------------------------------
    @property
    def last_message_id(self) -> int:
        return self.messages[-1].id

    def next_message_id(self) -> int:
        """
        Id for a new user message.

        Wall-clock milliseconds, bumped past the last id so ids keep
        increasing even if the clock stalls or steps back.
        """
        now_ms = int(time.time() * 1000)
        return max(now_ms, self.last_message_id + 1)

    # ----------------------------------------------------------------------
    # Copy-on-write updates
    # ----------------------------------------------------------------------
    def with_message(self, message: Message) -> "ChatSession":
        return self.model_copy(update={"messages": [*self.messages, message]})

    def with_thread_id(self, thread_id: str) -> "ChatSession":
        if not thread_id or not thread_id.strip():
            raise ValueError("thread_id must be a non-empty string")
        return self.model_copy(update={"thread_id": thread_id})

    def messages_json_list(self) -> List[dict]:
        return [m.to_json_dict() for m in self.messages]
