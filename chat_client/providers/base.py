# chat_client/providers/base.py
# -*- coding: utf-8 -*-
"""
Assistant Chat Client — Transport contract
------------------------------------------
The controller only knows these two operations. Any object with this shape
(HTTP adapter, test fake, ...) can drive a session.

- submit_query(text, thread_id) -> {"response": str, "thread_id"?: str}
- clear_session(thread_id)      -> None

Implementations signal every failure (network, non-2xx, timeout, bad body)
with TransportError. The controller also tolerates any other exception.
"""

from __future__ import annotations

from typing import Any, Dict, Protocol


class TransportError(Exception):
    """Raised when a remote call to the assistant service fails."""


class AssistantTransport(Protocol):
    def submit_query(self, text: str, thread_id: str) -> Dict[str, Any]: ...

    def clear_session(self, thread_id: str) -> None: ...
