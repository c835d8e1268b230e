# chat_client/providers/http_assistant.py
# -*- coding: utf-8 -*-
"""
Assistant Chat Client — HTTP transport (requests)
-------------------------------------------------
This module is the ONLY place that knows how to talk to the assistant
service over HTTP.

Endpoints (relative to the configured base URL):

    POST /chat/query   {"query": "...", "thread_id": "..."}
                       -> {"response": "...", "thread_id": "..."}
    POST /chat/clear   {"thread_id": "..."}

Responsibilities:
- Build the request (URL, JSON payload, timeout).
- Turn every failure into TransportError (one category, detail in message).

No retries and no auth headers: a failed call is reported once and the
controller decides what the user sees.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from chat_client.core.config import settings

from .base import TransportError

logger = logging.getLogger(__name__)


class HttpAssistantTransport:
    """
    requests-based implementation of AssistantTransport.

    Parameters
    ----------
    base_url:
        Assistant service root, e.g. "http://localhost:8000".
    timeout_s:
        Per-request timeout in seconds.
    session:
        Optional requests.Session (connection pooling, test injection).
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        query_path: Optional[str] = None,
        clear_path: Optional[str] = None,
        timeout_s: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.query_path = query_path or settings.query_path
        self.clear_path = clear_path or settings.clear_path
        self.timeout_s = timeout_s if timeout_s is not None else settings.request_timeout_s
        self._http = session

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def submit_query(self, text: str, thread_id: str) -> Dict[str, Any]:
        """
        Send one user query and return the decoded JSON object.

        Raises
        ------
        TransportError
            On connection errors, timeouts, non-2xx status, or a body that
            is not a JSON object.
        """
        resp = self._post(self.query_path, {"query": text, "thread_id": thread_id})

        try:
            data = resp.json()
        except ValueError as exc:
            raise TransportError("Query returned non-JSON response.") from exc

        if not isinstance(data, dict):
            raise TransportError(
                f"Query returned {type(data).__name__}, expected a JSON object."
            )
        return data

    def clear_session(self, thread_id: str) -> None:
        """Ask the service to forget `thread_id`. Body of the reply is ignored."""
        self._post(self.clear_path, {"thread_id": thread_id})

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _post(self, path: str, payload: Dict[str, Any]) -> requests.Response:
        url = f"{self.base_url}{path}"
        poster = self._http.post if self._http is not None else requests.post

        logger.debug("[HttpTransport] POST %s thread_id=%s", url, payload.get("thread_id"))
        try:
            resp = poster(url, json=payload, timeout=self.timeout_s)
        except requests.RequestException as exc:
            raise TransportError(f"HTTP error calling {path}: {exc}") from exc

        if not 200 <= resp.status_code < 300:
            text_preview = resp.text[:200].replace("\n", " ")
            raise TransportError(f"HTTP {resp.status_code} from {path}: {text_preview}")

        return resp
