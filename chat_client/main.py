# chat_client/main.py
# -*- coding: utf-8 -*-
"""
Assistant Chat Client — wiring
------------------------------
This file puts the pieces together from Settings:

- JsonFileStorage at settings.state_path
- SessionStore with the configured greeting
- HttpAssistantTransport at settings.api_base_url
- ExchangeController on top

Hosts (the dev console, a GUI, tests) call create_controller() and then
drive the controller with `await controller.submit(...)` / `clear()`.
"""

from __future__ import annotations

from typing import Callable, Optional

from chat_client.core.config import Settings, settings as default_settings
from chat_client.core.controller import ExchangeController
from chat_client.core.types import TranscriptTexts
from chat_client.providers import AssistantTransport, HttpAssistantTransport
from chat_client.runtime_state import JsonFileStorage, KeyValueStorage, SessionStore
from chat_client.utils import get_logger

logger = get_logger(__name__)


def create_controller(
    config: Optional[Settings] = None,
    *,
    transport: Optional[AssistantTransport] = None,
    storage: Optional[KeyValueStorage] = None,
    on_change: Optional[Callable[[ExchangeController], None]] = None,
) -> ExchangeController:
    """
    Controller factory.

    `transport` and `storage` default to the HTTP adapter and the JSON state
    file from `config`; pass your own to swap either side.
    """
    cfg = config or default_settings

    if storage is None:
        storage = JsonFileStorage(cfg.state_path)
    if transport is None:
        transport = HttpAssistantTransport(
            cfg.api_base_url,
            query_path=cfg.query_path,
            clear_path=cfg.clear_path,
            timeout_s=cfg.request_timeout_s,
        )

    store = SessionStore(storage, greeting_text=cfg.greeting_text)
    controller = ExchangeController(
        store,
        transport,
        texts=TranscriptTexts.from_settings(cfg),
        on_change=on_change,
    )
    logger.info(
        "Chat controller ready (env=%s, api=%s, thread=%s, messages=%d)",
        cfg.environment,
        cfg.api_base_url,
        controller.thread_id,
        len(controller.messages),
    )
    return controller
