"""
Runtime state package for the assistant chat client.

This package owns the durable copy of the chat session (message log +
thread id) and the storage backends it can be written to.

Typical usage:

    from chat_client.runtime_state import JsonFileStorage, SessionStore

    store = SessionStore(JsonFileStorage(settings.state_path))
    session = store.load()
    ...
    store.save(session)
"""

from .sessions import (
    MESSAGES_KEY,
    THREAD_ID_KEY,
    SessionStore,
    generate_thread_id,
)
from .storage import (
    JsonFileStorage,
    KeyValueStorage,
    MemoryStorage,
    StorageUnavailable,
)

__all__ = [
    "MESSAGES_KEY",
    "THREAD_ID_KEY",
    "SessionStore",
    "generate_thread_id",
    "JsonFileStorage",
    "KeyValueStorage",
    "MemoryStorage",
    "StorageUnavailable",
]
