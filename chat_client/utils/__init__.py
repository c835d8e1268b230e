# chat_client/utils/__init__.py
# -*- coding: utf-8 -*-
"""
Assistant Chat Client — Utility toolbox
---------------------------------------
Shared helper functions used across the client:

- file_io   : safe JSON read + atomic JSON write
- logging   : central logging configuration
- timers    : small timing helper for exchange latency

Import from here when it makes sense, e.g.:

    from chat_client.utils import setup_logging, read_json_safely
"""

from __future__ import annotations

from .file_io import (  # noqa: F401
    read_json_safely,
    write_json_atomic,
)

from .logging import (  # noqa: F401
    setup_logging,
    get_logger,
)

from .timers import (  # noqa: F401
    Stopwatch,
)
