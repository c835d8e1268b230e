# chat_client/utils/timers.py
# -*- coding: utf-8 -*-
"""
Assistant Chat Client — timing utilities
----------------------------------------
Lightweight helper for measuring how long a remote exchange took.
"""

from __future__ import annotations

import logging
import time
from contextlib import ContextDecorator
from typing import Optional


class Stopwatch(ContextDecorator):
    """
    Simple stopwatch context manager.

    Example:
        from chat_client.utils import Stopwatch, get_logger

        logger = get_logger(__name__)

        with Stopwatch("query round-trip", logger):
            transport.submit_query(text, thread_id)

    This will log something like:
        query round-trip took 0.237 s
    """

    def __init__(
        self,
        label: str,
        logger: Optional[logging.Logger] = None,
        level: int = logging.INFO,
    ) -> None:
        self.label = label
        self.logger = logger or logging.getLogger(__name__)
        self.level = level
        self._start: float = 0.0

    def __enter__(self) -> "Stopwatch":
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, exc_tb) -> None:  # type: ignore[override]
        elapsed = time.perf_counter() - self._start
        self.logger.log(self.level, "%s took %.3f s", self.label, elapsed)
