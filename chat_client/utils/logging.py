# chat_client/utils/logging.py
# -*- coding: utf-8 -*-
"""
Assistant Chat Client — logging utilities
-----------------------------------------
Library modules only call get_logger(__name__) and never configure handlers,
so a host application keeps control of its own logging. The dev console calls
setup_logging() once at start-up with its --log-level: one timestamped
"[LEVEL] logger: message" format on the root logger (DEBUG when called with
debug=settings.debug and no explicit level, INFO otherwise), and the
urllib3/requests loggers held at CHAT_CLIENT_NOISY_LOG_LEVEL (WARNING by
default) so connection-pool chatter stays out of the transcript.
"""

from __future__ import annotations

import logging
import os
from typing import Optional


def setup_logging(
    *,
    debug: bool = False,
    level: Optional[int] = None,
) -> None:
    """
    Configure root logging for the process.

    Parameters
    ----------
    debug:
        If True, default log level becomes DEBUG, otherwise INFO.
        This is typically wired from settings.debug.
    level:
        Optional explicit logging level (overrides debug flag) such as
        logging.DEBUG or logging.WARNING.

    Calling it more than once only adjusts levels.
    """
    if level is not None:
        base_level = level
    else:
        base_level = logging.DEBUG if debug else logging.INFO

    fmt = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"

    for noisy in ("urllib3", "requests"):
        logging.getLogger(noisy).setLevel(
            os.getenv("CHAT_CLIENT_NOISY_LOG_LEVEL", "WARNING")
        )

    root = logging.getLogger()
    if root.handlers:
        root.setLevel(base_level)
        for h in root.handlers:
            h.setLevel(base_level)
        return

    logging.basicConfig(
        level=base_level,
        format=fmt,
        datefmt=datefmt,
    )


def get_logger(name: str) -> logging.Logger:
    """
    Small convenience wrapper around logging.getLogger.

    Usage:
        from chat_client.utils import get_logger
        logger = get_logger(__name__)
    """
    return logging.getLogger(name)
