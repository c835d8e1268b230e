# chat_client/utils/file_io.py
# -*- coding: utf-8 -*-
"""
Assistant Chat Client — file_io utilities
-----------------------------------------
Helpers for the small JSON state file that backs the chat session.

Goals:
- Atomic writes (temp file + rename) so a crash never leaves half a file.
- Tolerant reads: on any read/parse error, log and return a default.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def read_json_safely(
    path: Path,
    default: Optional[T] = None,
    *,
    log_missing: bool = False,
) -> Optional[T]:
    """
    Read JSON from a file and return the parsed object.

    Behaviour:
    - If the file does not exist:
        - returns `default`
        - optionally logs at INFO level when log_missing=True
    - If reading or parsing fails:
        - logs at WARNING level
        - returns `default`
    """
    if not path.is_file():
        if log_missing:
            logger.info("read_json_safely: file not found: %s", path)
        return default

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        logger.warning("read_json_safely: failed to read %s: %s", path, exc)
        return default

    try:
        return json.loads(text)  # type: ignore[return-value]
    except json.JSONDecodeError as exc:
        logger.warning("read_json_safely: invalid JSON in %s: %s", path, exc)
        return default


def write_json_atomic(path: Path, data: Dict[str, Any]) -> None:
    """
    Write JSON to disk in an atomic-ish way:

    - ensures parent directory exists
    - writes to a temporary file next to the target
    - renames the temp file to the final path

    Raises OSError on failure so the caller decides how to degrade.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logger.error("write_json_atomic: failed to create dir %s: %s", path.parent, exc)
        raise

    tmp_path = path.with_suffix(path.suffix + ".tmp")

    try:
        json_text = json.dumps(data, ensure_ascii=False, indent=2)
        tmp_path.write_text(json_text, encoding="utf-8")
        tmp_path.replace(path)
    except OSError as exc:
        logger.error("write_json_atomic: failed to write %s: %s", path, exc)
        raise
