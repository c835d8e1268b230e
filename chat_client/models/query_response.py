# chat_client/models/query_response.py
# -*- coding: utf-8 -*-
"""
Assistant Chat Client — QueryResponse model
-------------------------------------------
Shape of a successful `submit query` reply from the assistant service:

    {"response": "Starting training", "thread_id": "abc"}

Both fields are optional. Empty strings are folded to None so callers only
ever have to check for None. Extra keys sent by the service are ignored.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator


class QueryResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    response: Optional[str] = None
    thread_id: Optional[str] = None

    @field_validator("response", "thread_id", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if value is None:
            return None
        if not isinstance(value, str):
            # Service sent something odd (number, list, ...): treat as absent.
            return None
        return value if value.strip() else None
