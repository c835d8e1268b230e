"""
Transport layer: the two remote operations the chat client depends on.
"""

from .base import AssistantTransport, TransportError
from .http_assistant import HttpAssistantTransport

__all__ = [
    "AssistantTransport",
    "TransportError",
    "HttpAssistantTransport",
]
