"""
Data models shared by the session store, the controller and the transport.
"""

from .message import GREETING_MESSAGE_ID, ChatSession, Message
from .query_response import QueryResponse

__all__ = [
    "GREETING_MESSAGE_ID",
    "ChatSession",
    "Message",
    "QueryResponse",
]
