"""Chat module: per-chat sessions, model resolution and the conversation engine."""

from .models import ChatSession, MessageRole, Turn
from .session_store import SessionStore
from .resolver import resolve_model
from .engine import ConversationEngine

__all__ = [
    "ChatSession",
    "MessageRole",
    "Turn",
    "SessionStore",
    "resolve_model",
    "ConversationEngine",
]
