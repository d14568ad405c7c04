"""In-memory store of per-chat conversation sessions."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from .models import ChatId, ChatSession, MessageRole, Turn

logger = logging.getLogger(__name__)


class SessionStore:
    """Owns every ChatSession, keyed by chat identifier.

    Sessions are created lazily on first reference and live until the
    process exits. All mutation goes through this class; in particular
    ``set_model`` is the only way to change a session's model and it always
    clears the history, since a transcript produced by one model is not
    valid context for another.

    Concurrency: the store is used from a single event loop. Callers that
    await between reading and writing a session (the backend call) should
    hold ``lock(chat_id)`` so messages for one chat are processed in order.
    """

    def __init__(self, default_model: str, max_history_turns: int = 0):
        """Initialize the store.

        Args:
            default_model: Model assigned to new sessions.
            max_history_turns: Keep at most this many turns per chat, evicting
                the oldest first. 0 disables the cap.
        """
        if max_history_turns < 0:
            raise ValueError("max_history_turns must be >= 0")
        self.default_model = default_model
        self.max_history_turns = max_history_turns
        self._sessions: dict[ChatId, ChatSession] = {}
        self._locks: dict[ChatId, asyncio.Lock] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, chat_id: object) -> bool:
        return chat_id in self._sessions

    def get_or_create(self, chat_id: ChatId) -> ChatSession:
        """Return the session for a chat, creating it on first use."""
        session = self._sessions.get(chat_id)
        if session is None:
            session = ChatSession(chat_id=chat_id, model=self.default_model)
            self._sessions[chat_id] = session
            logger.info(
                "Created session for chat %s with model %s",
                chat_id,
                session.model,
                extra={"chat_id": chat_id, "model": session.model},
            )
        return session

    def lock(self, chat_id: ChatId) -> asyncio.Lock:
        """Per-chat lock serializing message processing within one chat."""
        lock = self._locks.get(chat_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[chat_id] = lock
        return lock

    def reset(self, chat_id: ChatId) -> ChatSession:
        """Clear a chat's history, keeping its selected model."""
        session = self.get_or_create(chat_id)
        session.history.clear()
        session.updated_at = datetime.now()
        logger.info("Reset history for chat %s", chat_id, extra={"chat_id": chat_id})
        return session

    def set_model(self, chat_id: ChatId, model: str) -> ChatSession:
        """Select a model for a chat and clear its history."""
        session = self.get_or_create(chat_id)
        previous = session.model
        session.model = model
        session.history.clear()
        session.updated_at = datetime.now()
        logger.info(
            "Chat %s switched model %s -> %s",
            chat_id,
            previous,
            model,
            extra={"chat_id": chat_id, "model": model},
        )
        return session

    def append_turn(self, chat_id: ChatId, role: MessageRole, content: str) -> Turn:
        """Append a turn to a chat's history.

        When a history cap is configured the oldest turns are dropped so the
        history never exceeds it.
        """
        session = self.get_or_create(chat_id)
        turn = Turn(role=role, content=content)
        session.history.append(turn)
        if self.max_history_turns and len(session.history) > self.max_history_turns:
            evicted = len(session.history) - self.max_history_turns
            del session.history[:evicted]
            logger.debug("Evicted %d old turns for chat %s", evicted, chat_id)
        session.updated_at = datetime.now()
        return turn

    def history(self, chat_id: ChatId) -> list[dict[str, str]]:
        """Snapshot of a chat's history in backend wire format."""
        return self.get_or_create(chat_id).messages_for_api()
