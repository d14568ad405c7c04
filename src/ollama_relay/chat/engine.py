"""Conversation engine: relays free-text messages to the inference backend."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from ollama_relay.providers.base import EmptyCompletionError, ProviderError

from .models import ChatId, MessageRole
from .session_store import SessionStore

if TYPE_CHECKING:
    from ollama_relay.messaging.base import MessagingBot
    from ollama_relay.providers.base import Provider

logger = logging.getLogger(__name__)

FAILURE_NOTICE = "❌ Something went wrong while generating a response."
EMPTY_COMPLETION_NOTICE = "❌ The model returned an empty response."


class ConversationEngine:
    """Appends turns to a chat's history and relays completions.

    The user turn is recorded before the backend is called and is kept when
    the call fails, so the next message still carries the full context.
    An assistant turn is only recorded for a non-empty reply.
    """

    def __init__(
        self,
        sessions: SessionStore,
        provider: "Provider",
        bot: "MessagingBot",
    ):
        """Initialize the engine.

        Args:
            sessions: Session store owning the chat histories.
            provider: Inference backend.
            bot: Chat transport used for typing indicators and replies.
        """
        self.sessions = sessions
        self.provider = provider
        self.bot = bot

    async def handle_user_message(self, chat_id: ChatId, text: str) -> str | None:
        """Relay one user message and deliver the reply.

        Args:
            chat_id: Originating chat.
            text: Message text (never a command).

        Returns:
            The delivered reply, or None if a failure notice was sent instead.
        """
        session = self.sessions.get_or_create(chat_id)
        self.sessions.append_turn(chat_id, MessageRole.USER, text)

        await self._send_typing(chat_id)

        start = time.monotonic()
        try:
            reply = await self.provider.chat(session.model, self.sessions.history(chat_id))
        except EmptyCompletionError as e:
            logger.warning(
                "Empty completion for chat %s: %s",
                chat_id,
                e,
                extra={"chat_id": chat_id, "model": session.model},
            )
            await self.bot.send_message(chat_id, EMPTY_COMPLETION_NOTICE)
            return None
        except ProviderError as e:
            logger.error(
                "Completion failed for chat %s: %s",
                chat_id,
                e,
                extra={"chat_id": chat_id, "model": session.model},
            )
            await self.bot.send_message(chat_id, FAILURE_NOTICE)
            return None

        self.sessions.append_turn(chat_id, MessageRole.ASSISTANT, reply)
        logger.info(
            "Reply for chat %s from %s (%d turns)",
            chat_id,
            session.model,
            session.turn_count,
            extra={
                "chat_id": chat_id,
                "model": session.model,
                "duration_ms": int((time.monotonic() - start) * 1000),
            },
        )
        await self.bot.send_message(chat_id, reply)
        return reply

    async def _send_typing(self, chat_id: ChatId) -> None:
        """Best-effort typing indicator; failures never abort the request."""
        try:
            await self.bot.send_typing(chat_id)
        except Exception as e:
            logger.warning("Typing indicator failed for chat %s: %s", chat_id, e)
