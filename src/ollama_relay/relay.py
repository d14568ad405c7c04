"""Assembles the relay components from settings."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from ollama_relay.chat.session_store import SessionStore
from ollama_relay.config.settings import Settings
from ollama_relay.messaging.base import MessagingBot
from ollama_relay.messaging.handler import MessageHandler
from ollama_relay.messaging.telegram_bot import create_telegram_bot
from ollama_relay.providers.base import Provider
from ollama_relay.providers.ollama_provider import OllamaProvider

logger = logging.getLogger(__name__)


@dataclass
class Relay:
    """The wired-up relay: one session store, one provider, one bot."""

    sessions: SessionStore
    provider: Provider
    bot: MessagingBot
    handler: MessageHandler

    async def serve(self) -> None:
        """Run until the bot stops or the task is cancelled."""
        try:
            await self.bot.start()
            logger.info("🤖 Telegram Ollama relay is running...")
            while self.bot.is_running:
                await asyncio.sleep(1)
        finally:
            await self.bot.stop()
            await self.provider.close()


def create_relay(settings: Settings, bot: MessagingBot | None = None) -> Relay:
    """Build the relay described by ``settings``.

    Args:
        settings: Loaded settings; must carry a Telegram token unless ``bot`` is given.
        bot: Transport override, mainly for tests.

    Raises:
        ValueError: No bot was given and no Telegram token is configured.
    """
    if bot is None:
        if not settings.has_telegram_token:
            raise ValueError("TELEGRAM_BOT_TOKEN is not set")
        bot = create_telegram_bot(settings.telegram_bot_token, name=settings.app_name)

    sessions = SessionStore(
        default_model=settings.ollama_default_model,
        max_history_turns=settings.max_history_turns,
    )
    provider = OllamaProvider(
        base_url=settings.ollama_base_url,
        timeout=settings.ollama_timeout,
    )
    handler = MessageHandler(sessions, provider, bot)
    bot.set_message_callback(handler.handle_message)

    return Relay(sessions=sessions, provider=provider, bot=bot, handler=handler)
