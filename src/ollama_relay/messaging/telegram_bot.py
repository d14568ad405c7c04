"""Telegram transport built on python-telegram-bot."""

from __future__ import annotations

import logging

from telegram import Update
from telegram.constants import ChatAction
from telegram.error import TelegramError
from telegram.ext import (
    Application,
    ApplicationBuilder,
    ContextTypes,
    MessageHandler as TelegramMessageHandler,
    filters,
)

from ollama_relay.chat.models import ChatId

from .base import BotMessage, BotUser, MessagePlatform, MessagingBot

logger = logging.getLogger(__name__)

TELEGRAM_MAX_MESSAGE_LENGTH = 4096


def split_message(text: str, limit: int = TELEGRAM_MAX_MESSAGE_LENGTH) -> list[str]:
    """Split text into chunks Telegram will accept.

    Breaks at the last newline inside the limit when there is one, otherwise
    hard-splits at the limit.
    """
    chunks = []
    while len(text) > limit:
        cut = text.rfind("\n", 0, limit)
        if cut <= 0:
            cut = limit
        chunks.append(text[:cut])
        text = text[cut:].lstrip("\n")
    if text:
        chunks.append(text)
    return chunks


class TelegramBot(MessagingBot):
    """Long-polling Telegram bot.

    Every text message, commands included, is converted to a BotMessage and
    passed to the registered callback. Updates are processed concurrently so
    one slow completion does not hold up other chats.
    """

    def __init__(self, token: str, name: str = "Ollama Relay"):
        """Initialize the bot.

        Args:
            token: Telegram bot token from @BotFather.
            name: Display name used in logs.
        """
        super().__init__(name)
        self.token = token
        self._app: Application | None = None

    def build_application(self) -> Application:
        """Create the python-telegram-bot application with handlers attached."""
        app = ApplicationBuilder().token(self.token).concurrent_updates(True).build()
        # Edited messages are not relayed.
        app.add_handler(
            TelegramMessageHandler(filters.UpdateType.MESSAGE & filters.TEXT, self._on_message)
        )
        app.add_error_handler(self._on_error)
        return app

    @property
    def application(self) -> Application:
        if self._app is None:
            self._app = self.build_application()
        return self._app

    @staticmethod
    def to_bot_message(update: Update) -> BotMessage | None:
        """Convert a Telegram update into a BotMessage, or None if it has no text."""
        message = update.effective_message
        chat = update.effective_chat
        if message is None or chat is None or not message.text:
            return None

        user = None
        if update.effective_user is not None:
            tg_user = update.effective_user
            user = BotUser(
                id=str(tg_user.id),
                platform=MessagePlatform.TELEGRAM,
                username=tg_user.username,
                display_name=tg_user.full_name,
            )

        return BotMessage(
            chat_id=chat.id,
            content=message.text,
            platform=MessagePlatform.TELEGRAM,
            id=str(message.message_id),
            user=user,
        )

    async def _on_message(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        bot_message = self.to_bot_message(update)
        if bot_message is None:
            return
        await self.dispatch(bot_message)

    async def _on_error(self, update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
        logger.error("Unhandled error while processing update", exc_info=context.error)

    async def send_message(self, chat_id: ChatId, text: str) -> bool:
        """Send text to a chat, split into Telegram-sized chunks."""
        try:
            for chunk in split_message(text):
                await self.application.bot.send_message(chat_id=chat_id, text=chunk)
        except TelegramError as e:
            logger.error("Failed to send message to chat %s: %s", chat_id, e)
            return False
        return True

    async def send_typing(self, chat_id: ChatId) -> None:
        await self.application.bot.send_chat_action(chat_id=chat_id, action=ChatAction.TYPING)

    async def start(self) -> None:
        """Initialize the application and start long polling."""
        app = self.application
        await app.initialize()
        await app.start()
        await app.updater.start_polling()
        self._running = True
        logger.info("Telegram bot %s is running", self.name)

    async def stop(self) -> None:
        """Stop polling and shut the application down."""
        if self._app is None:
            return
        app = self._app
        if app.updater is not None and app.updater.running:
            await app.updater.stop()
        if app.running:
            await app.stop()
        await app.shutdown()
        self._running = False
        logger.info("Telegram bot %s stopped", self.name)


def create_telegram_bot(token: str, name: str = "Ollama Relay") -> TelegramBot:
    """Create a Telegram bot for the given token."""
    return TelegramBot(token=token, name=name)
