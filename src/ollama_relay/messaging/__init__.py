"""Messaging module for two-way bot communication.

Connects a chat platform (Telegram) to the relay: inbound messages are
routed by MessageHandler to session commands or to the model, and replies
are sent back through the same bot.

Usage:
    from ollama_relay.messaging import TelegramBot, MessageHandler

    bot = TelegramBot(token="YOUR_BOT_TOKEN")
    handler = MessageHandler(sessions, provider, bot)
    bot.set_message_callback(handler.handle_message)

    await bot.start()
"""

from .base import MessagingBot, BotMessage, BotUser, MessagePlatform
from .handler import MessageHandler
from .telegram_bot import TelegramBot, create_telegram_bot

__all__ = [
    # Base classes
    "MessagingBot",
    "BotMessage",
    "BotUser",
    "MessagePlatform",
    "MessageHandler",
    # Telegram
    "TelegramBot",
    "create_telegram_bot",
]
