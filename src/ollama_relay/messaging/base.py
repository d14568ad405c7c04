"""Base classes shared by messaging platform integrations."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from ollama_relay.chat.models import ChatId

logger = logging.getLogger(__name__)

COMMAND_PREFIX = "/"


class MessagePlatform(str, Enum):
    """Supported messaging platforms."""

    TELEGRAM = "telegram"


@dataclass
class BotUser:
    """The author of an incoming message."""

    id: str
    platform: MessagePlatform
    username: str | None = None
    display_name: str | None = None

    @property
    def identifier(self) -> str:
        return f"{self.platform.value}:{self.id}"


@dataclass
class BotMessage:
    """An incoming chat event."""

    chat_id: ChatId
    content: str
    platform: MessagePlatform = MessagePlatform.TELEGRAM
    id: str | None = None
    user: BotUser | None = None
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def is_command(self) -> bool:
        return self.content.startswith(COMMAND_PREFIX)

    def parse_command(self) -> tuple[str, str]:
        """Split ``/name@bot args`` into ``("name", "args")``.

        The command name is lowercased and any ``@botname`` suffix is dropped.
        Arguments keep their case but are stripped.
        """
        parts = self.content[len(COMMAND_PREFIX):].split(None, 1)
        if not parts:
            return "", ""
        name = parts[0].split("@", 1)[0].lower()
        args = parts[1].strip() if len(parts) > 1 else ""
        return name, args


MessageCallback = Callable[[BotMessage], Awaitable[None]]


class MessagingBot(ABC):
    """Chat transport: delivers inbound messages and sends replies."""

    def __init__(self, name: str = "Ollama Relay"):
        self.name = name
        self._message_callback: MessageCallback | None = None
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    def set_message_callback(self, callback: MessageCallback) -> None:
        """Register the coroutine that receives every inbound message."""
        self._message_callback = callback

    async def dispatch(self, message: BotMessage) -> None:
        """Hand an inbound message to the registered callback."""
        if self._message_callback is None:
            logger.warning("No message callback set, dropping message for chat %s", message.chat_id)
            return
        await self._message_callback(message)

    @abstractmethod
    async def start(self) -> None:
        """Start receiving messages."""

    @abstractmethod
    async def stop(self) -> None:
        """Stop receiving messages and release resources."""

    @abstractmethod
    async def send_message(self, chat_id: ChatId, text: str) -> bool:
        """Send a text message to a chat.

        Returns:
            True if the message was delivered.
        """

    @abstractmethod
    async def send_typing(self, chat_id: ChatId) -> None:
        """Show a typing indicator in a chat."""
