"""Message handler that routes bot messages to session commands or the model."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ollama_relay.chat.engine import ConversationEngine
from ollama_relay.chat.resolver import resolve_model
from ollama_relay.providers.base import ProviderError

from .base import BotMessage

if TYPE_CHECKING:
    from ollama_relay.chat.session_store import SessionStore
    from ollama_relay.providers.base import Provider

    from .base import MessagingBot

logger = logging.getLogger(__name__)

MODELS_FETCH_FAILED = "❌ Failed to fetch the model list."
MODEL_SWITCH_FAILED = "❌ An error occurred while switching models."
RESET_DONE = "🧹 Conversation context has been reset."


class MessageHandler:
    """Routes incoming chat messages.

    Commands (``/start``, ``/help``, ``/models``, ``/model``, ``/current``,
    ``/reset``) are answered here; any other text goes to the
    ConversationEngine. Unknown commands are ignored and never reach the
    model. Messages for the same chat are handled one at a time.

    Usage:
        handler = MessageHandler(sessions, provider, telegram_bot)
        telegram_bot.set_message_callback(handler.handle_message)
        await telegram_bot.start()
    """

    def __init__(
        self,
        sessions: "SessionStore",
        provider: "Provider",
        bot: "MessagingBot",
        engine: ConversationEngine | None = None,
    ):
        """Initialize the message handler.

        Args:
            sessions: Session store shared with the engine.
            provider: Inference backend, used for the model catalog.
            bot: Transport used to send command replies.
            engine: Conversation engine; built from the other arguments if omitted.
        """
        self.sessions = sessions
        self.provider = provider
        self.bot = bot
        self.engine = engine or ConversationEngine(sessions, provider, bot)

    async def handle_message(self, message: BotMessage) -> None:
        """Handle an incoming message from a messaging platform.

        Args:
            message: The incoming bot message.
        """
        if not message.content or not message.content.strip():
            return

        async with self.sessions.lock(message.chat_id):
            if not message.is_command:
                await self.engine.handle_user_message(message.chat_id, message.content)
                return

            command, args = message.parse_command()
            author = message.user.identifier if message.user else "unknown"
            logger.debug(
                "Command /%s from %s in chat %s",
                command,
                author,
                message.chat_id,
                extra={"chat_id": message.chat_id, "command": command},
            )
            response = await self.handle_command(message, command, args)
            if response is None:
                logger.debug("Ignoring unknown command /%s in chat %s", command, message.chat_id)
                return
            await self.bot.send_message(message.chat_id, response)

    async def handle_command(
        self,
        message: BotMessage,
        command: str,
        args: str,
    ) -> str | None:
        """Handle a bot command.

        Args:
            message: The incoming message.
            command: Command name (without prefix).
            args: Argument text after the command, stripped.

        Returns:
            Response text, or None for an unknown command.
        """
        handlers: dict[str, Any] = {
            "start": self._cmd_start,
            "help": self._cmd_start,
            "models": self._cmd_models,
            "model": self._cmd_model,
            "current": self._cmd_current,
            "reset": self._cmd_reset,
        }

        handler = handlers.get(command.lower())
        if handler:
            logger.info(
                "Command /%s in chat %s",
                command,
                message.chat_id,
                extra={"chat_id": message.chat_id, "command": command},
            )
            return await handler(message, args)

        return None

    async def _cmd_start(self, message: BotMessage, args: str) -> str:
        """Handle /start and /help."""
        return (
            "Hello! I'm an Ollama chatbot.\n\n"
            "/model [model name] - switch the model (a name prefix is enough)\n"
            "/models - list installed models\n"
            "/current - show the model in use\n"
            "/reset - clear the conversation context\n\n"
            "Send any other message to chat with the current model."
        )

    async def _cmd_models(self, message: BotMessage, args: str) -> str:
        """Handle /models command."""
        try:
            models = await self.provider.list_models()
        except ProviderError as e:
            logger.error("Model list fetch failed for chat %s: %s", message.chat_id, e)
            return MODELS_FETCH_FAILED

        if not models:
            return "📦 No Ollama models are installed."
        lines = "\n".join(f"• {model.name}" for model in models)
        return f"📦 Installed Ollama models:\n{lines}"

    async def _cmd_model(self, message: BotMessage, args: str) -> str:
        """Handle /model, with or without a name prefix."""
        chat_id = message.chat_id
        session = self.sessions.get_or_create(chat_id)

        if not args:
            return (
                f"🤖 Current model: {session.model}\n\n"
                "Switch model: /model <model-name>"
            )

        try:
            catalog = await self.provider.list_models()
        except ProviderError as e:
            logger.error("Model switch failed for chat %s: %s", chat_id, e)
            return MODEL_SWITCH_FAILED

        resolved = resolve_model(args, session.model, catalog)
        if resolved is None:
            return f'❌ No model found starting with "{args}"'

        self.sessions.set_model(chat_id, resolved)
        return f"✅ Model switched\nInput: {args}\nSelected model: {resolved}"

    async def _cmd_current(self, message: BotMessage, args: str) -> str:
        """Handle /current command."""
        session = self.sessions.get_or_create(message.chat_id)
        return f"🤖 Current model: {session.model}"

    async def _cmd_reset(self, message: BotMessage, args: str) -> str:
        """Handle /reset command."""
        self.sessions.reset(message.chat_id)
        return RESET_DONE
