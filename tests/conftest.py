"""Shared fixtures for relay tests."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from ollama_relay.chat.session_store import SessionStore
from ollama_relay.messaging.base import MessagingBot
from ollama_relay.providers.base import ModelInfo, Provider

DEFAULT_MODEL = "gemma3:4b"


class RecordingBot(MessagingBot):
    """In-memory transport that records what the relay sends."""

    def __init__(self):
        super().__init__(name="test-bot")
        self.sent: list[tuple[object, str]] = []
        self.typing: list[object] = []
        self.typing_error: Exception | None = None

    async def start(self) -> None:
        self._running = True

    async def stop(self) -> None:
        self._running = False

    async def send_message(self, chat_id, text: str) -> bool:
        self.sent.append((chat_id, text))
        return True

    async def send_typing(self, chat_id) -> None:
        if self.typing_error is not None:
            raise self.typing_error
        self.typing.append(chat_id)

    def texts(self, chat_id=None) -> list[str]:
        return [text for cid, text in self.sent if chat_id is None or cid == chat_id]


class FakeProvider(Provider):
    """Provider whose calls are AsyncMocks configured per test."""

    def __init__(self, models: list[str] | None = None, reply: str = "hello"):
        self.list_models = AsyncMock(
            return_value=[ModelInfo(name=name) for name in (models or [])]
        )
        self.chat = AsyncMock(return_value=reply)

    @property
    def name(self) -> str:
        return "fake"

    async def list_models(self):  # replaced per instance
        raise NotImplementedError

    async def chat(self, model, messages):  # replaced per instance
        raise NotImplementedError


@pytest.fixture
def sessions():
    return SessionStore(default_model=DEFAULT_MODEL)


@pytest.fixture
def bot():
    return RecordingBot()


@pytest.fixture
def provider():
    return FakeProvider(models=["llama3:8b", "llama3:70b", "gemma:2b", DEFAULT_MODEL])


@pytest.fixture(autouse=True)
def _clear_token_env(monkeypatch):
    """Keep the developer's real bot token out of tests."""
    monkeypatch.delenv("TELEGRAM_BOT_TOKEN", raising=False)
    monkeypatch.delenv("TELEGRAM_TOKEN", raising=False)
