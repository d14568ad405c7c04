"""Tests for the relay CLI and component wiring."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from typer.testing import CliRunner

from ollama_relay.cli.main import app
from ollama_relay.config.settings import Settings
from ollama_relay.messaging.telegram_bot import TelegramBot
from ollama_relay.providers.base import ModelInfo, ProviderError
from ollama_relay.relay import create_relay

TOKEN = "123456789:AAbbCCddEEffGGhhIIjjKKllMMnnOOppQQr"

runner = CliRunner()


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path, monkeypatch):
    """Run from an empty directory so no stray .env file is read."""
    monkeypatch.chdir(tmp_path)


class TestRunCommand:
    """Tests for `ollama-relay run`."""

    def test_missing_token_exits(self):
        result = runner.invoke(app, ["run"])
        assert result.exit_code == 1
        assert "Telegram bot token required" in result.output

    def test_starts_relay_with_token(self):
        relay = MagicMock()
        relay.serve = AsyncMock()
        with patch("ollama_relay.relay.create_relay", return_value=relay) as create, patch(
            "ollama_relay.cli.commands.bot.configure_logging"
        ):
            result = runner.invoke(app, ["run", "--token", TOKEN, "--model", "llama3:8b"])

        assert result.exit_code == 0, result.output
        settings = create.call_args.args[0]
        assert settings.telegram_bot_token == TOKEN
        assert settings.ollama_default_model == "llama3:8b"
        relay.serve.assert_awaited_once()

    def test_token_from_env(self, monkeypatch):
        monkeypatch.setenv("TELEGRAM_BOT_TOKEN", TOKEN)
        relay = MagicMock()
        relay.serve = AsyncMock()
        with patch("ollama_relay.relay.create_relay", return_value=relay), patch(
            "ollama_relay.cli.commands.bot.configure_logging"
        ):
            result = runner.invoke(app, ["run"])
        assert result.exit_code == 0, result.output

    def test_bot_error_exits(self):
        relay = MagicMock()
        relay.serve = AsyncMock(side_effect=RuntimeError("polling conflict"))
        with patch("ollama_relay.relay.create_relay", return_value=relay), patch(
            "ollama_relay.cli.commands.bot.configure_logging"
        ):
            result = runner.invoke(app, ["run", "--token", TOKEN])
        assert result.exit_code == 1
        assert "polling conflict" in result.output

    def test_invalid_setting_exits(self, monkeypatch):
        monkeypatch.setenv("LOG_FORMAT", "xml")
        result = runner.invoke(app, ["run", "--token", TOKEN])
        assert result.exit_code == 1
        assert "Invalid configuration" in result.output


class TestStatusCommand:
    """Tests for `ollama-relay status`."""

    def test_reports_missing_token(self):
        result = runner.invoke(app, ["status"])
        assert result.exit_code == 0
        assert "Not set" in result.output

    def test_reports_configured_token(self, monkeypatch):
        monkeypatch.setenv("TELEGRAM_BOT_TOKEN", TOKEN)
        result = runner.invoke(app, ["status"])
        assert result.exit_code == 0
        assert "Configured" in result.output
        assert TOKEN not in result.output


class TestModelsCommand:
    """Tests for `ollama-relay models`."""

    def test_lists_models(self):
        with patch("ollama_relay.cli.commands.models.OllamaProvider") as provider_cls:
            provider_cls.return_value.list_models = AsyncMock(
                return_value=[ModelInfo(name="llama3:8b"), ModelInfo(name="gemma3:4b")]
            )
            result = runner.invoke(app, ["models", "--base-url", "http://gpu:11434/api"])

        assert result.exit_code == 0, result.output
        assert "llama3:8b" in result.output
        assert "gemma3:4b" in result.output
        assert provider_cls.call_args.kwargs["base_url"] == "http://gpu:11434/api"

    def test_empty_catalog(self):
        with patch("ollama_relay.cli.commands.models.OllamaProvider") as provider_cls:
            provider_cls.return_value.list_models = AsyncMock(return_value=[])
            result = runner.invoke(app, ["models"])
        assert result.exit_code == 0
        assert "No models installed" in result.output

    def test_backend_failure_exits(self):
        with patch("ollama_relay.cli.commands.models.OllamaProvider") as provider_cls:
            provider_cls.return_value.list_models = AsyncMock(
                side_effect=ProviderError("connection refused")
            )
            result = runner.invoke(app, ["models"])
        assert result.exit_code == 1
        assert "Failed to fetch models" in result.output


class TestCreateRelay:
    """Tests for create_relay()."""

    def test_requires_token_without_bot(self):
        with pytest.raises(ValueError):
            create_relay(Settings(_env_file=None))

    def test_wires_components(self):
        settings = Settings(
            _env_file=None,
            telegram_bot_token=TOKEN,
            ollama_default_model="llama3:8b",
            max_history_turns=10,
        )
        relay = create_relay(settings)

        assert isinstance(relay.bot, TelegramBot)
        assert relay.bot.token == TOKEN
        assert relay.bot.name == settings.app_name
        assert relay.sessions.default_model == "llama3:8b"
        assert relay.sessions.max_history_turns == 10
        assert relay.handler.sessions is relay.sessions
        assert relay.handler.engine.sessions is relay.sessions
        assert relay.bot._message_callback == relay.handler.handle_message

    def test_serve_stops_bot_and_closes_provider(self, bot):
        relay = create_relay(Settings(_env_file=None), bot=bot)
        relay.provider.close = AsyncMock()

        async def main():
            task = asyncio.create_task(relay.serve())
            await asyncio.sleep(0)
            await bot.stop()
            await asyncio.wait_for(task, timeout=5)

        asyncio.run(main())
        assert bot.is_running is False
        relay.provider.close.assert_awaited_once()
