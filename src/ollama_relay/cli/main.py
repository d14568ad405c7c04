"""Ollama Relay CLI - Main entry point."""

from __future__ import annotations

import typer

from .commands.bot import bot_run, bot_status
from .commands.models import list_models

app = typer.Typer(
    name="ollama-relay",
    help="Relay Telegram chats to a local Ollama server",
    add_completion=False,
)

app.command("run")(bot_run)
app.command("status")(bot_status)
app.command("models")(list_models)


if __name__ == "__main__":
    app()
