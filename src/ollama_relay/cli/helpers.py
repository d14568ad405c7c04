"""Shared helpers for CLI modules: console and settings loading."""

from __future__ import annotations

from typing import Any

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from ollama_relay.config.settings import Settings

console = Console()


def load_settings(**overrides: Any) -> Settings:
    """Load settings from env/.env, applying CLI overrides that were given."""
    overrides = {key: value for key, value in overrides.items() if value is not None}
    try:
        return Settings(**overrides)
    except ValidationError as e:
        console.print(f"[red]Invalid configuration:[/red]\n{escape(str(e))}")
        raise typer.Exit(1)
