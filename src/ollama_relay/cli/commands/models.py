"""Model catalog command."""

from __future__ import annotations

import asyncio

import typer
from rich.markup import escape
from rich.table import Table

from ollama_relay.providers.base import ModelInfo, ProviderError
from ollama_relay.providers.ollama_provider import OllamaProvider

from ..helpers import console, load_settings


async def _fetch_models(provider: OllamaProvider) -> list[ModelInfo]:
    async with provider:
        return await provider.list_models()


def list_models(
    base_url: str = typer.Option(
        None, "--base-url", help="Ollama API base URL (default: OLLAMA_BASE_URL)"
    ),
):
    """List the models installed on the Ollama server."""
    settings = load_settings(ollama_base_url=base_url)
    provider = OllamaProvider(
        base_url=settings.ollama_base_url, timeout=settings.ollama_timeout
    )

    try:
        models = asyncio.run(_fetch_models(provider))
    except ProviderError as e:
        console.print(f"[red]Failed to fetch models:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if not models:
        console.print("[yellow]No models installed.[/yellow] Try: ollama pull <model>")
        return

    table = Table(title=f"Ollama models ({settings.ollama_base_url})")
    table.add_column("Model", style="cyan")
    table.add_column("Default")
    for model in models:
        marker = "[green]✓[/green]" if model.name == settings.ollama_default_model else ""
        table.add_row(model.name, marker)
    console.print(table)
