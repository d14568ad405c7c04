"""Relay bot commands: run and status."""

from __future__ import annotations

import asyncio

import typer
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ollama_relay.config.logging import configure_logging

from ..helpers import console, load_settings


def bot_run(
    token: str = typer.Option(
        None, "--token", "-t", help="Telegram bot token (default: TELEGRAM_BOT_TOKEN)"
    ),
    base_url: str = typer.Option(
        None, "--base-url", help="Ollama API base URL (default: OLLAMA_BASE_URL)"
    ),
    model: str = typer.Option(
        None, "--model", "-m", help="Default model for new chats (default: OLLAMA_DEFAULT_MODEL)"
    ),
    log_level: str = typer.Option(None, "--log-level", help="Logging level"),
):
    """Start the Telegram relay and serve chats until interrupted.

    Example:
        ollama-relay run --token YOUR_BOT_TOKEN
        ollama-relay run  # Uses TELEGRAM_BOT_TOKEN env var

    Setup:
        1. Message @BotFather on Telegram to create a bot
        2. Copy the token and set TELEGRAM_BOT_TOKEN
        3. Make sure Ollama is running (ollama serve)
    """
    settings = load_settings(
        telegram_bot_token=token,
        ollama_base_url=base_url,
        ollama_default_model=model,
        log_level=log_level,
    )

    if not settings.has_telegram_token:
        console.print("[red]Telegram bot token required.[/red]")
        console.print("\nSet TELEGRAM_BOT_TOKEN environment variable or use --token")
        console.print("\nTo get a token:")
        console.print("  1. Open Telegram and message @BotFather")
        console.print("  2. Send /newbot and follow the prompts")
        console.print("  3. Copy the token you receive")
        raise typer.Exit(1)

    configure_logging(settings.log_level, settings.log_format, settings.sanitize_logs)

    from ollama_relay.relay import create_relay

    relay = create_relay(settings)

    console.print(
        Panel(
            "[bold]Telegram Relay Starting[/bold]\n\n"
            f"Ollama: {settings.ollama_base_url}\n"
            f"Default model: {settings.ollama_default_model}\n"
            f"History cap: {settings.max_history_turns or 'None'}",
            title=settings.app_name,
            border_style="cyan",
        )
    )
    console.print("[dim]Press Ctrl+C to stop[/dim]\n")

    try:
        asyncio.run(relay.serve())
    except KeyboardInterrupt:
        console.print("\n[yellow]Shutting down...[/yellow]")
    except Exception as e:
        console.print(f"[red]Bot error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    console.print("[green]Bot stopped[/green]")


def bot_status() -> None:
    """Show relay configuration status."""
    settings = load_settings()

    console.print("[bold]Relay Configuration[/bold]\n")

    table = Table(title="Settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Status")

    table.add_row(
        "TELEGRAM_BOT_TOKEN",
        "[green]Configured[/green]" if settings.has_telegram_token else "[red]Not set[/red]",
    )
    table.add_row("OLLAMA_BASE_URL", settings.ollama_base_url)
    table.add_row("OLLAMA_DEFAULT_MODEL", settings.ollama_default_model)
    table.add_row("OLLAMA_TIMEOUT", f"{settings.ollama_timeout:g}s")
    table.add_row(
        "MAX_HISTORY_TURNS",
        str(settings.max_history_turns) if settings.max_history_turns else "[dim]Unbounded[/dim]",
    )

    console.print(table)

    console.print("\n[bold]Dependencies[/bold]\n")

    deps = [
        ("python-telegram-bot", "telegram"),
        ("httpx", "httpx"),
    ]

    for name, module in deps:
        try:
            __import__(module)
            console.print(f"  [green]✓[/green] {name}")
        except ImportError:
            console.print(f"  [dim]○[/dim] {name} (not installed)")
