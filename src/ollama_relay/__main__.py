"""Allow ``python -m ollama_relay``."""

from ollama_relay.cli.main import app

app()
