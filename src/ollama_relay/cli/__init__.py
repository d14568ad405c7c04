"""Command-line interface for the Ollama relay."""

from .main import app

__all__ = ["app"]
