"""Ollama Relay - a Telegram bridge to a local Ollama server."""

__version__ = "1.0.0"

from .config import Settings, get_settings
from .chat import ConversationEngine, SessionStore, resolve_model
from .providers import OllamaProvider, ProviderError
from .relay import Relay, create_relay

__all__ = [
    "Settings",
    "get_settings",
    "ConversationEngine",
    "SessionStore",
    "resolve_model",
    "OllamaProvider",
    "ProviderError",
    "Relay",
    "create_relay",
]
