"""Inference backend providers.

The relay talks to a single backend, a local Ollama server, through the
Provider interface so the chat layer can be tested without HTTP.
"""

from .base import (
    EmptyCompletionError,
    ModelInfo,
    Provider,
    ProviderError,
)
from .ollama_provider import OllamaProvider

__all__ = [
    "EmptyCompletionError",
    "ModelInfo",
    "Provider",
    "ProviderError",
    "OllamaProvider",
]
