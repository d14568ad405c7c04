"""Relay utility modules."""

from ollama_relay.utils.validation import sanitize_log_message

__all__ = [
    "sanitize_log_message",
]
