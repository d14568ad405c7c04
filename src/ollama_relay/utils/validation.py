"""Helpers for scrubbing secrets out of text that ends up in logs."""

from __future__ import annotations

import re

REDACTED = "***"

# Telegram bot tokens look like "<bot id>:<35 char secret>"
_TELEGRAM_TOKEN = re.compile(r"(?<!\d)\d{5,}:[A-Za-z0-9_-]{30,}")
_BEARER_TOKEN = re.compile(r"(?i)\bBearer\s+[A-Za-z0-9._~+/=-]+")
_KEY_VALUE_SECRET = re.compile(
    r"(?i)\b(token|api[_-]?key|secret|password)=([^\s&]+)"
)


def sanitize_log_message(message: str) -> str:
    """Redact bot tokens, bearer tokens and key=value secrets from a message.

    Args:
        message: Text that may contain credentials.

    Returns:
        The text with each secret replaced by ``***``.
    """
    if not message:
        return message
    message = _TELEGRAM_TOKEN.sub(REDACTED, message)
    message = _BEARER_TOKEN.sub(f"Bearer {REDACTED}", message)
    message = _KEY_VALUE_SECRET.sub(lambda m: f"{m.group(1)}={REDACTED}", message)
    return message
