"""Prefix-based model resolution for the /model command."""

from __future__ import annotations

import random
from collections.abc import Iterable
from typing import Union

from ollama_relay.providers.base import ModelInfo

CatalogEntry = Union[str, ModelInfo]


def _entry_name(entry: CatalogEntry) -> str:
    return entry.name if isinstance(entry, ModelInfo) else entry


def resolve_model(
    prefix: str,
    current_model: str,
    catalog: Iterable[CatalogEntry],
    rng: random.Random | None = None,
) -> str | None:
    """Pick the model a prefix should switch to.

    Matching is a case-insensitive ``startswith``. The current model is
    excluded from the matches so repeating ``/model llama3`` moves between
    the installed llama3 variants.

    Args:
        prefix: Name fragment typed by the user.
        current_model: The session's selected model.
        catalog: Model names or ModelInfo entries from the backend.
        rng: Random source for choosing among several candidates.

    Returns:
        None if nothing matches, ``current_model`` if it is the only match,
        otherwise one of the other matches chosen uniformly at random.
    """
    needle = prefix.lower()
    matched = [
        name for name in map(_entry_name, catalog) if name.lower().startswith(needle)
    ]
    if not matched:
        return None

    candidates = [name for name in matched if name != current_model]
    if not candidates:
        return current_model

    return (rng or random).choice(candidates)
