"""Ollama HTTP API provider."""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx
from pydantic import ValidationError

from ollama_relay.config.settings import DEFAULT_OLLAMA_BASE_URL

from .base import EmptyCompletionError, ModelInfo, Provider, ProviderError

logger = logging.getLogger(__name__)


class OllamaProvider(Provider):
    """Client for a local Ollama server.

    Uses ``GET /tags`` for the model catalog and ``POST /chat`` with
    ``stream: false`` for completions. The backend keeps no conversation
    state, so every chat call carries the full history.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_OLLAMA_BASE_URL,
        timeout: float = 120.0,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize the provider.

        Args:
            base_url: Ollama API base URL, e.g. ``http://localhost:11434/api``.
            timeout: Per-request timeout in seconds.
            client: Optional preconfigured client; the provider will not close it.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    @property
    def name(self) -> str:
        return "ollama"

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def _request_json(self, method: str, path: str, **kwargs: Any) -> Any:
        """Send a request and decode the JSON body.

        Raises:
            ProviderError: On network failure, timeout, non-2xx status or non-JSON body.
        """
        url = f"{self.base_url}{path}"
        start = time.monotonic()
        try:
            response = await self._get_client().request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise ProviderError(f"Ollama request to {path} timed out") from e
        except httpx.HTTPStatusError as e:
            raise ProviderError(
                f"Ollama returned HTTP {e.response.status_code} for {path}"
            ) from e
        except httpx.HTTPError as e:
            raise ProviderError(f"Ollama request to {path} failed: {e}") from e

        logger.debug(
            "Ollama %s %s -> %s",
            method,
            path,
            response.status_code,
            extra={"duration_ms": int((time.monotonic() - start) * 1000)},
        )

        try:
            return response.json()
        except ValueError as e:
            raise ProviderError(f"Ollama returned a non-JSON body for {path}") from e

    async def list_models(self) -> list[ModelInfo]:
        """Fetch installed models from ``/tags``."""
        data = await self._request_json("GET", "/tags")
        if not isinstance(data, dict) or not isinstance(data.get("models"), list):
            raise ProviderError("Ollama /tags response has no 'models' list")
        try:
            return [ModelInfo.model_validate(entry) for entry in data["models"]]
        except ValidationError as e:
            raise ProviderError(f"Ollama /tags response is malformed: {e}") from e

    async def chat(self, model: str, messages: list[dict[str, str]]) -> str:
        """Send the full history to ``/chat`` and return the reply text."""
        payload = {"model": model, "messages": messages, "stream": False}
        data = await self._request_json("POST", "/chat", json=payload)

        message = data.get("message") if isinstance(data, dict) else None
        if not isinstance(message, dict):
            raise ProviderError("Ollama /chat response has no 'message' object")

        if "content" not in message:
            raise ProviderError("Ollama /chat response message has no 'content' field")
        content = message["content"]
        if content is not None and not isinstance(content, str):
            raise ProviderError("Ollama /chat response content is not text")
        if not content or not content.strip():
            raise EmptyCompletionError(f"Ollama returned an empty completion for {model}")
        return content

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
