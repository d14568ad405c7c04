"""Base provider interface and error types."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel, ConfigDict


class ProviderError(Exception):
    """Raised when the inference backend cannot produce a usable reply."""


class EmptyCompletionError(ProviderError):
    """Raised when a well-formed response carries no reply text."""


class ModelInfo(BaseModel):
    """A catalog entry reported by the backend."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str


class Provider(ABC):
    """Async inference backend used by the relay.

    Implementations must convert every transport or protocol failure into a
    ProviderError so callers only handle one exception family.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name."""

    @abstractmethod
    async def list_models(self) -> list[ModelInfo]:
        """Fetch the current model catalog."""

    @abstractmethod
    async def chat(self, model: str, messages: list[dict[str, str]]) -> str:
        """Run a non-streaming chat completion.

        Args:
            model: Model identifier.
            messages: Full ordered history as role/content dicts.

        Returns:
            The reply text.

        Raises:
            EmptyCompletionError: The response had no reply text.
            ProviderError: The request failed or the response was malformed.
        """

    async def close(self) -> None:
        """Release any network resources."""

    async def __aenter__(self) -> "Provider":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
