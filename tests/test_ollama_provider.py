"""Tests for the Ollama HTTP provider."""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from ollama_relay.providers.base import EmptyCompletionError, ModelInfo, ProviderError
from ollama_relay.providers.ollama_provider import OllamaProvider

BASE_URL = "http://ollama.test/api"


def _run(provider: OllamaProvider, coro_factory):
    """Run a provider call and close the underlying client afterwards."""

    async def main():
        try:
            return await coro_factory(provider)
        finally:
            await provider._client.aclose()

    return asyncio.run(main())


def _provider(handler) -> OllamaProvider:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return OllamaProvider(base_url=BASE_URL, client=client)


class TestListModels:
    """Tests for OllamaProvider.list_models()."""

    def test_parses_catalog(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "GET"
            assert str(request.url) == f"{BASE_URL}/tags"
            return httpx.Response(
                200,
                json={
                    "models": [
                        {"name": "llama3:8b", "size": 4661224676},
                        {"name": "gemma:2b", "modified_at": "2024-05-01T00:00:00Z"},
                    ]
                },
            )

        models = _run(_provider(handler), lambda p: p.list_models())
        assert models == [ModelInfo(name="llama3:8b"), ModelInfo(name="gemma:2b")]

    def test_empty_catalog(self):
        models = _run(
            _provider(lambda request: httpx.Response(200, json={"models": []})),
            lambda p: p.list_models(),
        )
        assert models == []

    def test_missing_models_key(self):
        provider = _provider(lambda request: httpx.Response(200, json={"tags": []}))
        with pytest.raises(ProviderError):
            _run(provider, lambda p: p.list_models())

    def test_entry_without_name(self):
        provider = _provider(
            lambda request: httpx.Response(200, json={"models": [{"size": 1}]})
        )
        with pytest.raises(ProviderError):
            _run(provider, lambda p: p.list_models())

    def test_http_error_status(self):
        provider = _provider(lambda request: httpx.Response(500, text="boom"))
        with pytest.raises(ProviderError, match="HTTP 500"):
            _run(provider, lambda p: p.list_models())

    def test_connection_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(ProviderError, match="failed"):
            _run(_provider(handler), lambda p: p.list_models())


class TestChat:
    """Tests for OllamaProvider.chat()."""

    MESSAGES = [{"role": "user", "content": "hi"}]

    def test_posts_full_payload(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["url"] = str(request.url)
            captured["body"] = json.loads(request.content)
            return httpx.Response(
                200, json={"message": {"role": "assistant", "content": "hello"}}
            )

        reply = _run(_provider(handler), lambda p: p.chat("llama3:8b", self.MESSAGES))

        assert reply == "hello"
        assert captured["url"] == f"{BASE_URL}/chat"
        assert captured["body"] == {
            "model": "llama3:8b",
            "messages": self.MESSAGES,
            "stream": False,
        }

    @pytest.mark.parametrize(
        "body",
        [
            {"message": {"role": "assistant", "content": ""}},
            {"message": {"role": "assistant", "content": "   \n"}},
            {"message": {"role": "assistant", "content": None}},
        ],
    )
    def test_empty_completion(self, body):
        provider = _provider(lambda request: httpx.Response(200, json=body))
        with pytest.raises(EmptyCompletionError):
            _run(provider, lambda p: p.chat("llama3:8b", self.MESSAGES))

    @pytest.mark.parametrize(
        "body",
        [
            {"error": "model not found"},
            {"message": "oops"},
            {"message": {"content": 42}},
            {"message": {"role": "assistant"}},
            ["not", "an", "object"],
        ],
    )
    def test_malformed_response(self, body):
        provider = _provider(lambda request: httpx.Response(200, json=body))
        with pytest.raises(ProviderError) as exc_info:
            _run(provider, lambda p: p.chat("llama3:8b", self.MESSAGES))
        assert not isinstance(exc_info.value, EmptyCompletionError)

    def test_non_json_body(self):
        provider = _provider(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(ProviderError, match="non-JSON"):
            _run(provider, lambda p: p.chat("llama3:8b", self.MESSAGES))

    def test_not_found_status(self):
        provider = _provider(
            lambda request: httpx.Response(404, json={"error": "model 'x' not found"})
        )
        with pytest.raises(ProviderError, match="HTTP 404"):
            _run(provider, lambda p: p.chat("x", self.MESSAGES))

    def test_timeout(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("too slow", request=request)

        with pytest.raises(ProviderError, match="timed out"):
            _run(_provider(handler), lambda p: p.chat("llama3:8b", self.MESSAGES))


class TestProviderLifecycle:
    """Tests for client ownership."""

    def test_base_url_trailing_slash_stripped(self):
        provider = OllamaProvider(base_url="http://localhost:11434/api/")
        assert provider.base_url == "http://localhost:11434/api"
        assert provider.name == "ollama"

    def test_does_not_close_injected_client(self):
        client = httpx.AsyncClient(
            transport=httpx.MockTransport(lambda request: httpx.Response(200))
        )
        provider = OllamaProvider(client=client)

        async def main():
            await provider.close()
            closed = client.is_closed
            await client.aclose()
            return closed

        assert asyncio.run(main()) is False

    def test_closes_own_client(self):
        provider = OllamaProvider(timeout=5)

        async def main():
            client = provider._get_client()
            async with provider:
                pass
            return client.is_closed

        assert asyncio.run(main()) is True
        assert provider._client is None
