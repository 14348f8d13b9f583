"""Tests for HTTP-based adapters."""

import asyncio
from urllib.parse import parse_qs

import httpx
import pytest

from fatsecret_proxy.adapters.fatsecret_client import (
    HttpxFatSecretClient,
    HttpxTokenClient,
)


def _form(request: httpx.Request) -> dict[str, str]:
    parsed = parse_qs(request.content.decode())
    return {key: values[0] for key, values in parsed.items()}


def test_token_client_posts_client_credentials() -> None:
    seen: dict[str, str] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "POST"
        assert request.url.path == "/connect/token"
        assert request.headers["content-type"] == "application/x-www-form-urlencoded"
        seen.update(_form(request))
        return httpx.Response(
            200, json={"access_token": "abc", "expires_in": 86400}
        )

    async_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    client = HttpxTokenClient(
        client_id="id",
        client_secret="secret",
        token_url="https://oauth.test/connect/token",
        http_client=async_client,
    )

    payload = asyncio.run(client.request_token("basic barcode"))

    assert payload == {"access_token": "abc", "expires_in": 86400}
    assert seen == {
        "grant_type": "client_credentials",
        "scope": "basic barcode",
        "client_id": "id",
        "client_secret": "secret",
    }


def test_token_client_raises_on_rejection() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"error": "invalid_client"})

    async_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    client = HttpxTokenClient(
        client_id="id",
        client_secret="wrong",
        token_url="https://oauth.test/connect/token",
        http_client=async_client,
    )

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(client.request_token("basic"))


def test_fatsecret_client_methods() -> None:
    forms: list[dict[str, str]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["authorization"] == "Bearer tok"
        form = _form(request)
        forms.append(form)
        if form["method"] == "foods.search":
            return httpx.Response(200, json={"foods": {"total_results": "0"}})
        if form["method"] == "food.find_id_for_barcode":
            return httpx.Response(200, json={"food_id": {"value": "1641"}})
        return httpx.Response(200, json={"food": {"food_id": form["food_id"]}})

    async_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    client = HttpxFatSecretClient(
        api_url="https://platform.test/rest/server.api", http_client=async_client
    )

    search = asyncio.run(client.search_foods("tok", "greek yogurt", max_results=10))
    food = asyncio.run(client.get_food("tok", "1641"))
    barcode = asyncio.run(client.find_id_for_barcode("tok", "0041570054161"))

    assert search == {"foods": {"total_results": "0"}}
    assert food == {"food": {"food_id": "1641"}}
    assert barcode == {"food_id": {"value": "1641"}}
    assert forms[0] == {
        "method": "foods.search",
        "format": "json",
        "search_expression": "greek yogurt",
        "max_results": "10",
    }
    assert forms[1]["method"] == "food.get.v2"
    assert forms[2]["barcode"] == "0041570054161"
    assert all(form["format"] == "json" for form in forms)


def test_fatsecret_client_raises_on_error_status() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="maintenance")

    async_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    client = HttpxFatSecretClient(
        api_url="https://platform.test/rest/server.api", http_client=async_client
    )

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(client.get_food("tok", "1"))

    asyncio.run(client.close())
