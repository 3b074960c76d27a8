"""Unit tests for the rate source HTTP client"""

import httpx
import pytest
from savings_gateway.domain.exceptions import SourceUnavailableError
from savings_gateway.infrastructure.clients.source import SourceClient


def _client(handler) -> SourceClient:
    return SourceClient(timeout=1.0, transport=httpx.MockTransport(handler))


async def test_get_returns_page_text_with_browser_headers():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["headers"] = request.headers
        return httpx.Response(200, text="<table></table>")

    body = await _client(handler).fetch("https://bank.example/rates")

    assert body == "<table></table>"
    assert "Mozilla" in seen["headers"]["user-agent"]
    assert seen["headers"]["accept-language"].startswith("tr-TR")


async def test_post_sends_body_and_decodes_json():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["request"] = request
        return httpx.Response(200, json={"Data": []})

    payload = await _client(handler).fetch(
        "https://bank.example/api/rates",
        method="POST",
        body="productCode=KH",
        content_type="application/x-www-form-urlencoded",
    )

    request = seen["request"]
    assert payload == {"Data": []}
    assert request.method == "POST"
    assert request.content == b"productCode=KH"
    assert request.headers["content-type"] == "application/x-www-form-urlencoded"
    assert request.headers["x-requested-with"] == "XMLHttpRequest"
    assert request.headers["origin"] == "https://bank.example"


async def test_http_error_raises_source_unavailable():
    client = _client(lambda request: httpx.Response(503))
    with pytest.raises(SourceUnavailableError, match="503"):
        await client.fetch("https://bank.example/rates")


async def test_invalid_json_raises_source_unavailable():
    client = _client(lambda request: httpx.Response(200, text="<html>"))
    with pytest.raises(SourceUnavailableError):
        await client.fetch("https://bank.example/rates", expect_json=True)


async def test_timeout_raises_source_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(SourceUnavailableError, match="timeout"):
        await _client(handler).fetch("https://bank.example/rates")
