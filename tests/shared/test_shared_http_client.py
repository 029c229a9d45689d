"""Unit tests for the shared HTTP client wrapper."""

from __future__ import annotations

import httpx
import pytest

from packages.reporting_shared.http import (
    HttpClient,
    HttpJsonDecodeError,
    HttpRequestError,
    HttpStatusError,
)


def _client(handler) -> HttpClient:
    return HttpClient(
        base_url="https://example.test",
        transport=httpx.MockTransport(handler),
    )


def test_post_json_returns_decoded_payload() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["content-type"] == "application/json"
        return httpx.Response(200, json={"ok": True}, request=request)

    with _client(handler) as client:
        assert client.post_json("/search", json={"q": 1}) == {"ok": True}


def test_status_failure_maps_to_typed_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="unavailable", request=request)

    with _client(handler) as client:
        with pytest.raises(HttpStatusError) as exc_info:
            client.post("/search")

    error = exc_info.value
    assert error.method == "POST"
    assert error.status_code == 503
    assert error.retryable is True
    assert error.response_body == "unavailable"
    assert "request failed with status 503" in str(error)


def test_client_errors_are_not_retryable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, request=request)

    with _client(handler) as client:
        with pytest.raises(HttpStatusError) as exc_info:
            client.post("/search")

    assert exc_info.value.retryable is False


def test_transport_failure_maps_to_typed_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with _client(handler) as client:
        with pytest.raises(HttpRequestError) as exc_info:
            client.post("/search")

    error = exc_info.value
    assert error.url == "https://example.test/search"
    assert error.timed_out is True
    assert error.retryable is True
    assert isinstance(error.cause, httpx.ReadTimeout)


def test_invalid_json_maps_to_decode_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="not-json", request=request)

    with _client(handler) as client:
        with pytest.raises(HttpJsonDecodeError) as exc_info:
            client.post_json("/search", json={})

    assert exc_info.value.response_body == "not-json"
    assert exc_info.value.retryable is False


def test_injected_client_is_not_closed() -> None:
    inner = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
    wrapper = HttpClient(client=inner)

    wrapper.close()

    assert inner.is_closed is False
    inner.close()
