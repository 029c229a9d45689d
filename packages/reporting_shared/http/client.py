"""Synchronous HTTP client shared by adapters.

``HttpClient`` owns one pooled ``httpx.Client`` configured from adapter
settings and raises the typed errors in ``errors`` instead of httpx
exceptions.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx

from .errors import HttpJsonDecodeError, HttpRequestError, HttpStatusError


class HttpClient:
    """Pooled HTTP client with typed failures.

    Base URL, TLS verification and the default timeout are fixed at
    construction; callers pass a narrower ``timeout`` per request when a
    deadline applies.
    """

    def __init__(
        self,
        *,
        base_url: str = "",
        timeout_seconds: float = 10.0,
        verify_tls: bool = True,
        headers: Mapping[str, str] | None = None,
        transport: httpx.BaseTransport | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._timeout_seconds = timeout_seconds
        self._owns_client = client is None
        if client is None:
            client = httpx.Client(
                base_url=base_url,
                timeout=timeout_seconds,
                verify=verify_tls,
                headers=dict(headers or {}),
                transport=transport,
            )
        self._client = client

    @property
    def timeout_seconds(self) -> float:
        return self._timeout_seconds

    def close(self) -> None:
        """Close the pool unless it was injected by the caller."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> HttpClient:
        return self

    def __exit__(self, *_: object) -> None:
        self.close()

    def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send one request; error statuses raise ``HttpStatusError``."""
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.RequestError as exc:
            target_method, target_url = _request_target(exc, method=method, url=url)
            raise HttpRequestError(
                message=f"failed to submit {target_method} {target_url}",
                method=target_method,
                url=target_url,
                retryable=True,
                cause=exc,
                timed_out=isinstance(exc, httpx.TimeoutException),
            ) from exc

        if response.is_error:
            raise HttpStatusError.for_status(
                method=response.request.method,
                url=str(response.request.url),
                status_code=response.status_code,
                reason=response.reason_phrase,
                body=_body_text(response),
            )
        return response

    def post(self, url: str, **kwargs: Any) -> httpx.Response:
        return self.request("POST", url, **kwargs)

    def post_json(self, url: str, *, json: Any, **kwargs: Any) -> Any:
        """POST a JSON body and return the decoded JSON response."""
        response = self.post(url, json=json, **kwargs)
        try:
            return response.json()
        except ValueError as exc:
            raise HttpJsonDecodeError(
                message=(
                    f"failed to parse response body for "
                    f"{response.request.method} {response.request.url}"
                ),
                method=response.request.method,
                url=str(response.request.url),
                status_code=response.status_code,
                response_body=_body_text(response),
                cause=exc,
            ) from exc


def _request_target(
    exc: httpx.RequestError, *, method: str, url: str
) -> tuple[str, str]:
    """Return the failed request's method and URL, falling back to the inputs."""
    try:
        request = exc.request
    except RuntimeError:
        return method.upper(), url
    return request.method, str(request.url)


def _body_text(response: httpx.Response) -> str:
    try:
        return response.text
    except UnicodeDecodeError:
        return ""
