"""Typed failures raised by the shared HTTP client.

Every failure names the request it belongs to and whether repeating the call
could succeed, so adapters can translate it without inspecting httpx types.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class HttpClientError(Exception):
    """Base error for outbound HTTP call failures."""

    message: str
    method: str
    url: str
    retryable: bool = False

    def __str__(self) -> str:
        return self.message

    @property
    def target(self) -> str:
        """Return ``METHOD url`` for messages."""
        return f"{self.method} {self.url}"


@dataclass(frozen=True)
class HttpRequestError(HttpClientError):
    """No response was received (connect, read or timeout failure)."""

    cause: Exception | None = None
    timed_out: bool = False


@dataclass(frozen=True)
class HttpStatusError(HttpClientError):
    """The server answered with an error status."""

    status_code: int = 0
    response_body: str = ""

    @classmethod
    def for_status(
        cls, *, method: str, url: str, status_code: int, reason: str, body: str
    ) -> HttpStatusError:
        """Build the error for one response; 5xx and 429 are retryable."""
        status = f"{status_code} {reason}".strip()
        return cls(
            message=f"{method} {url} request failed with status {status}",
            method=method,
            url=url,
            retryable=status_code >= 500 or status_code == 429,
            status_code=status_code,
            response_body=body,
        )


@dataclass(frozen=True)
class HttpJsonDecodeError(HttpClientError):
    """A successful response body is not valid JSON."""

    status_code: int = 0
    response_body: str = ""
    cause: Exception | None = None
