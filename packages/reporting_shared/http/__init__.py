"""Public shared HTTP client API."""

from .client import HttpClient
from .errors import (
    HttpClientError,
    HttpJsonDecodeError,
    HttpRequestError,
    HttpStatusError,
)

__all__ = [
    "HttpClient",
    "HttpClientError",
    "HttpJsonDecodeError",
    "HttpRequestError",
    "HttpStatusError",
]
