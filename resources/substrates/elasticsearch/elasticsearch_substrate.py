"""Concrete device index substrate using the official Elasticsearch client."""

from __future__ import annotations

from typing import Any, Mapping

from elasticsearch import ApiError, ConnectionError, ConnectionTimeout, TransportError

from packages.reporting_shared.errors import (
    DataIntegrityError,
    DependencyError,
    ReportingError,
    codes,
)
from packages.reporting_shared.logging import get_logger
from resources.substrates.elasticsearch.client import create_elasticsearch_client
from resources.substrates.elasticsearch.config import ElasticsearchSettings
from resources.substrates.elasticsearch.substrate import ElasticsearchSubstrate

_LOGGER = get_logger(__name__)


class ElasticsearchClientSubstrate(ElasticsearchSubstrate):
    """Device index access through one shared client instance."""

    def __init__(self, settings: ElasticsearchSettings) -> None:
        self._settings = settings
        self._client = create_elasticsearch_client(settings)

    def close(self) -> None:
        """Release pooled connections."""
        self._client.close()

    def search(
        self,
        *,
        tenant_id: str,
        body: Mapping[str, Any],
        timeout_seconds: float,
    ) -> dict[str, Any]:
        """Execute one search against the tenant's device index."""
        index = self._settings.index_for_tenant(tenant_id)
        routing = tenant_id if tenant_id and self._settings.route_by_tenant else None
        try:
            response = self._client.options(request_timeout=timeout_seconds).search(
                index=index,
                body=dict(body),
                routing=routing,
            )
        except Exception as exc:  # noqa: BLE001
            raise _normalize_error(exc, operation="search", index=index) from exc

        _LOGGER.debug("search on %s returned in %sms", index, _took(response))
        return _response_body(response)

    def get_devices_index_mapping(
        self, *, tenant_id: str, timeout_seconds: float
    ) -> dict[str, Any]:
        """Return ``{"mappings": ...}`` for the tenant's device index."""
        index = self._settings.index_for_tenant(tenant_id)
        try:
            response = self._client.options(
                request_timeout=timeout_seconds
            ).indices.get_mapping(index=index)
        except Exception as exc:  # noqa: BLE001
            raise _normalize_error(
                exc, operation="get_devices_index_mapping", index=index
            ) from exc

        # Aliases resolve to the concrete index name, so the single entry is
        # taken regardless of its key.
        indices = _response_body(response)
        if len(indices) != 1:
            raise DataIntegrityError(
                f"expected exactly one index for {index}, got {len(indices)}",
                code=codes.MALFORMED_RESPONSE,
                metadata={"index": index, "tenant_id": tenant_id},
            )
        description = next(iter(indices.values()))
        if not isinstance(description, dict):
            raise DataIntegrityError(
                "can't parse index description",
                code=codes.MALFORMED_RESPONSE,
                metadata={"index": index, "tenant_id": tenant_id},
            )
        return description

    def ping(self, *, timeout_seconds: float) -> None:
        """Raise a retryable dependency error unless the cluster answers."""
        try:
            alive = self._client.options(request_timeout=timeout_seconds).ping()
        except Exception as exc:  # noqa: BLE001
            raise _normalize_error(exc, operation="ping", index="") from exc
        if not alive:
            raise DependencyError(
                "elasticsearch ping failed",
                code=codes.DEPENDENCY_UNAVAILABLE,
                metadata={"operation": "ping", "url": self._settings.url},
            )


def _response_body(response: Any) -> dict[str, Any]:
    """Unwrap an ``ObjectApiResponse`` into its plain JSON document."""
    body = getattr(response, "body", response)
    if not isinstance(body, dict):
        raise DataIntegrityError(
            "elasticsearch response body is not an object",
            code=codes.MALFORMED_RESPONSE,
        )
    return body


def _took(response: Any) -> object:
    """Return the engine-reported duration when present."""
    body = getattr(response, "body", response)
    return body.get("took") if isinstance(body, dict) else None


def _normalize_error(exc: Exception, *, operation: str, index: str) -> ReportingError:
    """Map client exceptions into the shared error taxonomy."""
    if isinstance(exc, ReportingError):
        return exc

    metadata = {
        "operation": operation,
        "index": index or None,
        "exception_type": type(exc).__name__,
    }
    if isinstance(exc, ConnectionTimeout):
        return DependencyError(
            f"elasticsearch {operation} timed out",
            code=codes.DEPENDENCY_TIMEOUT,
            metadata=metadata,
        )
    if isinstance(exc, ConnectionError):
        return DependencyError(
            f"elasticsearch {operation} unavailable",
            code=codes.DEPENDENCY_UNAVAILABLE,
            metadata=metadata,
        )
    if isinstance(exc, ApiError):
        status = exc.meta.status
        return DependencyError(
            f"elasticsearch {operation} failed with status {status}",
            code=codes.DEPENDENCY_FAILURE,
            retryable=status >= 500 or status == 429,
            metadata={**metadata, "status": status},
        )
    if isinstance(exc, TransportError):
        return DependencyError(
            f"elasticsearch {operation} transport failure",
            code=codes.DEPENDENCY_FAILURE,
            metadata=metadata,
        )
    return DependencyError(
        f"elasticsearch {operation} failed: {exc}",
        code=codes.DEPENDENCY_FAILURE,
        retryable=False,
        metadata=metadata,
    )
