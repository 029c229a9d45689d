"""Inventory adapter implementation over the internal HTTP API."""

from __future__ import annotations

from typing import Sequence
from urllib.parse import quote

from pydantic import TypeAdapter, ValidationError

from packages.reporting_shared.http import (
    HttpClient,
    HttpClientError,
    HttpRequestError,
    HttpStatusError,
)
from packages.reporting_shared.logging import get_logger, public_api_logged
from packages.reporting_shared.request import RequestMeta
from resources.adapters.inventory.adapter import (
    InventoryAdapter,
    InventoryAdapterDependencyError,
    InventoryAdapterError,
    InventoryAdapterInternalError,
    InventoryDevice,
)
from resources.adapters.inventory.config import (
    RESOURCE_COMPONENT_ID,
    InventoryAdapterSettings,
)

_LOGGER = get_logger(__name__)

SEARCH_DEVICES_PATH = "/api/internal/v2/inventory/tenants/{tenant_id}/filters/search"

_DEVICES = TypeAdapter(list[InventoryDevice])


class HttpInventoryAdapter(InventoryAdapter):
    """Inventory adapter backed by the shared HTTP client."""

    def __init__(
        self,
        *,
        settings: InventoryAdapterSettings,
        client: HttpClient | None = None,
    ) -> None:
        self._settings = settings
        self._client = client or HttpClient(
            base_url=settings.base_url,
            timeout_seconds=settings.timeout_seconds,
            verify_tls=settings.verify_tls,
        )

    def close(self) -> None:
        """Release HTTP transport resources."""
        self._client.close()

    @public_api_logged(
        logger=_LOGGER,
        component_id=RESOURCE_COMPONENT_ID,
        id_fields=("tenant_id",),
    )
    def get_devices(
        self,
        *,
        meta: RequestMeta,
        tenant_id: str,
        device_ids: Sequence[str],
    ) -> list[InventoryDevice]:
        """Fetch inventory records for the given device IDs."""
        path = SEARCH_DEVICES_PATH.format(tenant_id=quote(tenant_id, safe=""))
        timeout = meta.timeout_for(
            self._settings.timeout_seconds, operation="inventory.get_devices"
        )
        try:
            response = self._client.post(
                path,
                json={"device_ids": list(device_ids)},
                timeout=timeout,
            )
        except HttpClientError as exc:
            raise _dependency_error(exc) from exc

        if response.status_code != 200:
            raise InventoryAdapterDependencyError(
                f"{response.request.method} {response.request.url} "
                f"request failed with status {response.status_code}",
                method=response.request.method,
                url=str(response.request.url),
                status_code=response.status_code,
                retryable=False,
            )

        try:
            return _DEVICES.validate_json(response.content)
        except ValidationError as exc:
            raise InventoryAdapterInternalError(
                f"failed to parse inventory devices response: {exc.error_count()} errors"
            ) from exc


def _dependency_error(exc: HttpClientError) -> InventoryAdapterError:
    """Map shared HTTP client failures onto adapter exceptions."""
    status_code = exc.status_code if isinstance(exc, HttpStatusError) else None
    if isinstance(exc, HttpRequestError) and exc.timed_out:
        message = f"{exc.target} timed out"
    else:
        message = str(exc)
    return InventoryAdapterDependencyError(
        message,
        method=exc.method,
        url=exc.url,
        status_code=status_code,
        retryable=exc.retryable,
    )
