"""Transport-agnostic inventory adapter contracts and DTOs."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol, Sequence

from pydantic import BaseModel, ConfigDict

from packages.reporting_shared.request import RequestMeta


class InventoryAdapterError(Exception):
    """Base exception for inventory adapter failures."""


class InventoryAdapterDependencyError(InventoryAdapterError):
    """Inventory service unreachable, timed out or answered with an error."""

    def __init__(
        self,
        message: str,
        *,
        method: str,
        url: str,
        status_code: int | None = None,
        retryable: bool = True,
    ) -> None:
        super().__init__(message)
        self.method = method
        self.url = url
        self.status_code = status_code
        self.retryable = retryable


class InventoryAdapterInternalError(InventoryAdapterError):
    """Inventory response did not match the expected contract."""


class InventoryAttribute(BaseModel):
    """One device attribute as reported by the inventory service."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    value: Any
    scope: str
    description: str | None = None


class InventoryDevice(BaseModel):
    """One device record from the inventory filters search endpoint."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    attributes: tuple[InventoryAttribute, ...] = ()
    updated_ts: datetime | None = None
    created_ts: datetime | None = None
    revision: int | None = None


class InventoryAdapter(Protocol):
    """Protocol for inventory device lookups."""

    def get_devices(
        self,
        *,
        meta: RequestMeta,
        tenant_id: str,
        device_ids: Sequence[str],
    ) -> list[InventoryDevice]:
        """Return inventory records for the given device IDs."""
