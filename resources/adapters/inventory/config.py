"""Pydantic settings for the inventory adapter resource."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from packages.reporting_shared.config import (
    ReportingSettings,
    resolve_component_settings,
)

RESOURCE_COMPONENT_ID = "adapter_inventory"


class InventoryAdapterSettings(BaseModel):
    """Runtime settings for the internal inventory HTTP API."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    base_url: str = "http://mender-inventory:8080"
    timeout_seconds: float = Field(default=10.0, gt=0)
    verify_tls: bool = True

    @field_validator("base_url")
    @classmethod
    def _normalize_base_url(cls, value: str) -> str:
        """Require a base URL and strip trailing slashes."""
        normalized = value.strip().rstrip("/")
        if normalized == "":
            raise ValueError("base_url is required")
        return normalized


def resolve_inventory_adapter_settings(
    settings: ReportingSettings,
) -> InventoryAdapterSettings:
    """Resolve adapter settings from ``components.adapter.inventory``."""
    return resolve_component_settings(
        settings=settings,
        component_id=RESOURCE_COMPONENT_ID,
        model=InventoryAdapterSettings,
    )
