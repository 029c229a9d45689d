"""Pydantic settings for device search behavior."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from packages.reporting_shared.config import (
    ReportingSettings,
    resolve_component_settings,
)

SERVICE_COMPONENT_ID = "service_device_search"


class DeviceSearchSettings(BaseModel):
    """Device search runtime behavior settings."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    strict_unknown_attributes: bool = False
    search_timeout_seconds: float = Field(default=10.0, gt=0)
    schema_timeout_seconds: float = Field(default=5.0, gt=0)
    health_timeout_seconds: float = Field(default=1.0, gt=0)


def resolve_device_search_settings(
    settings: ReportingSettings,
) -> DeviceSearchSettings:
    """Resolve settings from ``components.service.device_search``."""
    return resolve_component_settings(
        settings=settings,
        component_id=SERVICE_COMPONENT_ID,
        model=DeviceSearchSettings,
    )
