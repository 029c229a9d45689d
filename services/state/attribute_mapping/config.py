"""Pydantic settings for attribute mapping behavior."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from packages.reporting_shared.config import (
    ReportingSettings,
    resolve_component_settings,
)

SERVICE_COMPONENT_ID = "service_attribute_mapping"


class AttributeMappingSettings(BaseModel):
    """Attribute mapping runtime behavior settings."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    schema_name: str = "attribute_mapping"
    max_field_key_length: int = Field(default=255, ge=80)
    cache_size: int = Field(default=4096, ge=0)
    store_timeout_seconds: float = Field(default=5.0, gt=0)
    max_batch_size: int = Field(default=1000, gt=0)


def resolve_attribute_mapping_settings(
    settings: ReportingSettings,
) -> AttributeMappingSettings:
    """Resolve settings from ``components.service.attribute_mapping``."""
    return resolve_component_settings(
        settings=settings,
        component_id=SERVICE_COMPONENT_ID,
        model=AttributeMappingSettings,
    )
