"""Configuration model for the Elasticsearch device index substrate."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from packages.reporting_shared.config import (
    ReportingSettings,
    resolve_component_settings,
)

RESOURCE_COMPONENT_ID = "substrate_elasticsearch"


class ElasticsearchSettings(BaseModel):
    """Connection and index-naming settings for the device index."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    url: str = "http://elasticsearch:9200"
    username: str = ""
    password: str = ""
    verify_certs: bool = True
    request_timeout_seconds: float = Field(default=10.0, gt=0)
    devices_index: str = "devices"
    tenant_index_template: str = "{index}-{tenant_id}"
    route_by_tenant: bool = True

    @field_validator("url", "devices_index")
    @classmethod
    def _require_text(cls, value: str) -> str:
        """Require non-blank URL and index name."""
        normalized = value.strip()
        if normalized == "":
            raise ValueError("value is required")
        return normalized

    @field_validator("tenant_index_template")
    @classmethod
    def _validate_template(cls, value: str) -> str:
        """Require a template that only uses the known placeholders."""
        try:
            value.format(index="i", tenant_id="t")
        except (KeyError, IndexError, ValueError) as exc:
            raise ValueError(
                "tenant_index_template may only reference {index} and {tenant_id}"
            ) from exc
        return value

    def index_for_tenant(self, tenant_id: str) -> str:
        """Return the index (or alias) holding one tenant's devices."""
        if tenant_id == "":
            return self.devices_index
        return self.tenant_index_template.format(
            index=self.devices_index, tenant_id=tenant_id
        )


def resolve_elasticsearch_settings(settings: ReportingSettings) -> ElasticsearchSettings:
    """Resolve settings from ``components.substrate.elasticsearch``."""
    return resolve_component_settings(
        settings=settings,
        component_id=RESOURCE_COMPONENT_ID,
        model=ElasticsearchSettings,
    )
