"""Tests for Elasticsearch substrate settings and index naming."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from packages.reporting_shared.config import ReportingSettings
from resources.substrates.elasticsearch.config import (
    ElasticsearchSettings,
    resolve_elasticsearch_settings,
)


def test_index_for_tenant_uses_template() -> None:
    """Tenant searches should target the templated per-tenant index."""
    settings = ElasticsearchSettings()

    assert settings.index_for_tenant("t1") == "devices-t1"
    assert settings.index_for_tenant("") == "devices"


def test_custom_template_and_index_name() -> None:
    """Template placeholders should resolve against configured index name."""
    settings = ElasticsearchSettings(
        devices_index="inventory", tenant_index_template="{tenant_id}_{index}"
    )

    assert settings.index_for_tenant("acme") == "acme_inventory"


def test_template_rejects_unknown_placeholder() -> None:
    """Unknown template placeholders should fail validation."""
    with pytest.raises(ValidationError, match="tenant_index_template"):
        ElasticsearchSettings(tenant_index_template="{index}-{tenant}")


def test_blank_url_rejected() -> None:
    """Blank cluster URL should fail validation."""
    with pytest.raises(ValidationError, match="value is required"):
        ElasticsearchSettings(url="   ")


def test_resolves_from_components_namespace() -> None:
    """Settings should resolve from ``components.substrate.elasticsearch``."""
    settings = ReportingSettings(
        components={
            "substrate": {
                "elasticsearch": {
                    "url": "https://search:9200",
                    "verify_certs": False,
                }
            }
        }
    )

    resolved = resolve_elasticsearch_settings(settings)

    assert resolved.url == "https://search:9200"
    assert resolved.verify_certs is False
    assert resolved.devices_index == "devices"
