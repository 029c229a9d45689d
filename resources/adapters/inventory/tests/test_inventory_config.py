"""Tests for inventory adapter settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from packages.reporting_shared.config import ReportingSettings
from resources.adapters.inventory import (
    InventoryAdapterSettings,
    resolve_inventory_adapter_settings,
)


def test_defaults() -> None:
    settings = InventoryAdapterSettings()

    assert settings.timeout_seconds == 10.0
    assert settings.verify_tls is True


def test_base_url_trailing_slash_stripped() -> None:
    """Base URL should be normalized without trailing slash."""
    assert InventoryAdapterSettings(base_url="http://x:8080/").base_url == "http://x:8080"


def test_blank_base_url_rejected() -> None:
    with pytest.raises(ValidationError, match="base_url is required"):
        InventoryAdapterSettings(base_url=" ")


def test_settings_are_frozen() -> None:
    """Settings should be immutable once built."""
    settings = InventoryAdapterSettings()

    with pytest.raises(ValidationError):
        settings.timeout_seconds = 1.0  # type: ignore[misc]


def test_resolves_from_components_namespace() -> None:
    settings = ReportingSettings(
        components={"adapter": {"inventory": {"verify_tls": False}}}
    )

    assert resolve_inventory_adapter_settings(settings).verify_tls is False
