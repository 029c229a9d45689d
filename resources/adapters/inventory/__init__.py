"""Inventory adapter resource for device lookups."""

from resources.adapters.inventory.adapter import (
    InventoryAdapter,
    InventoryAdapterDependencyError,
    InventoryAdapterError,
    InventoryAdapterInternalError,
    InventoryAttribute,
    InventoryDevice,
)
from resources.adapters.inventory.config import (
    RESOURCE_COMPONENT_ID,
    InventoryAdapterSettings,
    resolve_inventory_adapter_settings,
)
from resources.adapters.inventory.inventory_adapter import HttpInventoryAdapter

__all__ = [
    "HttpInventoryAdapter",
    "InventoryAdapter",
    "InventoryAdapterDependencyError",
    "InventoryAdapterError",
    "InventoryAdapterInternalError",
    "InventoryAdapterSettings",
    "InventoryAttribute",
    "InventoryDevice",
    "RESOURCE_COMPONENT_ID",
    "resolve_inventory_adapter_settings",
]
