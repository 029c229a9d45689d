"""Device search service: attribute-aware queries over the device index."""

from services.action.device_search.config import (
    SERVICE_COMPONENT_ID,
    DeviceSearchSettings,
    resolve_device_search_settings,
)
from services.action.device_search.domain import (
    ZERO_TIME,
    Device,
    FilterAttribute,
    FilterOperator,
    FilterPredicate,
    SearchParams,
    SearchResult,
    SelectAttribute,
    SortCriteria,
    SortOrder,
)
from services.action.device_search.service import (
    DeviceSearchService,
    build_device_search_service,
)

__all__ = [
    "Device",
    "DeviceSearchService",
    "DeviceSearchSettings",
    "FilterAttribute",
    "FilterOperator",
    "FilterPredicate",
    "SERVICE_COMPONENT_ID",
    "SearchParams",
    "SearchResult",
    "SelectAttribute",
    "SortCriteria",
    "SortOrder",
    "ZERO_TIME",
    "build_device_search_service",
    "resolve_device_search_settings",
]
