"""Authoritative in-process Python API for device search."""

from __future__ import annotations

from abc import ABC, abstractmethod

from packages.reporting_shared.config import ReportingSettings
from packages.reporting_shared.request import RequestMeta
from resources.substrates.elasticsearch.substrate import ElasticsearchSubstrate
from services.action.device_search.domain import (
    FilterAttribute,
    SearchParams,
    SearchResult,
)
from services.state.attribute_mapping.service import AttributeMappingService


class DeviceSearchService(ABC):
    """Public API for searching devices by mapped attributes."""

    @abstractmethod
    def health_check(self, *, meta: RequestMeta) -> None:
        """Raise a dependency error unless the mapping store and engine answer."""

    @abstractmethod
    def get_searchable_inv_attrs(
        self, *, meta: RequestMeta, tenant_id: str
    ) -> list[FilterAttribute]:
        """List attributes currently searchable for one tenant."""

    @abstractmethod
    def inventory_search_devices(
        self, *, meta: RequestMeta, params: SearchParams
    ) -> SearchResult:
        """Search devices and return one page plus the total count."""


def build_device_search_service(
    *,
    settings: ReportingSettings,
    attribute_mapping: AttributeMappingService | None = None,
    engine: ElasticsearchSubstrate | None = None,
) -> DeviceSearchService:
    """Build the default device search implementation from typed settings."""
    from resources.substrates.elasticsearch import (
        ElasticsearchClientSubstrate,
        resolve_elasticsearch_settings,
    )
    from services.action.device_search.config import resolve_device_search_settings
    from services.action.device_search.implementation import (
        DefaultDeviceSearchService,
    )
    from services.state.attribute_mapping.service import (
        build_attribute_mapping_service,
    )

    return DefaultDeviceSearchService(
        settings=resolve_device_search_settings(settings),
        attribute_mapping=(
            attribute_mapping or build_attribute_mapping_service(settings=settings)
        ),
        engine=engine
        or ElasticsearchClientSubstrate(resolve_elasticsearch_settings(settings)),
    )
