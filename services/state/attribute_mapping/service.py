"""Authoritative in-process Python API for attribute mapping."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping, Sequence

from packages.reporting_shared.config import ReportingSettings
from packages.reporting_shared.request import RequestMeta
from services.state.attribute_mapping.domain import (
    AttributeIdentity,
    AttributeValue,
    MappedAttribute,
    MissingPolicy,
)
from services.state.attribute_mapping.interfaces import AttributeMappingRepository


class AttributeMappingService(ABC):
    """Public API for per-tenant attribute identity to field key mapping."""

    @abstractmethod
    def check_health(self, *, meta: RequestMeta) -> None:
        """Raise a dependency error unless the mapping store answers."""

    @abstractmethod
    def map_attributes(
        self,
        *,
        meta: RequestMeta,
        tenant_id: str,
        identities: Sequence[AttributeIdentity],
        create_if_missing: bool = False,
        on_missing: MissingPolicy = MissingPolicy.DROP,
    ) -> list[MappedAttribute]:
        """Forward-map identities to field keys in input order."""

    @abstractmethod
    def reverse_field_keys(
        self,
        *,
        meta: RequestMeta,
        tenant_id: str,
        field_keys: Sequence[str],
    ) -> dict[str, AttributeIdentity]:
        """Resolve attribute field keys to identities, skipping other keys.

        Keys may come from many documents at once. Device search passes every
        key of a result page here so the page costs one store lookup.
        """

    @abstractmethod
    def reverse_attributes(
        self,
        *,
        meta: RequestMeta,
        tenant_id: str,
        raw_attributes: Mapping[str, Any],
    ) -> list[AttributeValue]:
        """Rebuild attribute values from one document's ``field_key -> value`` pairs.

        Use ``reverse_field_keys`` to resolve keys across several documents.
        """


def build_attribute_mapping_service(
    *,
    settings: ReportingSettings,
    repository: AttributeMappingRepository | None = None,
) -> AttributeMappingService:
    """Build the default attribute mapping implementation from typed settings."""
    from services.state.attribute_mapping.config import (
        resolve_attribute_mapping_settings,
    )
    from services.state.attribute_mapping.data import (
        AttributeMappingPostgresRuntime,
        PostgresAttributeMappingRepository,
    )
    from services.state.attribute_mapping.implementation import (
        DefaultAttributeMappingService,
    )

    if repository is None:
        runtime = AttributeMappingPostgresRuntime.from_settings(settings)
        repository = PostgresAttributeMappingRepository(runtime.schema_sessions)
    return DefaultAttributeMappingService(
        settings=resolve_attribute_mapping_settings(settings),
        repository=repository,
    )
