"""Concrete device search service implementation."""

from __future__ import annotations

from packages.reporting_shared.errors import UnknownAttributeError
from packages.reporting_shared.logging import get_logger, public_api_logged
from packages.reporting_shared.logging import fields as log_fields
from packages.reporting_shared.logging import log_context
from packages.reporting_shared.request import RequestMeta
from resources.substrates.elasticsearch.substrate import ElasticsearchSubstrate
from services.action.device_search.config import (
    SERVICE_COMPONENT_ID,
    DeviceSearchSettings,
)
from services.action.device_search.domain import (
    Device,
    FilterAttribute,
    SearchParams,
    SearchResult,
)
from services.action.device_search.query import (
    FieldKeys,
    build_query,
    is_negative_filter,
    validate_predicate,
)
from services.action.device_search.results import decode_search_response
from services.action.device_search.schema import (
    extract_searchable_keys,
    sort_filter_attributes,
)
from services.action.device_search.service import DeviceSearchService
from services.state.attribute_mapping.domain import (
    AttributeIdentity,
    AttributeValue,
    to_identity,
)
from services.state.attribute_mapping.service import AttributeMappingService

_LOGGER = get_logger(__name__)


class DefaultDeviceSearchService(DeviceSearchService):
    """Device search over the engine with per-tenant attribute mapping."""

    def __init__(
        self,
        *,
        settings: DeviceSearchSettings,
        attribute_mapping: AttributeMappingService,
        engine: ElasticsearchSubstrate,
    ) -> None:
        self._settings = settings
        self._attribute_mapping = attribute_mapping
        self._engine = engine

    @public_api_logged(logger=_LOGGER, component_id=SERVICE_COMPONENT_ID)
    def health_check(self, *, meta: RequestMeta) -> None:
        """Ping the mapping store first, then the engine."""
        self._attribute_mapping.check_health(meta=meta)
        self._engine.ping(
            timeout_seconds=meta.timeout_for(
                self._settings.health_timeout_seconds, operation="engine.ping"
            )
        )

    @public_api_logged(
        logger=_LOGGER,
        component_id=SERVICE_COMPONENT_ID,
        id_fields=("tenant_id",),
    )
    def get_searchable_inv_attrs(
        self, *, meta: RequestMeta, tenant_id: str
    ) -> list[FilterAttribute]:
        """List mapped attribute keys present in the tenant's index mapping."""
        description = self._engine.get_devices_index_mapping(
            tenant_id=tenant_id,
            timeout_seconds=meta.timeout_for(
                self._settings.schema_timeout_seconds,
                operation="engine.get_devices_index_mapping",
            ),
        )
        keys = extract_searchable_keys(description)
        identities = self._attribute_mapping.reverse_field_keys(
            meta=meta, tenant_id=tenant_id, field_keys=keys
        )
        attributes = sort_filter_attributes(
            FilterAttribute(name=identity.name, scope=identity.scope, count=1)
            for identity in identities.values()
        )
        _LOGGER.debug("parsed %d searchable attributes", len(attributes))
        return attributes

    @public_api_logged(logger=_LOGGER, component_id=SERVICE_COMPONENT_ID)
    def inventory_search_devices(
        self, *, meta: RequestMeta, params: SearchParams
    ) -> SearchResult:
        """Map attributes, query the engine and decode one page of devices."""
        with log_context({log_fields.TENANT_ID: params.tenant_id or None}):
            resolved = self._resolve_attributes(meta=meta, params=params)
            if resolved is None:
                _LOGGER.debug("filter on unknown attribute matches no devices")
                return SearchResult(devices=(), total=0)
            params, field_keys = resolved

            query = build_query(params, field_keys=field_keys)
            raw = self._engine.search(
                tenant_id=params.tenant_id,
                body=query.body,
                timeout_seconds=meta.timeout_for(
                    self._settings.search_timeout_seconds, operation="engine.search"
                ),
            )
            page = decode_search_response(raw, expect_fields=query.uses_fields)

            identities = self._attribute_mapping.reverse_field_keys(
                meta=meta,
                tenant_id=params.tenant_id,
                field_keys=[key for hit in page.hits for key in hit.raw_attributes],
            )
            devices = tuple(
                Device(
                    id=hit.id,
                    created_ts=hit.created_ts,
                    updated_ts=hit.updated_ts,
                    attributes=tuple(
                        AttributeValue(
                            name=identities[key].name,
                            scope=identities[key].scope,
                            value=value,
                        )
                        for key, value in hit.raw_attributes.items()
                    ),
                )
                for hit in page.hits
            )
            return SearchResult(devices=devices, total=page.total)

    def _resolve_attributes(
        self, *, meta: RequestMeta, params: SearchParams
    ) -> tuple[SearchParams, FieldKeys] | None:
        """Forward-map every referenced attribute and apply the unknown policy.

        Returns ``None`` when a positive filter references an attribute that
        was never written, since no device can match it.
        """
        for predicate in params.filters:
            validate_predicate(predicate)
        referenced = [
            to_identity(item.scope, item.attribute)
            for item in (*params.attributes, *params.filters, *params.sort)
        ]
        mapped = self._attribute_mapping.map_attributes(
            meta=meta,
            tenant_id=params.tenant_id,
            identities=referenced,
            create_if_missing=False,
        )
        field_keys: FieldKeys = {
            AttributeIdentity(scope=item.scope, name=item.name): item.field_key
            for item in mapped
        }

        def known(scope: str, attribute: str) -> bool:
            return to_identity(scope, attribute) in field_keys

        filters = []
        for predicate in params.filters:
            if known(predicate.scope, predicate.attribute):
                filters.append(predicate)
            elif self._settings.strict_unknown_attributes:
                raise UnknownAttributeError(
                    tenant_id=params.tenant_id,
                    scope=predicate.scope,
                    name=predicate.attribute,
                )
            elif not is_negative_filter(predicate):
                return None

        resolved = params.model_copy(
            update={
                "filters": tuple(filters),
                "attributes": tuple(
                    item for item in params.attributes if known(item.scope, item.attribute)
                ),
                "sort": tuple(
                    item for item in params.sort if known(item.scope, item.attribute)
                ),
            }
        )
        return resolved, field_keys
