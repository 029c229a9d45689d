"""Concrete attribute mapping service implementation."""

from __future__ import annotations

from typing import Any, Callable, Mapping, Sequence, TypeVar

from packages.reporting_shared.errors import (
    DataIntegrityError,
    ReportingError,
    UnknownAttributeError,
    codes,
)
from packages.reporting_shared.logging import get_logger, public_api_logged
from packages.reporting_shared.request import RequestMeta
from resources.substrates.postgres.errors import normalize_postgres_error
from services.state.attribute_mapping.cache import MappingEntryCache
from services.state.attribute_mapping.codec import (
    FieldKeyForm,
    generate_field_key,
    parse_field_key,
)
from services.state.attribute_mapping.config import (
    SERVICE_COMPONENT_ID,
    AttributeMappingSettings,
)
from services.state.attribute_mapping.domain import (
    AttributeIdentity,
    AttributeMappingEntry,
    AttributeValue,
    MappedAttribute,
    MissingPolicy,
)
from services.state.attribute_mapping.interfaces import AttributeMappingRepository
from services.state.attribute_mapping.service import AttributeMappingService

_LOGGER = get_logger(__name__)

_T = TypeVar("_T")


class DefaultAttributeMappingService(AttributeMappingService):
    """Attribute mapping backed by a persisted repository and an entry cache."""

    def __init__(
        self,
        *,
        settings: AttributeMappingSettings,
        repository: AttributeMappingRepository,
    ) -> None:
        self._settings = settings
        self._repository = repository
        self._cache = MappingEntryCache(settings.cache_size)

    @public_api_logged(logger=_LOGGER, component_id=SERVICE_COMPONENT_ID)
    def check_health(self, *, meta: RequestMeta) -> None:
        """Ping the mapping store."""
        self._store_call(
            meta=meta,
            operation="ping",
            tenant_id="",
            call=lambda timeout: self._repository.ping(timeout_seconds=timeout),
        )

    @public_api_logged(
        logger=_LOGGER,
        component_id=SERVICE_COMPONENT_ID,
        id_fields=("tenant_id",),
    )
    def map_attributes(
        self,
        *,
        meta: RequestMeta,
        tenant_id: str,
        identities: Sequence[AttributeIdentity],
        create_if_missing: bool = False,
        on_missing: MissingPolicy = MissingPolicy.DROP,
    ) -> list[MappedAttribute]:
        """Forward-map identities, creating missing entries when allowed."""
        unique = list(dict.fromkeys(identities))
        found = self._lookup_identities(meta=meta, tenant_id=tenant_id, identities=unique)

        missing = [identity for identity in unique if identity not in found]
        if missing and create_if_missing:
            found.update(
                self._create_entries(meta=meta, tenant_id=tenant_id, identities=missing)
            )
        elif missing and on_missing is MissingPolicy.FAIL:
            first = missing[0]
            raise UnknownAttributeError(
                tenant_id=tenant_id, scope=first.scope.value, name=first.name
            )

        return [
            MappedAttribute(
                scope=identity.scope,
                name=identity.name,
                field_key=found[identity].field_key,
            )
            for identity in identities
            if identity in found
        ]

    @public_api_logged(
        logger=_LOGGER,
        component_id=SERVICE_COMPONENT_ID,
        id_fields=("tenant_id",),
    )
    def reverse_field_keys(
        self,
        *,
        meta: RequestMeta,
        tenant_id: str,
        field_keys: Sequence[str],
    ) -> dict[str, AttributeIdentity]:
        """Decode escaped keys and resolve digest keys in one batch."""
        resolved: dict[str, AttributeIdentity] = {}
        digest_keys: list[str] = []
        for key in dict.fromkeys(field_keys):
            parsed = parse_field_key(key)
            if parsed is None:
                continue
            if parsed.form is FieldKeyForm.DIGEST:
                digest_keys.append(key)
                continue
            identity = parsed.identity
            if identity is not None:
                resolved[key] = identity

        if digest_keys:
            entries = self._lookup_field_keys(
                meta=meta, tenant_id=tenant_id, field_keys=digest_keys
            )
            for key in digest_keys:
                entry = entries.get(key)
                if entry is None:
                    raise DataIntegrityError(
                        f"no attribute mapping for field key {key}",
                        code=codes.MISSING_MAPPING,
                        metadata={"tenant_id": tenant_id, "field_key": key},
                    )
                resolved[key] = entry.identity
        return resolved

    @public_api_logged(
        logger=_LOGGER,
        component_id=SERVICE_COMPONENT_ID,
        id_fields=("tenant_id",),
    )
    def reverse_attributes(
        self,
        *,
        meta: RequestMeta,
        tenant_id: str,
        raw_attributes: Mapping[str, Any],
    ) -> list[AttributeValue]:
        """Rebuild attribute values, skipping non-attribute keys."""
        identities = self.reverse_field_keys(
            meta=meta, tenant_id=tenant_id, field_keys=list(raw_attributes)
        )
        return [
            AttributeValue(
                name=identities[key].name,
                scope=identities[key].scope,
                value=value,
            )
            for key, value in raw_attributes.items()
            if key in identities
        ]

    def _lookup_identities(
        self,
        *,
        meta: RequestMeta,
        tenant_id: str,
        identities: Sequence[AttributeIdentity],
    ) -> dict[AttributeIdentity, AttributeMappingEntry]:
        """Return known entries from cache first, then the store."""
        found: dict[AttributeIdentity, AttributeMappingEntry] = {}
        uncached: list[AttributeIdentity] = []
        for identity in identities:
            entry = self._cache.get_identity(tenant_id, identity)
            if entry is None:
                uncached.append(identity)
            else:
                found[identity] = entry

        for batch in _batches(uncached, self._settings.max_batch_size):
            entries = self._store_call(
                meta=meta,
                operation="get_by_identities",
                tenant_id=tenant_id,
                call=lambda timeout, batch=batch: self._repository.get_by_identities(
                    tenant_id=tenant_id, identities=batch, timeout_seconds=timeout
                ),
            )
            self._cache.put_many(entries)
            found.update((entry.identity, entry) for entry in entries)
        return found

    def _lookup_field_keys(
        self,
        *,
        meta: RequestMeta,
        tenant_id: str,
        field_keys: Sequence[str],
    ) -> dict[str, AttributeMappingEntry]:
        """Return known entries by field key from cache first, then the store."""
        found: dict[str, AttributeMappingEntry] = {}
        uncached: list[str] = []
        for key in field_keys:
            entry = self._cache.get_field_key(tenant_id, key)
            if entry is None:
                uncached.append(key)
            else:
                found[key] = entry

        for batch in _batches(uncached, self._settings.max_batch_size):
            entries = self._store_call(
                meta=meta,
                operation="get_by_field_keys",
                tenant_id=tenant_id,
                call=lambda timeout, batch=batch: self._repository.get_by_field_keys(
                    tenant_id=tenant_id, field_keys=batch, timeout_seconds=timeout
                ),
            )
            self._cache.put_many(entries)
            found.update((entry.field_key, entry) for entry in entries)
        return found

    def _create_entries(
        self,
        *,
        meta: RequestMeta,
        tenant_id: str,
        identities: Sequence[AttributeIdentity],
    ) -> dict[AttributeIdentity, AttributeMappingEntry]:
        """Persist new entries; racing writers observe the stored winner."""
        created: dict[AttributeIdentity, AttributeMappingEntry] = {}
        for batch in _batches(identities, self._settings.max_batch_size):
            candidates = [
                AttributeMappingEntry(
                    tenant_id=tenant_id,
                    scope=identity.scope,
                    name=identity.name,
                    field_key=generate_field_key(
                        identity, max_length=self._settings.max_field_key_length
                    ),
                )
                for identity in batch
            ]
            stored = self._store_call(
                meta=meta,
                operation="create_if_absent",
                tenant_id=tenant_id,
                call=lambda timeout, candidates=candidates: (
                    self._repository.create_if_absent(
                        tenant_id=tenant_id,
                        candidates=candidates,
                        timeout_seconds=timeout,
                    )
                ),
            )
            by_identity = {entry.identity: entry for entry in stored}
            for candidate in candidates:
                if candidate.identity not in by_identity:
                    raise DataIntegrityError(
                        f"field key {candidate.field_key} already maps another "
                        "attribute",
                        code=codes.FIELD_KEY_COLLISION,
                        metadata={
                            "tenant_id": tenant_id,
                            "scope": candidate.scope.value,
                            "field_key": candidate.field_key,
                        },
                    )
            _LOGGER.info(
                "mapped %d new attributes for tenant %s", len(candidates), tenant_id
            )
            self._cache.put_many(stored)
            created.update(by_identity)
        return created

    def _store_call(
        self,
        *,
        meta: RequestMeta,
        operation: str,
        tenant_id: str,
        call: Callable[[float], _T],
    ) -> _T:
        """Run one repository call bounded by the request deadline."""
        timeout = meta.timeout_for(
            self._settings.store_timeout_seconds,
            operation=f"attribute_mapping.{operation}",
        )
        try:
            return call(timeout)
        except ReportingError:
            raise
        except Exception as exc:  # noqa: BLE001
            raise normalize_postgres_error(
                exc, operation=operation, metadata={"tenant_id": tenant_id or None}
            ) from exc


def _batches(items: Sequence[_T], size: int) -> list[Sequence[_T]]:
    """Split one sequence into bounded chunks."""
    return [items[start : start + size] for start in range(0, len(items), size)]
