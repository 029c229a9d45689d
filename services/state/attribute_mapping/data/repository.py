"""Authoritative Postgres repository for attribute mapping entries."""

from __future__ import annotations

from typing import Any, Sequence

from sqlalchemy import false, func, select, tuple_
from sqlalchemy.dialects.postgresql import insert

from packages.reporting_shared.errors import DataIntegrityError, codes
from resources.substrates.postgres.schema_session import ServiceSchemaSessionProvider
from services.state.attribute_mapping.codec import key_matches_identity
from services.state.attribute_mapping.domain import (
    AttributeIdentity,
    AttributeMappingEntry,
    Scope,
)
from services.state.attribute_mapping.interfaces import AttributeMappingRepository

from .schema import attribute_mappings


class PostgresAttributeMappingRepository(AttributeMappingRepository):
    """SQL repository over the attribute mapping schema."""

    def __init__(self, sessions: ServiceSchemaSessionProvider) -> None:
        self._sessions = sessions

    def ping(self, *, timeout_seconds: float) -> None:
        """Probe the mapping table without reading any rows."""
        with self._sessions.session(timeout_seconds=timeout_seconds) as session:
            session.execute(
                select(func.count())
                .select_from(attribute_mappings)
                .where(false())
            )

    def get_by_identities(
        self,
        *,
        tenant_id: str,
        identities: Sequence[AttributeIdentity],
        timeout_seconds: float,
    ) -> list[AttributeMappingEntry]:
        """Read existing entries for identities in one statement."""
        if not identities:
            return []
        with self._sessions.session(timeout_seconds=timeout_seconds) as session:
            rows = (
                session.execute(_select_by_identities(tenant_id, identities))
                .mappings()
                .all()
            )
            return [_to_entry(row) for row in rows]

    def get_by_field_keys(
        self,
        *,
        tenant_id: str,
        field_keys: Sequence[str],
        timeout_seconds: float,
    ) -> list[AttributeMappingEntry]:
        """Read existing entries for field keys in one statement."""
        if not field_keys:
            return []
        with self._sessions.session(timeout_seconds=timeout_seconds) as session:
            rows = (
                session.execute(
                    select(attribute_mappings).where(
                        attribute_mappings.c.tenant_id == tenant_id,
                        attribute_mappings.c.field_key.in_(list(field_keys)),
                    )
                )
                .mappings()
                .all()
            )
            return [_to_entry(row) for row in rows]

    def create_if_absent(
        self,
        *,
        tenant_id: str,
        candidates: Sequence[AttributeMappingEntry],
        timeout_seconds: float,
    ) -> list[AttributeMappingEntry]:
        """Insert missing entries and read back whichever rows won."""
        if not candidates:
            return []
        with self._sessions.session(timeout_seconds=timeout_seconds) as session:
            session.execute(_insert_candidates(tenant_id, candidates))
            rows = (
                session.execute(
                    _select_by_identities(
                        tenant_id,
                        [candidate.identity for candidate in candidates],
                    )
                )
                .mappings()
                .all()
            )
            return [_to_entry(row) for row in rows]


def _insert_candidates(
    tenant_id: str, candidates: Sequence[AttributeMappingEntry]
) -> Any:
    """Build one multi-row insert that skips rows violating any unique key."""
    return (
        insert(attribute_mappings)
        .values(
            [
                {
                    "tenant_id": tenant_id,
                    "scope": candidate.scope.value,
                    "name": candidate.name,
                    "field_key": candidate.field_key,
                }
                for candidate in candidates
            ]
        )
        .on_conflict_do_nothing()
    )


def _select_by_identities(
    tenant_id: str, identities: Sequence[AttributeIdentity]
) -> Any:
    """Build one select matching any of the given identities."""
    return select(attribute_mappings).where(
        attribute_mappings.c.tenant_id == tenant_id,
        tuple_(attribute_mappings.c.scope, attribute_mappings.c.name).in_(
            [(identity.scope.value, identity.name) for identity in identities]
        ),
    )


def _to_entry(row: Any) -> AttributeMappingEntry:
    """Map one SQL row to a strict domain entry."""
    scope = row.get("scope")
    name = row.get("name")
    field_key = row.get("field_key")
    tenant_id = row.get("tenant_id")
    if not all(isinstance(value, str) for value in (scope, name, field_key, tenant_id)):
        raise DataIntegrityError(
            "attribute mapping row has missing or non-text columns",
            metadata={"tenant_id": tenant_id, "field_key": field_key},
        )
    try:
        identity = AttributeIdentity(scope=Scope(scope), name=name)
    except ValueError:
        raise DataIntegrityError(
            f"attribute mapping row has unknown scope: {scope}",
            code=codes.UNKNOWN_SCOPE,
            metadata={"tenant_id": tenant_id, "field_key": field_key},
        ) from None
    if not key_matches_identity(field_key, identity):
        raise DataIntegrityError(
            f"stored field key does not encode {scope}/{name}: {field_key}",
            code=codes.MALFORMED_FIELD_KEY,
            metadata={"tenant_id": tenant_id, "field_key": field_key},
        )
    return AttributeMappingEntry(
        tenant_id=tenant_id,
        scope=identity.scope,
        name=name,
        field_key=field_key,
    )
