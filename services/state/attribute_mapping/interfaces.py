"""Transport-neutral protocol interfaces used by attribute mapping."""

from __future__ import annotations

from typing import Protocol, Sequence

from services.state.attribute_mapping.domain import (
    AttributeIdentity,
    AttributeMappingEntry,
)


class AttributeMappingRepository(Protocol):
    """Protocol for authoritative attribute mapping persistence."""

    def ping(self, *, timeout_seconds: float) -> None:
        """Raise unless the backing store answers."""

    def get_by_identities(
        self,
        *,
        tenant_id: str,
        identities: Sequence[AttributeIdentity],
        timeout_seconds: float,
    ) -> list[AttributeMappingEntry]:
        """Read existing entries for the given identities."""

    def get_by_field_keys(
        self,
        *,
        tenant_id: str,
        field_keys: Sequence[str],
        timeout_seconds: float,
    ) -> list[AttributeMappingEntry]:
        """Read existing entries for the given field keys."""

    def create_if_absent(
        self,
        *,
        tenant_id: str,
        candidates: Sequence[AttributeMappingEntry],
        timeout_seconds: float,
    ) -> list[AttributeMappingEntry]:
        """Insert entries that do not exist yet and return the stored winners.

        Candidates losing a race keep the concurrently stored entry. An
        identity whose candidate key is owned by another identity is absent
        from the result.
        """
