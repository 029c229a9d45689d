"""Transport-agnostic contract for the device search engine."""

from __future__ import annotations

from typing import Any, Mapping, Protocol


class ElasticsearchSubstrate(Protocol):
    """Protocol for device index search and schema operations."""

    def search(
        self,
        *,
        tenant_id: str,
        body: Mapping[str, Any],
        timeout_seconds: float,
    ) -> dict[str, Any]:
        """Execute one search request and return the raw response document."""

    def get_devices_index_mapping(
        self, *, tenant_id: str, timeout_seconds: float
    ) -> dict[str, Any]:
        """Return the index description (``{"mappings": ...}``) for one tenant."""

    def ping(self, *, timeout_seconds: float) -> None:
        """Raise a dependency error unless the cluster answers."""
