"""Bounded in-process cache of immutable attribute mapping entries."""

from __future__ import annotations

import threading
from collections import OrderedDict
from typing import Iterable

from services.state.attribute_mapping.domain import (
    AttributeIdentity,
    AttributeMappingEntry,
)

_IdentityKey = tuple[str, str, str]
_FieldKey = tuple[str, str]


class MappingEntryCache:
    """LRU cache indexed both by identity and by field key.

    Entries are never updated or deleted once stored, so a cached entry stays
    valid for the lifetime of the process.
    """

    def __init__(self, max_entries: int) -> None:
        self._max_entries = max_entries
        self._by_identity: OrderedDict[_IdentityKey, AttributeMappingEntry] = (
            OrderedDict()
        )
        self._by_field_key: dict[_FieldKey, _IdentityKey] = {}
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        """Return whether the cache stores anything."""
        return self._max_entries > 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_identity)

    def get_identity(
        self, tenant_id: str, identity: AttributeIdentity
    ) -> AttributeMappingEntry | None:
        """Return the cached entry for one identity."""
        key = (tenant_id, identity.scope.value, identity.name)
        with self._lock:
            entry = self._by_identity.get(key)
            if entry is not None:
                self._by_identity.move_to_end(key)
            return entry

    def get_field_key(
        self, tenant_id: str, field_key: str
    ) -> AttributeMappingEntry | None:
        """Return the cached entry owning one field key."""
        with self._lock:
            identity_key = self._by_field_key.get((tenant_id, field_key))
            if identity_key is None:
                return None
            self._by_identity.move_to_end(identity_key)
            return self._by_identity[identity_key]

    def put_many(self, entries: Iterable[AttributeMappingEntry]) -> None:
        """Store entries, evicting the least recently used beyond capacity."""
        if not self.enabled:
            return
        with self._lock:
            for entry in entries:
                key = (entry.tenant_id, entry.scope.value, entry.name)
                self._by_identity[key] = entry
                self._by_identity.move_to_end(key)
                self._by_field_key[(entry.tenant_id, entry.field_key)] = key
            while len(self._by_identity) > self._max_entries:
                _, evicted = self._by_identity.popitem(last=False)
                self._by_field_key.pop((evicted.tenant_id, evicted.field_key), None)
