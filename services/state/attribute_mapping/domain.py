"""Domain contracts for tenant attribute mapping payloads."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict

from packages.reporting_shared.errors import SearchValidationError, codes


class Scope(StrEnum):
    """Closed set of attribute namespaces."""

    INVENTORY = "inventory"
    IDENTITY = "identity"
    SYSTEM = "system"
    TAGS = "tags"
    MONITOR = "monitor"


class MissingPolicy(StrEnum):
    """Handling of identities without a mapping when creation is disallowed."""

    DROP = "drop"
    FAIL = "fail"


class AttributeIdentity(BaseModel):
    """Raw attribute identity as seen by tenants and devices."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    scope: Scope
    name: str


class AttributeMappingEntry(BaseModel):
    """Persisted association between one identity and its field key."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    tenant_id: str
    scope: Scope
    name: str
    field_key: str

    @property
    def identity(self) -> AttributeIdentity:
        """Return the raw identity this entry maps."""
        return AttributeIdentity(scope=self.scope, name=self.name)


class MappedAttribute(BaseModel):
    """Forward-mapped attribute carrying its engine field key."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    scope: Scope
    name: str
    field_key: str


class AttributeValue(BaseModel):
    """Reverse-mapped attribute with its stored value."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    scope: Scope
    value: Any


def to_identity(scope: str, name: str) -> AttributeIdentity:
    """Build an identity from caller input, rejecting unknown scopes."""
    try:
        parsed = Scope(scope)
    except ValueError:
        raise SearchValidationError(
            f"unknown attribute scope: {scope}",
            code=codes.UNKNOWN_SCOPE,
            metadata={"scope": scope, "name": name},
        ) from None
    return AttributeIdentity(scope=parsed, name=name)
