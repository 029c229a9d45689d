"""Attribute mapping service: tenant identities to engine field keys."""

from services.state.attribute_mapping.config import (
    SERVICE_COMPONENT_ID,
    AttributeMappingSettings,
    resolve_attribute_mapping_settings,
)
from services.state.attribute_mapping.domain import (
    AttributeIdentity,
    AttributeMappingEntry,
    AttributeValue,
    MappedAttribute,
    MissingPolicy,
    Scope,
    to_identity,
)
from services.state.attribute_mapping.service import (
    AttributeMappingService,
    build_attribute_mapping_service,
)

__all__ = [
    "AttributeIdentity",
    "AttributeMappingEntry",
    "AttributeMappingService",
    "AttributeMappingSettings",
    "AttributeValue",
    "MappedAttribute",
    "MissingPolicy",
    "SERVICE_COMPONENT_ID",
    "Scope",
    "build_attribute_mapping_service",
    "resolve_attribute_mapping_settings",
    "to_identity",
]
