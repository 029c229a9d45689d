"""List the attribute keys currently searchable in a device index."""

from __future__ import annotations

from typing import Iterable

from services.action.device_search.domain import FilterAttribute
from services.action.device_search.results import StructuralAccessor
from services.state.attribute_mapping.codec import is_attribute_key


def extract_searchable_keys(index_mapping: object) -> list[str]:
    """Return attribute field keys declared in ``mappings.properties``."""
    properties = StructuralAccessor(index_mapping).object("mappings").object(
        "properties"
    )
    return [key for key in _property_paths(properties) if is_attribute_key(key)]


def sort_filter_attributes(
    attributes: Iterable[FilterAttribute],
) -> list[FilterAttribute]:
    """Order by scope ascending, then name descending."""
    by_name = sorted(attributes, key=lambda item: item.name, reverse=True)
    return sorted(by_name, key=lambda item: item.scope.value)


def _property_paths(properties: StructuralAccessor, prefix: str = "") -> list[str]:
    """Flatten nested object properties into dotted field paths."""
    paths: list[str] = []
    for name, _ in properties.items():
        definition = properties.object(name)
        if definition.has("properties"):
            paths.extend(
                _property_paths(
                    definition.object("properties"), prefix=f"{prefix}{name}."
                )
            )
        else:
            paths.append(f"{prefix}{name}")
    return paths
