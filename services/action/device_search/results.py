"""Decode raw engine search responses into device records.

Every level of the response is validated through ``StructuralAccessor``; any
missing or mistyped level fails the whole page with a data-integrity error.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping

from packages.reporting_shared.errors import DataIntegrityError, codes
from services.action.device_search.domain import ZERO_TIME
from services.action.device_search.query import FIELD_ID
from services.state.attribute_mapping.codec import FieldKeyForm, parse_field_key
from services.state.attribute_mapping.domain import Scope

SYSTEM_CREATED_AT = "created_at"
SYSTEM_UPDATED_AT = "updated_at"

_RFC3339 = re.compile(
    r"\d{4}-\d{2}-\d{2}[Tt]\d{2}:\d{2}:\d{2}(\.\d+)?([Zz]|[+-]\d{2}:\d{2})"
)


class StructuralAccessor:
    """Typed, path-aware view over one decoded JSON object."""

    def __init__(self, value: object, path: str = "$") -> None:
        if not isinstance(value, Mapping):
            raise _malformed(path, "an object")
        self._value = value
        self._path = path

    @property
    def path(self) -> str:
        """Return the JSON path of this object."""
        return self._path

    def items(self) -> list[tuple[str, Any]]:
        """Return the object's members."""
        return list(self._value.items())

    def has(self, key: str) -> bool:
        """Return whether ``key`` is present."""
        return key in self._value

    def object(self, key: str) -> StructuralAccessor:
        """Return the nested object at ``key``."""
        return StructuralAccessor(self._require(key), self._child(key))

    def array(self, key: str) -> list[Any]:
        """Return the array at ``key``."""
        value = self._require(key)
        if not isinstance(value, list):
            raise _malformed(self._child(key), "an array")
        return value

    def integer(self, key: str) -> int:
        """Return the integral number at ``key``."""
        value = self._require(key)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise _malformed(self._child(key), "a number")
        if isinstance(value, float) and not value.is_integer():
            raise _malformed(self._child(key), "an integral number")
        return int(value)

    def _require(self, key: str) -> Any:
        if key not in self._value:
            raise DataIntegrityError(
                f"missing {self._child(key)} in engine response",
                code=codes.MALFORMED_RESPONSE,
                metadata={"path": self._child(key)},
            )
        return self._value[key]

    def _child(self, key: str) -> str:
        return f"{self._path}.{key}"


@dataclass(frozen=True)
class DecodedHit:
    """One hit with its device ID and raw attribute key/value pairs."""

    id: str
    raw_attributes: dict[str, Any] = field(default_factory=dict)
    created_ts: datetime = ZERO_TIME
    updated_ts: datetime = ZERO_TIME


@dataclass(frozen=True)
class DecodedPage:
    """Total match count plus the decoded hits of one page."""

    total: int
    hits: tuple[DecodedHit, ...]


def decode_search_response(raw: object, *, expect_fields: bool) -> DecodedPage:
    """Extract the total and hits from one raw search response."""
    hits = StructuralAccessor(raw).object("hits")
    total = hits.object("total").integer("value")
    decoded = tuple(
        _decode_hit(hit, path=f"{hits.path}.hits[{index}]", expect_fields=expect_fields)
        for index, hit in enumerate(hits.array("hits"))
    )
    return DecodedPage(total=total, hits=decoded)


def parse_timestamp(value: object) -> datetime:
    """Parse an RFC 3339 timestamp, or return the zero time."""
    if not isinstance(value, str) or _RFC3339.fullmatch(value) is None:
        return ZERO_TIME
    try:
        return datetime.fromisoformat(value.upper().replace("Z", "+00:00"))
    except ValueError:
        return ZERO_TIME


def flatten_document(document: Mapping[str, Any], prefix: str = "") -> dict[str, Any]:
    """Flatten nested objects into dotted keys."""
    flat: dict[str, Any] = {}
    for key, value in document.items():
        path = f"{prefix}{key}"
        if isinstance(value, Mapping):
            flat.update(flatten_document(value, prefix=f"{path}."))
        else:
            flat[path] = value
    return flat


def _decode_hit(hit: object, *, path: str, expect_fields: bool) -> DecodedHit:
    """Decode one hit body into an ID and raw attributes."""
    body = StructuralAccessor(hit, path)
    order = ("fields", "_source") if expect_fields else ("_source", "fields")
    source = next((name for name in order if body.has(name)), None)
    if source is None:
        raise DataIntegrityError(
            f"hit {path} has neither _source nor fields",
            code=codes.MALFORMED_RESPONSE,
            metadata={"path": path},
        )
    document = dict(body.object(source).items())
    if source == "_source":
        document = flatten_document(document)

    device_id = _device_id(document.get(FIELD_ID), path=f"{path}.{source}.{FIELD_ID}")
    raw_attributes: dict[str, Any] = {}
    created_ts = updated_ts = ZERO_TIME
    for key, value in document.items():
        parsed = parse_field_key(key)
        if parsed is None:
            continue
        value = _unwrap(value)
        raw_attributes[key] = value
        if parsed.form is FieldKeyForm.ESCAPED and parsed.scope is Scope.SYSTEM:
            if parsed.payload == SYSTEM_CREATED_AT:
                created_ts = parse_timestamp(value)
            elif parsed.payload == SYSTEM_UPDATED_AT:
                updated_ts = parse_timestamp(value)

    return DecodedHit(
        id=device_id,
        raw_attributes=raw_attributes,
        created_ts=created_ts,
        updated_ts=updated_ts,
    )


def _device_id(value: object, *, path: str) -> str:
    """Return the device ID from a string or single-element string array."""
    if isinstance(value, list) and len(value) == 1:
        value = value[0]
    if not isinstance(value, str):
        raise DataIntegrityError(
            f"can't parse device id at {path} as neither single value nor array",
            code=codes.MALFORMED_RESPONSE,
            metadata={"path": path},
        )
    return value


def _unwrap(value: Any) -> Any:
    """Unwrap single-element arrays produced by field selection."""
    if isinstance(value, list) and len(value) == 1:
        return value[0]
    return value


def _malformed(path: str, expected: str) -> DataIntegrityError:
    return DataIntegrityError(
        f"engine response {path} is not {expected}",
        code=codes.MALFORMED_RESPONSE,
        metadata={"path": path},
    )
