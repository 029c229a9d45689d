"""Bijective encoding between attribute identities and engine field keys.

Two key forms exist, both starting with the scope:

* escaped: ``<scope>.attr.<name>`` with ``%`` written as ``%25`` and ``.``
  written as ``%2E``; decodable without any lookup.
* digest: ``<scope>.attrh.<sha256 of name>``; used when the escaped name is
  empty or the key would exceed the configured length. Decoding requires the
  persisted mapping.
"""

from __future__ import annotations

import hashlib
import re
from dataclasses import dataclass
from enum import StrEnum

from packages.reporting_shared.errors import DataIntegrityError, codes
from services.state.attribute_mapping.domain import AttributeIdentity, Scope

SEPARATOR = "."
ATTRIBUTE_MARKER = "attr"
DIGEST_MARKER = "attrh"

_ESCAPE_TOKEN = re.compile(r"%(25|2E)")
_UNESCAPED = {"25": "%", "2E": "."}
_DIGEST_HEX = re.compile(r"[0-9a-f]{64}")


class FieldKeyForm(StrEnum):
    """Encoding form of one attribute field key."""

    ESCAPED = "escaped"
    DIGEST = "digest"


@dataclass(frozen=True)
class ParsedFieldKey:
    """Structural view of one attribute field key."""

    form: FieldKeyForm
    scope: Scope
    payload: str

    @property
    def identity(self) -> AttributeIdentity | None:
        """Return the identity for escaped keys; digest keys need a lookup."""
        if self.form is FieldKeyForm.DIGEST:
            return None
        return AttributeIdentity(scope=self.scope, name=unescape_name(self.payload))


def escape_name(name: str) -> str:
    """Escape the key separator and escape character inside a name."""
    return name.replace("%", "%25").replace(SEPARATOR, "%2E")


def unescape_name(escaped: str) -> str:
    """Reverse ``escape_name``; raise ``ValueError`` on stray separators."""
    residue = _ESCAPE_TOKEN.sub("", escaped)
    if SEPARATOR in residue or "%" in residue:
        raise ValueError(f"invalid escape sequence in {escaped!r}")
    return _ESCAPE_TOKEN.sub(lambda match: _UNESCAPED[match.group(1)], escaped)


def name_digest(name: str) -> str:
    """Return the hex digest naming one attribute in digest keys."""
    return hashlib.sha256(name.encode("utf-8", "surrogatepass")).hexdigest()


def encode_field_key(identity: AttributeIdentity) -> str:
    """Return the escaped field key for one identity."""
    return SEPARATOR.join(
        (identity.scope.value, ATTRIBUTE_MARKER, escape_name(identity.name))
    )


def digest_field_key(identity: AttributeIdentity) -> str:
    """Return the digest field key for one identity."""
    return SEPARATOR.join(
        (identity.scope.value, DIGEST_MARKER, name_digest(identity.name))
    )


def generate_field_key(identity: AttributeIdentity, *, max_length: int) -> str:
    """Choose the field key assigned to a newly mapped identity."""
    escaped = escape_name(identity.name)
    key = encode_field_key(identity)
    if escaped == "" or len(key) > max_length:
        return digest_field_key(identity)
    return key


def parse_field_key(key: str) -> ParsedFieldKey | None:
    """Classify one engine key; ``None`` means not an attribute key."""
    parts = key.split(SEPARATOR, 2)
    if len(parts) != 3 or parts[1] not in (ATTRIBUTE_MARKER, DIGEST_MARKER):
        return None
    scope_text, marker, payload = parts
    try:
        scope = Scope(scope_text)
    except ValueError:
        raise DataIntegrityError(
            f"field key has unknown scope: {key}",
            code=codes.MALFORMED_FIELD_KEY,
            metadata={"field_key": key},
        ) from None

    if marker == DIGEST_MARKER:
        if _DIGEST_HEX.fullmatch(payload) is None:
            raise DataIntegrityError(
                f"field key has malformed digest: {key}",
                code=codes.MALFORMED_FIELD_KEY,
                metadata={"field_key": key},
            )
        return ParsedFieldKey(form=FieldKeyForm.DIGEST, scope=scope, payload=payload)

    try:
        unescape_name(payload)
    except ValueError as exc:
        raise DataIntegrityError(
            f"field key has malformed name: {key}",
            code=codes.MALFORMED_FIELD_KEY,
            metadata={"field_key": key},
        ) from exc
    return ParsedFieldKey(form=FieldKeyForm.ESCAPED, scope=scope, payload=payload)


def decode_field_key(key: str) -> AttributeIdentity | None:
    """Decode an escaped attribute key; ``None`` for non-attribute keys.

    Digest keys cannot be decoded structurally and raise a data-integrity
    error; callers resolve them through the attribute mapping service.
    """
    parsed = parse_field_key(key)
    if parsed is None:
        return None
    if parsed.form is FieldKeyForm.DIGEST:
        raise DataIntegrityError(
            f"digest field key requires a stored mapping: {key}",
            code=codes.MISSING_MAPPING,
            metadata={"field_key": key},
        )
    return parsed.identity


def is_attribute_key(key: str) -> bool:
    """Return whether one engine key names a mapped attribute."""
    return parse_field_key(key) is not None


def key_matches_identity(key: str, identity: AttributeIdentity) -> bool:
    """Return whether ``key`` is a valid encoding of ``identity``."""
    parsed = parse_field_key(key)
    if parsed is None or parsed.scope != identity.scope:
        return False
    if parsed.form is FieldKeyForm.DIGEST:
        return parsed.payload == name_digest(identity.name)
    return parsed.identity == identity
