"""Tests for attribute field key encoding and classification."""

from __future__ import annotations

import pytest

from packages.reporting_shared.errors import DataIntegrityError, codes
from services.state.attribute_mapping.codec import (
    FieldKeyForm,
    decode_field_key,
    digest_field_key,
    encode_field_key,
    escape_name,
    generate_field_key,
    is_attribute_key,
    key_matches_identity,
    parse_field_key,
    unescape_name,
)
from services.state.attribute_mapping.domain import AttributeIdentity, Scope


def _identity(name: str, scope: Scope = Scope.INVENTORY) -> AttributeIdentity:
    return AttributeIdentity(scope=scope, name=name)


def test_plain_name_encodes_to_readable_key() -> None:
    assert encode_field_key(_identity("cpu")) == "inventory.attr.cpu"
    assert decode_field_key("inventory.attr.cpu") == _identity("cpu")


@pytest.mark.parametrize(
    "name",
    [
        "cpu.model",
        "a..b",
        ".",
        "%",
        "%2E",
        "%25",
        "%252E",
        "100%.done",
        "",
        "naïve/ü",
    ],
)
def test_round_trip_preserves_separators_and_escape_tokens(name: str) -> None:
    """Decoding an encoded key should return the exact original name."""
    identity = _identity(name, Scope.IDENTITY)

    key = encode_field_key(identity)

    assert key.count(".") == 2
    assert decode_field_key(key) == identity


def test_escape_is_applied_to_percent_before_separator() -> None:
    assert escape_name("a.%") == "a%2E%25"
    assert unescape_name("a%2E%25") == "a.%"


@pytest.mark.parametrize("key", ["id", "tenant_id", "inventory", "custom.value.x"])
def test_non_attribute_keys_decode_to_none(key: str) -> None:
    assert decode_field_key(key) is None
    assert is_attribute_key(key) is False


@pytest.mark.parametrize(
    "key",
    [
        "devices.attr.cpu",
        "inventory.attr.a.b",
        "inventory.attr.50%",
        "inventory.attr.%2e",
        "inventory.attrh.not-a-digest",
    ],
)
def test_malformed_attribute_keys_raise_data_integrity(key: str) -> None:
    """Keys carrying the attribute marker must be well-formed."""
    with pytest.raises(DataIntegrityError) as exc_info:
        parse_field_key(key)

    assert exc_info.value.code == codes.MALFORMED_FIELD_KEY
    assert exc_info.value.metadata["field_key"] == key


def test_long_and_empty_names_fall_back_to_digest_key() -> None:
    """Names too long or empty after escaping get a fixed-size digest key."""
    long_identity = _identity("x" * 300)
    empty_identity = _identity("")

    long_key = generate_field_key(long_identity, max_length=255)
    empty_key = generate_field_key(empty_identity, max_length=255)

    assert long_key == digest_field_key(long_identity)
    assert long_key.startswith("inventory.attrh.")
    assert len(long_key) == len("inventory.attrh.") + 64
    assert empty_key.startswith("inventory.attrh.")
    assert generate_field_key(_identity("cpu"), max_length=255) == "inventory.attr.cpu"


def test_digest_key_needs_stored_mapping() -> None:
    key = digest_field_key(_identity("x" * 300))

    parsed = parse_field_key(key)

    assert parsed is not None
    assert parsed.form is FieldKeyForm.DIGEST
    assert parsed.identity is None
    with pytest.raises(DataIntegrityError) as exc_info:
        decode_field_key(key)
    assert exc_info.value.code == codes.MISSING_MAPPING


def test_digest_keys_differ_per_scope() -> None:
    assert digest_field_key(_identity("", Scope.TAGS)) != digest_field_key(
        _identity("", Scope.MONITOR)
    )


def test_key_matches_identity_checks_both_forms() -> None:
    identity = _identity("x" * 300)

    assert key_matches_identity(digest_field_key(identity), identity) is True
    assert key_matches_identity(encode_field_key(identity), identity) is True
    assert key_matches_identity("inventory.attr.y", identity) is False
    other_scope = encode_field_key(_identity(identity.name, Scope.TAGS))
    assert key_matches_identity(other_scope, identity) is False
    assert key_matches_identity("id", identity) is False
