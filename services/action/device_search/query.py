"""Translate declarative search parameters into an engine query body."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from packages.reporting_shared.errors import SearchValidationError, codes
from services.action.device_search.domain import (
    FilterOperator,
    FilterPredicate,
    SearchParams,
)
from services.state.attribute_mapping.codec import encode_field_key
from services.state.attribute_mapping.domain import AttributeIdentity, to_identity

FIELD_ID = "id"
FIELD_TENANT_ID = "tenant_id"

_RANGE_OPERATORS = {
    FilterOperator.GT: "gt",
    FilterOperator.GTE: "gte",
    FilterOperator.LT: "lt",
    FilterOperator.LTE: "lte",
}

FieldKeys = Mapping[AttributeIdentity, str]


@dataclass(frozen=True)
class Query:
    """Engine query body plus the hit shape the response will carry."""

    body: dict[str, Any]
    uses_fields: bool


def build_query(params: SearchParams, *, field_keys: FieldKeys | None = None) -> Query:
    """Build the engine query for one search.

    ``field_keys`` carries mapped keys for every referenced attribute; without
    it keys are derived structurally from the attribute names.
    """
    must: list[dict[str, Any]] = []
    must_not: list[dict[str, Any]] = []
    for predicate in params.filters:
        key = _key_for(predicate.scope, predicate.attribute, field_keys)
        clause, negated = _filter_clause(predicate, key)
        (must_not if negated else must).append(clause)

    if params.tenant_id:
        must.append({"term": {FIELD_TENANT_ID: params.tenant_id}})
    if params.device_ids:
        must.append({"terms": {FIELD_ID: list(params.device_ids)}})

    body: dict[str, Any] = {
        "query": {"bool": {"must": must, "must_not": must_not}},
        "from": (params.page - 1) * params.per_page,
        "size": params.per_page,
    }
    if params.sort:
        body["sort"] = [
            {
                _key_for(criteria.scope, criteria.attribute, field_keys): {
                    "order": criteria.order.value
                }
            }
            for criteria in params.sort
        ]

    uses_fields = bool(params.attributes)
    if uses_fields:
        body["fields"] = [FIELD_ID] + [
            _key_for(selected.scope, selected.attribute, field_keys)
            for selected in params.attributes
        ]
        body["_source"] = False
    return Query(body=body, uses_fields=uses_fields)


def parse_operator(predicate: FilterPredicate) -> FilterOperator:
    """Return the predicate operator or raise a validation error."""
    try:
        return FilterOperator(predicate.type)
    except ValueError:
        raise SearchValidationError(
            f"unsupported filter operator: {predicate.type}",
            code=codes.UNSUPPORTED_FILTER,
            metadata={
                "scope": predicate.scope,
                "attribute": predicate.attribute,
                "type": predicate.type,
            },
        ) from None


def is_negative_filter(predicate: FilterPredicate) -> bool:
    """Return whether the predicate holds for devices lacking the attribute."""
    operator = parse_operator(predicate)
    if operator is FilterOperator.EXISTS:
        return predicate.value is False
    return operator in (FilterOperator.NE, FilterOperator.NIN)


def _key_for(scope: str, attribute: str, field_keys: FieldKeys | None) -> str:
    """Resolve the engine key for one referenced attribute."""
    identity = to_identity(scope, attribute)
    if field_keys is None:
        return encode_field_key(identity)
    try:
        return field_keys[identity]
    except KeyError:
        raise SearchValidationError(
            f"attribute {scope}/{attribute} has no field key",
            code=codes.UNKNOWN_ATTRIBUTE,
            metadata={"scope": scope, "attribute": attribute},
        ) from None


def validate_predicate(predicate: FilterPredicate) -> FilterOperator:
    """Check the operator and the value shape it requires.

    Runs before any attribute lookup, so a malformed predicate is rejected
    whether or not its attribute was ever written.
    """
    operator = parse_operator(predicate)
    value = predicate.value
    if operator in (FilterOperator.EQ, FilterOperator.NE):
        _require(predicate, _is_scalar(value), "a scalar value")
    elif operator in (FilterOperator.IN, FilterOperator.NIN):
        _require(
            predicate,
            isinstance(value, list) and bool(value) and all(map(_is_scalar, value)),
            "a non-empty list of scalars",
        )
    elif operator is FilterOperator.EXISTS:
        _require(predicate, isinstance(value, bool), "a boolean")
    elif operator is FilterOperator.REGEX:
        _require(predicate, isinstance(value, str), "a string")
    else:
        _require(
            predicate,
            isinstance(value, (str, int, float)) and not isinstance(value, bool),
            "a string or number",
        )
    return operator


def _filter_clause(predicate: FilterPredicate, key: str) -> tuple[dict[str, Any], bool]:
    """Return the clause for one predicate and whether it is negated."""
    operator = validate_predicate(predicate)
    value = predicate.value
    if operator in (FilterOperator.EQ, FilterOperator.NE):
        return {"term": {key: value}}, operator is FilterOperator.NE
    if operator in (FilterOperator.IN, FilterOperator.NIN):
        return {"terms": {key: list(value)}}, operator is FilterOperator.NIN
    if operator is FilterOperator.EXISTS:
        return {"exists": {"field": key}}, value is False
    if operator is FilterOperator.REGEX:
        return {"regexp": {key: value}}, False
    return {"range": {key: {_RANGE_OPERATORS[operator]: value}}}, False


def _is_scalar(value: object) -> bool:
    return isinstance(value, (str, int, float, bool))


def _require(predicate: FilterPredicate, valid: bool, expected: str) -> None:
    """Raise a validation error when the predicate value has the wrong shape."""
    if valid:
        return
    raise SearchValidationError(
        f"filter {predicate.type} on {predicate.scope}/{predicate.attribute} "
        f"requires {expected}",
        code=codes.INVALID_ARGUMENT,
        metadata={
            "scope": predicate.scope,
            "attribute": predicate.attribute,
            "type": predicate.type,
        },
    )
