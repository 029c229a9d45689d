"""Domain contracts for device search requests and results."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from services.state.attribute_mapping.domain import AttributeValue, Scope

ZERO_TIME = datetime(1, 1, 1, tzinfo=UTC)

MAX_PER_PAGE = 500


class SortOrder(StrEnum):
    """Sort direction for one criterion."""

    ASC = "asc"
    DESC = "desc"


class FilterOperator(StrEnum):
    """Closed set of supported filter operators."""

    EQ = "$eq"
    NE = "$ne"
    IN = "$in"
    NIN = "$nin"
    EXISTS = "$exists"
    GT = "$gt"
    GTE = "$gte"
    LT = "$lt"
    LTE = "$lte"
    REGEX = "$regex"


class SelectAttribute(BaseModel):
    """One attribute requested in search results."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    scope: str
    attribute: str


class FilterPredicate(BaseModel):
    """One filter condition over an attribute.

    ``type`` is kept as the raw operator string so unsupported operators are
    reported as validation errors when the query is built.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    scope: str
    attribute: str
    type: str
    value: Any = None


class SortCriteria(BaseModel):
    """One sort criterion over an attribute."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    scope: str
    attribute: str
    order: SortOrder = SortOrder.ASC


class SearchParams(BaseModel):
    """Declarative device search request."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    tenant_id: str = ""
    page: int = Field(default=1, ge=1)
    per_page: int = Field(default=20, ge=1, le=MAX_PER_PAGE)
    filters: tuple[FilterPredicate, ...] = ()
    sort: tuple[SortCriteria, ...] = ()
    attributes: tuple[SelectAttribute, ...] = ()
    device_ids: tuple[str, ...] = ()


class Device(BaseModel):
    """One device reconstructed from search hits."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str
    created_ts: datetime = ZERO_TIME
    updated_ts: datetime = ZERO_TIME
    attributes: tuple[AttributeValue, ...] = ()


class FilterAttribute(BaseModel):
    """One attribute currently available for filtering."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    scope: Scope
    count: int = 1


class SearchResult(BaseModel):
    """Page of devices plus the total match count."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    devices: tuple[Device, ...] = ()
    total: int = 0
