"""Per-request metadata passed explicitly into every public operation.

``RequestMeta`` replaces implicit ambient context: it carries the trace
identifier bound into log records and an optional monotonic deadline that
bounds every outbound call made on behalf of the request.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from time import monotonic
from uuid import uuid4

from packages.reporting_shared.errors import DependencyError, codes


@dataclass(frozen=True)
class RequestMeta:
    """Canonical metadata for one inbound request."""

    trace_id: str
    principal: str
    timestamp: datetime
    deadline: float | None = None

    def remaining_seconds(self) -> float | None:
        """Return seconds left before the deadline, or ``None`` when unbounded."""
        if self.deadline is None:
            return None
        return self.deadline - monotonic()

    def timeout_for(self, default_seconds: float, *, operation: str) -> float:
        """Bound one outbound call by the configured timeout and the deadline.

        Raises a retryable ``DependencyError`` when the deadline already passed
        so no call is issued on behalf of an abandoned request.
        """
        remaining = self.remaining_seconds()
        if remaining is None:
            return default_seconds
        if remaining <= 0:
            raise DependencyError(
                f"deadline exceeded before {operation}",
                code=codes.DEADLINE_EXCEEDED,
                retryable=True,
                metadata={"operation": operation, "trace_id": self.trace_id},
            )
        return min(default_seconds, remaining)


def new_meta(
    *,
    principal: str = "",
    trace_id: str | None = None,
    timeout_seconds: float | None = None,
    timestamp: datetime | None = None,
) -> RequestMeta:
    """Build ``RequestMeta`` with safe defaults for trace ID and timestamp."""
    if timeout_seconds is not None and timeout_seconds <= 0:
        raise ValueError("timeout_seconds must be > 0")
    return RequestMeta(
        trace_id=trace_id or uuid4().hex,
        principal=principal,
        timestamp=_utc_now() if timestamp is None else _normalize_utc(timestamp),
        deadline=None if timeout_seconds is None else monotonic() + timeout_seconds,
    )


def _utc_now() -> datetime:
    """Return current UTC timestamp."""
    return datetime.now(UTC)


def _normalize_utc(value: datetime) -> datetime:
    """Normalize naive/aware datetimes to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
