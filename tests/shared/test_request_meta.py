"""Tests for request metadata and deadline-bounded timeouts."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest

from packages.reporting_shared.errors import DependencyError, codes
from packages.reporting_shared.request import RequestMeta, new_meta


def test_new_meta_defaults() -> None:
    meta = new_meta(principal="svc")

    assert len(meta.trace_id) == 32
    assert meta.principal == "svc"
    assert meta.timestamp.tzinfo == UTC
    assert meta.deadline is None
    assert meta.remaining_seconds() is None


def test_timestamps_are_normalized_to_utc() -> None:
    naive = new_meta(timestamp=datetime(2024, 1, 1, 12, 0))
    offset = new_meta(
        timestamp=datetime(2024, 1, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
    )

    assert naive.timestamp == datetime(2024, 1, 1, 12, 0, tzinfo=UTC)
    assert offset.timestamp.hour == 10


def test_timeout_for_without_deadline_uses_default() -> None:
    assert new_meta().timeout_for(3.0, operation="x") == 3.0


def test_timeout_for_is_bounded_by_remaining_deadline() -> None:
    """Outbound timeouts never outlive the request deadline."""
    meta = new_meta(timeout_seconds=0.25)

    assert 0 < meta.timeout_for(10.0, operation="engine.search") <= 0.25


def test_expired_deadline_raises_retryable_dependency_error() -> None:
    meta = RequestMeta(
        trace_id="t", principal="", timestamp=datetime.now(UTC), deadline=0.0
    )

    with pytest.raises(DependencyError) as exc_info:
        meta.timeout_for(1.0, operation="engine.search")

    assert exc_info.value.code == codes.DEADLINE_EXCEEDED
    assert exc_info.value.retryable is True
    assert exc_info.value.metadata["operation"] == "engine.search"


def test_non_positive_timeout_rejected() -> None:
    with pytest.raises(ValueError, match="timeout_seconds must be > 0"):
        new_meta(timeout_seconds=0)
