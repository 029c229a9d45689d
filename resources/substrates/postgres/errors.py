"""Postgres/SQLAlchemy exception normalization helpers."""

from __future__ import annotations

from typing import Mapping

from packages.reporting_shared.errors import (
    DataIntegrityError,
    DependencyError,
    ReportingError,
    codes,
)


def normalize_postgres_error(
    exc: Exception,
    *,
    operation: str,
    metadata: Mapping[str, object] | None = None,
) -> ReportingError:
    """Map one low-level DB exception into the shared error taxonomy.

    Timeouts and connectivity failures are retryable dependency errors;
    constraint violations indicate stored data disagreeing with expectations.
    """
    if isinstance(exc, ReportingError):
        return exc

    exc_type_name = type(exc).__name__
    message = str(exc)
    context = {
        "exception_type": exc_type_name,
        "operation": operation,
        **dict(metadata or {}),
    }

    if "QueryCanceled" in message or "statement timeout" in message.lower():
        return DependencyError(
            "postgres statement timed out",
            code=codes.DEPENDENCY_TIMEOUT,
            retryable=True,
            metadata=context,
        )

    if "UniqueViolation" in exc_type_name or "duplicate key value" in message:
        return DataIntegrityError(
            "postgres unique constraint violated",
            code=codes.FIELD_KEY_COLLISION,
            metadata=context,
        )

    if (
        "OperationalError" in exc_type_name
        or "timeout" in message.lower()
        or isinstance(exc, (ConnectionError, TimeoutError))
    ):
        return DependencyError(
            "postgres unavailable",
            code=codes.DEPENDENCY_UNAVAILABLE,
            retryable=True,
            metadata=context,
        )

    if "InterfaceError" in exc_type_name or "ProgrammingError" in exc_type_name:
        return DependencyError(
            "postgres request failed",
            code=codes.DEPENDENCY_FAILURE,
            retryable=False,
            metadata=context,
        )

    return DependencyError(
        "unexpected postgres failure",
        code=codes.DEPENDENCY_FAILURE,
        retryable=False,
        metadata=context,
    )
