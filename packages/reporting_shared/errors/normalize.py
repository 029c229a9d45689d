"""Exception normalization utilities for shared error contracts."""

from __future__ import annotations

from typing import Mapping

from . import codes
from .exceptions import DependencyError, ReportingError
from .factories import error_detail
from .types import ErrorCategory, ErrorDetail


def exception_to_error(exc: Exception) -> ErrorDetail:
    """Normalize a Python exception into a shared ``ErrorDetail``.

    Reporting errors keep their own detail. Components normalize their
    library-specific exceptions before falling back to this function.
    """
    if isinstance(exc, ReportingError):
        return exc.detail

    metadata = {"exception_type": type(exc).__name__}
    if isinstance(exc, TimeoutError):
        return DependencyError(
            str(exc) or "dependency timeout",
            code=codes.DEPENDENCY_TIMEOUT,
            metadata=metadata,
        ).detail

    if isinstance(exc, ConnectionError):
        return DependencyError(
            str(exc) or "dependency unavailable",
            code=codes.DEPENDENCY_UNAVAILABLE,
            metadata=metadata,
        ).detail

    return error_detail(
        ErrorCategory.INTERNAL,
        str(exc) or "unexpected exception",
        code=codes.UNEXPECTED_EXCEPTION,
        metadata=metadata,
    )


def as_dependency_error(
    exc: Exception,
    *,
    operation: str,
    metadata: Mapping[str, object] | None = None,
) -> ReportingError:
    """Wrap a non-reporting exception from a dependency call.

    Reporting errors pass through unchanged; anything else becomes a
    ``DependencyError`` tagged with the failing operation.
    """
    if isinstance(exc, ReportingError):
        return exc
    detail = exception_to_error(exc)
    return DependencyError(
        f"{operation} failed: {detail.message}",
        code=(
            detail.code
            if detail.code != codes.UNEXPECTED_EXCEPTION
            else codes.DEPENDENCY_FAILURE
        ),
        retryable=detail.retryable,
        metadata={**detail.metadata, "operation": operation, **dict(metadata or {})},
    )
