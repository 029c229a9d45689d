"""Build ``ErrorDetail`` values with per-category defaults."""

from __future__ import annotations

from typing import Mapping

from . import codes
from .types import ErrorCategory, ErrorDetail

_DEFAULT_CODES: dict[ErrorCategory, str] = {
    ErrorCategory.VALIDATION: codes.VALIDATION_ERROR,
    ErrorCategory.DATA_INTEGRITY: codes.DATA_INTEGRITY,
    ErrorCategory.DEPENDENCY: codes.DEPENDENCY_FAILURE,
    ErrorCategory.INTERNAL: codes.INTERNAL_ERROR,
}


def error_detail(
    category: ErrorCategory,
    message: str,
    *,
    code: str | None = None,
    retryable: bool | None = None,
    metadata: Mapping[str, object] | None = None,
) -> ErrorDetail:
    """Create one error detail.

    Only dependency failures default to retryable; metadata values are
    stringified and ``None`` values dropped so log records stay flat.
    """
    return ErrorDetail(
        code=code or _DEFAULT_CODES[category],
        message=message,
        category=category,
        retryable=(
            category is ErrorCategory.DEPENDENCY if retryable is None else retryable
        ),
        metadata={
            str(key): str(value)
            for key, value in (metadata or {}).items()
            if value is not None
        },
    )
