"""Exception types raised by device reporting public operations."""

from __future__ import annotations

from typing import Mapping

from . import codes
from .factories import error_detail
from .types import ErrorCategory, ErrorDetail


class ReportingError(Exception):
    """Base exception carrying one structured ``ErrorDetail``."""

    def __init__(self, detail: ErrorDetail) -> None:
        super().__init__(detail.message)
        self.detail = detail

    @property
    def category(self) -> ErrorCategory:
        """Return the error category."""
        return self.detail.category

    @property
    def code(self) -> str:
        """Return the machine-readable error code."""
        return self.detail.code

    @property
    def retryable(self) -> bool:
        """Return whether the caller may safely retry the operation."""
        return self.detail.retryable

    @property
    def metadata(self) -> Mapping[str, str]:
        """Return structured context (operation, tenant, offending key)."""
        return self.detail.metadata


class SearchValidationError(ReportingError):
    """Malformed or unrecognized request input."""

    def __init__(
        self,
        message: str,
        *,
        code: str = codes.VALIDATION_ERROR,
        metadata: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(
            error_detail(
                ErrorCategory.VALIDATION, message, code=code, metadata=metadata
            )
        )


class UnknownAttributeError(SearchValidationError):
    """Attribute has no mapping and the caller asked for strict handling."""

    def __init__(
        self,
        *,
        tenant_id: str,
        scope: str,
        name: str,
    ) -> None:
        super().__init__(
            f"unknown attribute {scope}/{name}",
            code=codes.UNKNOWN_ATTRIBUTE,
            metadata={"tenant_id": tenant_id, "scope": scope, "name": name},
        )


class DataIntegrityError(ReportingError):
    """Stored or returned data does not match the expected shape."""

    def __init__(
        self,
        message: str,
        *,
        code: str = codes.DATA_INTEGRITY,
        metadata: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(
            error_detail(
                ErrorCategory.DATA_INTEGRITY, message, code=code, metadata=metadata
            )
        )


class DependencyError(ReportingError):
    """Store, engine or HTTP dependency failed or timed out."""

    def __init__(
        self,
        message: str,
        *,
        code: str = codes.DEPENDENCY_FAILURE,
        retryable: bool = True,
        metadata: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(
            error_detail(
                ErrorCategory.DEPENDENCY,
                message,
                code=code,
                retryable=retryable,
                metadata=metadata,
            )
        )
