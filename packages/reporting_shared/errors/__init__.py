"""Public shared error API for device reporting components."""

from . import codes
from .exceptions import (
    DataIntegrityError,
    DependencyError,
    ReportingError,
    SearchValidationError,
    UnknownAttributeError,
)
from .factories import error_detail
from .normalize import as_dependency_error, exception_to_error
from .types import ErrorCategory, ErrorDetail

__all__ = [
    "DataIntegrityError",
    "DependencyError",
    "ErrorCategory",
    "ErrorDetail",
    "ReportingError",
    "SearchValidationError",
    "UnknownAttributeError",
    "as_dependency_error",
    "codes",
    "error_detail",
    "exception_to_error",
]
