"""Canonical error taxonomy for device reporting components.

Every failure surfaced by a public operation is described by one
``ErrorDetail`` so callers can log it and decide retry policy without
inspecting exception types from lower layers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping


class ErrorCategory(str, Enum):
    """High-level error categories shared across component boundaries."""

    VALIDATION = "validation"
    DATA_INTEGRITY = "data_integrity"
    DEPENDENCY = "dependency"
    INTERNAL = "internal"


@dataclass(frozen=True)
class ErrorDetail:
    """Structured error object attached to every raised ``ReportingError``."""

    code: str
    message: str
    category: ErrorCategory
    retryable: bool = False
    metadata: Mapping[str, str] = field(default_factory=dict)
