"""Structured log context carried through ``contextvars``.

Fields bound here (trace ID, tenant, API name) are attached to every record
emitted while they are in scope, including records from nested calls and from
library loggers. The stored mapping is read-only; each change installs a new
one so concurrent requests never observe each other's fields.
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from types import MappingProxyType
from typing import Iterator, Mapping

_EMPTY: Mapping[str, str] = MappingProxyType({})

_LOG_CONTEXT: ContextVar[Mapping[str, str]] = ContextVar(
    "reporting_log_context", default=_EMPTY
)


def get_context() -> dict[str, str]:
    """Return a copy of the fields currently in scope."""
    return dict(_LOG_CONTEXT.get())


def bind_context(**values: object) -> None:
    """Add fields to the current context until it is cleared or reset."""
    if values:
        _LOG_CONTEXT.set(_merged(values))


def clear_context(*keys: str) -> None:
    """Drop the named fields, or every field when none are named."""
    if not keys:
        _LOG_CONTEXT.set(_EMPTY)
        return
    remaining = {
        key: value for key, value in _LOG_CONTEXT.get().items() if key not in keys
    }
    _LOG_CONTEXT.set(MappingProxyType(remaining))


@contextmanager
def log_context(values: Mapping[str, object]) -> Iterator[None]:
    """Bind fields for the duration of a block, then restore the outer ones."""
    token = _LOG_CONTEXT.set(_merged(values))
    try:
        yield
    finally:
        _LOG_CONTEXT.reset(token)


def _merged(values: Mapping[str, object]) -> Mapping[str, str]:
    """Overlay stringified values on the current context, skipping ``None``."""
    merged = dict(_LOG_CONTEXT.get())
    merged.update(
        (str(key), str(value)) for key, value in values.items() if value is not None
    )
    return MappingProxyType(merged)
