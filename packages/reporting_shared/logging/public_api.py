"""Invocation logging for public component operations.

``public_api_logged`` brackets one method with a DEBUG invocation record and a
completion record. Completion is INFO on success and WARNING on failure, where
it also carries the normalized error category, code and retry hint.
"""

from __future__ import annotations

from functools import wraps
from time import perf_counter
from typing import Any, Callable, Mapping, TypeVar

from packages.reporting_shared.errors import exception_to_error

from . import fields
from .context import log_context

_F = TypeVar("_F", bound=Callable[..., Any])


def public_api_logged(
    *,
    logger: Any,
    component_id: str,
    api_name: str | None = None,
    id_fields: tuple[str, ...] = (),
) -> Callable[[_F], _F]:
    """Log invocation and completion of one keyword-only public method.

    ``meta`` supplies the trace ID and principal; each name in ``id_fields``
    (e.g. ``tenant_id``) is read from the call's keyword arguments. All of them
    stay bound to the log context while the method runs.
    """

    def decorator(func: _F) -> _F:
        name = api_name or func.__name__

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            bound = {
                fields.COMPONENT_ID: component_id,
                fields.API_NAME: name,
                **_request_fields(kwargs.get("meta")),
                **{key: kwargs.get(key) or None for key in id_fields},
            }
            with log_context(bound):
                with log_context({fields.EVENT: fields.PUBLIC_API_INVOCATION_EVENT}):
                    logger.debug("Public API invocation")
                started = perf_counter()
                try:
                    result = func(*args, **kwargs)
                except Exception as exc:
                    _log_failure(logger, started, exc)
                    raise
                with log_context(_completion_fields(started, success=True)):
                    logger.info("Public API completion")
                return result

        return wrapper  # type: ignore[return-value]

    return decorator


def _request_fields(meta: object | None) -> Mapping[str, object]:
    """Read trace ID and principal from ``RequestMeta``-like objects."""
    return {
        fields.TRACE_ID: getattr(meta, "trace_id", None) or None,
        fields.PRINCIPAL: getattr(meta, "principal", None) or None,
    }


def _completion_fields(started: float, *, success: bool) -> dict[str, object]:
    return {
        fields.EVENT: fields.PUBLIC_API_COMPLETION_EVENT,
        fields.SUCCESS: success,
        fields.DURATION_MS: round((perf_counter() - started) * 1000.0, 3),
    }


def _log_failure(logger: Any, started: float, exc: Exception) -> None:
    detail = exception_to_error(exc)
    with log_context(
        {
            **_completion_fields(started, success=False),
            fields.ERRORS: f"{detail.code}: {detail.message}",
            fields.ERROR_CATEGORY: detail.category.value,
            fields.ERROR_CODE: detail.code,
            fields.RETRYABLE: detail.retryable,
        }
    ):
        logger.warning("Public API completion")
