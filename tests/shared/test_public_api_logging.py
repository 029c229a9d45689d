"""Tests for public API invocation logging and log context propagation."""

from __future__ import annotations

import io
import json
import logging

import pytest

from packages.reporting_shared.config import LoggingSettings
from packages.reporting_shared.errors import DependencyError
from packages.reporting_shared.logging import (
    clear_context,
    configure_logging,
    get_context,
    log_context,
    public_api_logged,
)
from packages.reporting_shared.logging.config import ContextFilter, JsonFormatter
from packages.reporting_shared.request import new_meta

_LOGGER = logging.getLogger("tests.public_api")


class _Component:
    def __init__(self) -> None:
        self.seen_context: dict[str, str] = {}

    @public_api_logged(
        logger=_LOGGER, component_id="service_example", id_fields=("tenant_id",)
    )
    def lookup(self, *, meta: object, tenant_id: str) -> str:
        self.seen_context = get_context()
        return "ok"

    @public_api_logged(logger=_LOGGER, component_id="service_example")
    def fail(self, *, meta: object) -> None:
        raise DependencyError("engine down")


@pytest.fixture(autouse=True)
def _reset_context() -> None:
    clear_context()


def test_binds_trace_and_id_fields_during_call(caplog: pytest.LogCaptureFixture) -> None:
    """Nested log lines share the caller's trace and tenant fields."""
    component = _Component()
    meta = new_meta(trace_id="trace-1", principal="svc")

    with caplog.at_level(logging.DEBUG, logger="tests.public_api"):
        assert component.lookup(meta=meta, tenant_id="t1") == "ok"

    assert component.seen_context["trace_id"] == "trace-1"
    assert component.seen_context["tenant_id"] == "t1"
    assert component.seen_context["api_name"] == "lookup"
    assert get_context() == {}
    assert [record.getMessage() for record in caplog.records] == [
        "Public API invocation",
        "Public API completion",
    ]


def test_failure_is_logged_with_error_summary_and_reraised(
    caplog: pytest.LogCaptureFixture,
) -> None:
    component = _Component()

    caplog.handler.addFilter(ContextFilter())

    with caplog.at_level(logging.DEBUG, logger="tests.public_api"):
        with pytest.raises(DependencyError):
            component.fail(meta=new_meta())

    completion = caplog.records[-1]
    assert completion.levelno == logging.WARNING
    assert completion.success == "False"
    assert completion.error_category == "dependency"
    assert completion.error_code == "DEPENDENCY_FAILURE"
    assert completion.retryable == "True"


def test_json_formatter_includes_context() -> None:
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "hello", (), None)
    with log_context({"trace_id": "abc", "tenant_id": None}):
        ContextFilter().filter(record)

    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "hello"
    assert payload["level"] == "INFO"
    assert payload["trace_id"] == "abc"
    assert "tenant_id" not in payload


def test_configure_logging_installs_single_handler() -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    stream = io.StringIO()
    settings = LoggingSettings(json_output=False)
    try:
        configure_logging(settings, stream=stream)
        configure_logging(settings, stream=stream)
        logging.getLogger("tests.configure").info("ready")

        assert len(root.handlers) == 1
        assert logging.getLogger("elastic_transport").level == logging.WARNING
        assert stream.getvalue().endswith(
            "INFO tests.configure ready environment=dev service=reporting\n"
        )
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
        clear_context()
