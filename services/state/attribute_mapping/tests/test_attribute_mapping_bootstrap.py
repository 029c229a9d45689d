"""Tests for attribute mapping schema bootstrap."""

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

import services.state.attribute_mapping.data.bootstrap as bootstrap_module
from packages.reporting_shared.config import LoggingSettings, ReportingSettings


class _FakeRuntime:
    def __init__(self, *, fail: bool = False) -> None:
        self.schema_sessions = SimpleNamespace(schema="attribute_mapping")
        self.created = False
        self.disposed = False
        self._fail = fail

    def create_schema(self) -> None:
        if self._fail:
            raise RuntimeError("connection refused")
        self.created = True

    def dispose(self) -> None:
        self.disposed = True


def _patch_runtime(
    monkeypatch: pytest.MonkeyPatch, runtime: _FakeRuntime
) -> list[ReportingSettings]:
    seen: list[ReportingSettings] = []

    def from_settings(settings: ReportingSettings) -> _FakeRuntime:
        seen.append(settings)
        return runtime

    monkeypatch.setattr(
        bootstrap_module.AttributeMappingPostgresRuntime,
        "from_settings",
        staticmethod(from_settings),
    )
    return seen


def test_bootstrap_creates_schema_and_disposes(monkeypatch: pytest.MonkeyPatch) -> None:
    runtime = _FakeRuntime()
    _patch_runtime(monkeypatch, runtime)

    schema = bootstrap_module.bootstrap_attribute_mapping_schema(ReportingSettings())

    assert schema == "attribute_mapping"
    assert runtime.created is True
    assert runtime.disposed is True


def test_bootstrap_disposes_engine_on_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    runtime = _FakeRuntime(fail=True)
    _patch_runtime(monkeypatch, runtime)

    with pytest.raises(RuntimeError, match="connection refused"):
        bootstrap_module.bootstrap_attribute_mapping_schema(ReportingSettings())

    assert runtime.disposed is True


def test_main_loads_config_file_and_configures_logging(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    config_file = tmp_path / "reporting.yaml"
    config_file.write_text(
        "logging:\n  level: DEBUG\n  json_output: false\n", encoding="utf-8"
    )
    runtime = _FakeRuntime()
    seen = _patch_runtime(monkeypatch, runtime)
    logging_calls: list[LoggingSettings] = []
    monkeypatch.setattr(
        bootstrap_module,
        "configure_logging",
        lambda logging_settings: logging_calls.append(logging_settings),
    )

    assert bootstrap_module.main(["--config", str(config_file)]) == 0

    assert seen[0].logging.level == "DEBUG"
    assert [item.level for item in logging_calls] == ["DEBUG"]
    assert logging_calls[0].json_output is False
    assert runtime.created is True
