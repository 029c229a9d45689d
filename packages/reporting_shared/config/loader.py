"""Settings loading entrypoint."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic_settings import SettingsConfigDict

from .models import ReportingSettings


def load_settings(
    *,
    config_path: str | Path | None = None,
    **overrides: Any,
) -> ReportingSettings:
    """Load settings with precedence: ``overrides`` > env vars > YAML file.

    The YAML file is optional; a missing file contributes nothing.
    """
    if config_path is None:
        return ReportingSettings(**overrides)

    settings_cls = type(
        "ReportingSettings",
        (ReportingSettings,),
        {
            "model_config": SettingsConfigDict(
                **{**ReportingSettings.model_config, "yaml_file": Path(config_path)}
            )
        },
    )
    return settings_cls(**overrides)
