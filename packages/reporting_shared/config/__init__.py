"""Public API for shared configuration utilities."""

from .loader import load_settings
from .models import (
    DEFAULT_CONFIG_PATH,
    ComponentsSettings,
    LoggingSettings,
    ReportingSettings,
    resolve_component_settings,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "ComponentsSettings",
    "LoggingSettings",
    "ReportingSettings",
    "load_settings",
    "resolve_component_settings",
]
