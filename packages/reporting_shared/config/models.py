"""Typed settings for device reporting processes.

Root settings hold logging options plus a ``components`` tree grouped by
component kind::

    components:
      substrate:
        elasticsearch: {url: http://elasticsearch:9200}
      service:
        device_search: {strict_unknown_attributes: true}

Each component validates its own subtree with ``resolve_component_settings``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "reporting" / "reporting.yaml"

COMPONENT_KINDS = ("service", "adapter", "substrate")

ComponentTree = dict[str, dict[str, Any]]


class LoggingSettings(BaseModel):
    """Options for ``configure_logging``."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    json_output: bool = True
    service: str = "reporting"
    environment: str = "dev"


class ComponentsSettings(BaseModel):
    """Unvalidated per-component subtrees, keyed by kind and then name."""

    model_config = ConfigDict(extra="forbid")

    service: ComponentTree = Field(default_factory=dict)
    adapter: ComponentTree = Field(default_factory=dict)
    substrate: ComponentTree = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _reject_flat_keys(cls, value: object) -> object:
        """Point `<kind>_<name>` keys at their grouped location."""
        for key in value if isinstance(value, dict) else ():
            kind, _, name = str(key).partition("_")
            if kind in COMPONENT_KINDS and name:
                raise ValueError(
                    f"components.{key} is invalid; use components.{kind}.{name} instead"
                )
        return value

    @field_validator("service", "adapter", "substrate", mode="before")
    @classmethod
    def _none_as_empty(cls, value: object) -> object:
        """A kind written as a bare YAML key has no components."""
        return {} if value is None else value


class ReportingSettings(BaseSettings):
    """Root settings; sources in precedence order are init, env, then YAML."""

    model_config = SettingsConfigDict(
        env_prefix="REPORTING_",
        env_nested_delimiter="__",
        extra="ignore",
        nested_model_default_partial_update=True,
        yaml_file=DEFAULT_CONFIG_PATH,
        yaml_file_encoding="utf-8",
    )

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    components: ComponentsSettings = Field(default_factory=ComponentsSettings)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        del dotenv_settings, file_secret_settings
        return init_settings, env_settings, YamlConfigSettingsSource(settings_cls)


TComponentSettings = TypeVar("TComponentSettings", bound=BaseModel)


def resolve_component_settings(
    *,
    settings: ReportingSettings,
    component_id: str,
    model: type[TComponentSettings],
) -> TComponentSettings:
    """Validate ``components.<kind>.<name>`` for ``component_id = <kind>_<name>``.

    A component with no configured subtree gets the model defaults.
    """
    kind, _, name = component_id.partition("_")
    if kind not in COMPONENT_KINDS or not name:
        raise ValueError(f"component id must be '<kind>_<name>': {component_id}")
    tree: ComponentTree = getattr(settings.components, kind)
    return model.model_validate(tree.get(name) or {})
