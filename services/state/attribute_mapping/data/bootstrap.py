"""Startup bootstrap for the attribute mapping schema.

Creates the owned Postgres schema and table idempotently so the service can
serve ``map_attributes`` on a fresh database.
"""

from __future__ import annotations

import argparse
from pathlib import Path

from packages.reporting_shared.config import (
    DEFAULT_CONFIG_PATH,
    ReportingSettings,
    load_settings,
)
from packages.reporting_shared.logging import configure_logging, get_logger
from services.state.attribute_mapping.data.runtime import (
    AttributeMappingPostgresRuntime,
)

_LOGGER = get_logger(__name__)


def bootstrap_attribute_mapping_schema(settings: ReportingSettings) -> str:
    """Create the attribute mapping schema and return its name."""
    runtime = AttributeMappingPostgresRuntime.from_settings(settings)
    try:
        runtime.create_schema()
    finally:
        runtime.dispose()
    schema = runtime.schema_sessions.schema
    _LOGGER.info("attribute mapping schema ready: %s", schema)
    return schema


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    """Parse command line arguments for schema bootstrap."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG_PATH,
        help="YAML settings file. Missing files contribute nothing.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint for schema bootstrap."""
    args = _parse_args(argv)
    settings = load_settings(config_path=args.config)
    configure_logging(settings.logging)
    bootstrap_attribute_mapping_schema(settings)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
