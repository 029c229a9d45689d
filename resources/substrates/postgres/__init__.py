"""Shared Postgres substrate primitives."""

from resources.substrates.postgres.config import (
    RESOURCE_COMPONENT_ID,
    PostgresSettings,
    resolve_postgres_settings,
)
from resources.substrates.postgres.engine import (
    create_postgres_engine,
    create_session_factory,
)
from resources.substrates.postgres.errors import normalize_postgres_error
from resources.substrates.postgres.schema_session import ServiceSchemaSessionProvider

__all__ = [
    "RESOURCE_COMPONENT_ID",
    "PostgresSettings",
    "ServiceSchemaSessionProvider",
    "create_postgres_engine",
    "create_session_factory",
    "normalize_postgres_error",
    "resolve_postgres_settings",
]
