"""Attribute-mapping-owned Postgres runtime wiring."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import Engine, text
from sqlalchemy.orm import Session, sessionmaker

from packages.reporting_shared.config import ReportingSettings
from resources.substrates.postgres import (
    ServiceSchemaSessionProvider,
    create_postgres_engine,
    create_session_factory,
    resolve_postgres_settings,
)
from services.state.attribute_mapping.config import resolve_attribute_mapping_settings
from services.state.attribute_mapping.data.schema import metadata


@dataclass(frozen=True)
class AttributeMappingPostgresRuntime:
    """Concrete handle for schema-scoped attribute mapping storage."""

    engine: Engine
    session_factory: sessionmaker[Session]
    schema_sessions: ServiceSchemaSessionProvider

    @classmethod
    def from_settings(
        cls, settings: ReportingSettings
    ) -> "AttributeMappingPostgresRuntime":
        """Build the runtime from typed application settings."""
        postgres_config = resolve_postgres_settings(settings)
        service_config = resolve_attribute_mapping_settings(settings)
        engine = create_postgres_engine(postgres_config)
        session_factory = create_session_factory(engine)
        return cls(
            engine=engine,
            session_factory=session_factory,
            schema_sessions=ServiceSchemaSessionProvider(
                session_factory=session_factory,
                schema=service_config.schema_name,
                default_timeout_seconds=postgres_config.statement_timeout_seconds,
            ),
        )

    def create_schema(self) -> None:
        """Create the owned schema and tables when missing."""
        schema = self.schema_sessions.schema
        with self.engine.begin() as conn:
            conn.execute(text(f"CREATE SCHEMA IF NOT EXISTS {schema}"))
            metadata.create_all(
                conn.execution_options(schema_translate_map={None: schema})
            )

    def dispose(self) -> None:
        """Close pooled connections."""
        self.engine.dispose()
