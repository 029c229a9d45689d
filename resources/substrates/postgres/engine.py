"""Engine and session construction for the Postgres substrate.

Pool sizing and libpq connect options come from ``PostgresSettings``;
statement timeouts are applied per transaction by the schema session provider.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from resources.substrates.postgres.config import PostgresSettings


def create_postgres_engine(config: PostgresSettings) -> Engine:
    """Build a pooled psycopg engine for one settings object."""
    return create_engine(
        config.url,
        pool_size=config.pool_size,
        max_overflow=config.max_overflow,
        pool_timeout=config.pool_timeout_seconds,
        pool_pre_ping=config.pool_pre_ping,
        connect_args=_connect_args(config),
    )


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Return sessions that keep loaded rows usable after commit."""
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def _connect_args(config: PostgresSettings) -> dict[str, Any]:
    # libpq only accepts whole seconds and treats 0 as "wait forever"
    return {
        "connect_timeout": max(1, round(config.connect_timeout_seconds)),
        "sslmode": config.sslmode,
        "application_name": config.application_name,
    }
