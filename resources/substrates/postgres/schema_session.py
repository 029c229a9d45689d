"""Schema-pinned, time-bounded session helpers for Postgres access."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import text
from sqlalchemy.orm import Session, sessionmaker


class ServiceSchemaSessionProvider:
    """Provide transactional sessions pinned to one service-owned schema."""

    def __init__(
        self,
        *,
        session_factory: sessionmaker[Session],
        schema: str,
        default_timeout_seconds: float = 5.0,
    ) -> None:
        self._validate_schema(schema)
        self._session_factory = session_factory
        self._schema = schema
        self._default_timeout_seconds = default_timeout_seconds

    @property
    def schema(self) -> str:
        """Return the owned schema name for this provider."""
        return self._schema

    @property
    def default_timeout_seconds(self) -> float:
        """Return the statement timeout applied when callers pass none."""
        return self._default_timeout_seconds

    @contextmanager
    def session(self, *, timeout_seconds: float | None = None) -> Iterator[Session]:
        """Yield a session that commits on success and rolls back on error.

        ``search_path`` and ``statement_timeout`` are transaction-local so they
        never leak into pooled connections.
        """
        timeout = (
            self._default_timeout_seconds if timeout_seconds is None else timeout_seconds
        )
        db = self._session_factory()
        try:
            db.execute(text(f"SET LOCAL search_path TO {self._schema}, public"))
            db.execute(
                text("SELECT set_config('statement_timeout', :timeout_value, true)"),
                {"timeout_value": f"{max(1, int(timeout * 1000))}ms"},
            )
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def _validate_schema(self, schema: str) -> None:
        """Validate schema names to prevent malformed search_path statements."""
        if not schema:
            raise ValueError("postgres schema is required")
        if not schema.replace("_", "").isalnum():
            raise ValueError("postgres schema must be alphanumeric/underscore")
