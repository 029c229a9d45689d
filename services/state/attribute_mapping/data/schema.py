"""SQLAlchemy table definitions owned by attribute mapping."""

from __future__ import annotations

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
    func,
)

metadata = MetaData()

attribute_mappings = Table(
    "attribute_mappings",
    metadata,
    Column("tenant_id", Text, nullable=False),
    Column("scope", String(16), nullable=False),
    Column("name", Text, nullable=False),
    Column("field_key", Text, nullable=False),
    Column(
        "created_at",
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    ),
    UniqueConstraint(
        "tenant_id", "scope", "name", name="uq_attribute_mappings_identity"
    ),
    UniqueConstraint(
        "tenant_id", "field_key", name="uq_attribute_mappings_field_key"
    ),
    CheckConstraint(
        "scope IN ('inventory', 'identity', 'system', 'tags', 'monitor')",
        name="ck_attribute_mappings_scope",
    ),
)
