"""Data-layer exports for attribute mapping."""

from services.state.attribute_mapping.data.repository import (
    PostgresAttributeMappingRepository,
)
from services.state.attribute_mapping.data.runtime import (
    AttributeMappingPostgresRuntime,
)

__all__ = ["AttributeMappingPostgresRuntime", "PostgresAttributeMappingRepository"]
