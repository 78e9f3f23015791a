"""Service layer: schema registry and validation."""

from .schema_registry import SchemaRegistry
from .validator import EntityValidator, ValidationError

__all__ = [
    "SchemaRegistry",
    "EntityValidator",
    "ValidationError",
]
