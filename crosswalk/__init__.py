"""
Crosswalk

Schema-driven field extraction for migrating content entities (e.g. CMS
exports) into a canonical hub schema.

Supports:
- Lazy, total decoding of variably shaped JSON field payloads
- Text, integer, boolean, date, reference, typed reference, link and formatted text values
- An optional schema registry for type-inferred decoding and required-field validation
- JSON export extraction into dynamic entities
"""

__version__ = "0.1.0"

from .models.entity import DynamicEntity
from .services.schema_registry import SchemaRegistry

__all__ = ["DynamicEntity", "SchemaRegistry"]
