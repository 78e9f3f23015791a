"""Data models for schemas and decoded field values.

``DynamicEntity`` lives in :mod:`crosswalk.models.entity`; it depends on the
decoders, which in turn depend on the value models here.
"""

from .schema import (
    FieldType,
    Multiplicity,
    FieldDefinition,
    EntityDefinition,
    parse_field_type,
)
from .values import (
    Ref,
    TypedRef,
    Link,
    Date,
    DatePrecision,
    DateQualifier,
)
from .documents import (
    SchemaDocument,
    EntityDocument,
    FieldDocument,
)

__all__ = [
    "FieldType",
    "Multiplicity",
    "FieldDefinition",
    "EntityDefinition",
    "parse_field_type",
    "Ref",
    "TypedRef",
    "Link",
    "Date",
    "DatePrecision",
    "DateQualifier",
    "SchemaDocument",
    "EntityDocument",
    "FieldDocument",
]
