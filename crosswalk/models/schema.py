"""Schema models describing the fields of an entity bundle."""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional
from enum import Enum


class FieldType(str, Enum):
    """Normalized field types used to pick a decoder."""
    TEXT = "text"
    INTEGER = "int"
    BOOLEAN = "bool"
    DATE = "date"
    REFERENCE = "reference"
    TYPED_REFERENCE = "typed_reference"
    LINK = "link"
    # Kinds without a dedicated decoder; extracted generically
    COMPOSITE = "composite"
    FILE = "file"
    IMAGE = "image"
    RELATED_ITEM = "related_item"
    PART_DETAIL = "part_detail"
    ATTR = "attr"  # textfield_attr, textarea_attr
    UNKNOWN = "unknown"


# Alternate spellings seen in schema exports, including common source field types
FIELD_TYPE_ALIASES: Dict[str, FieldType] = {
    "string": FieldType.TEXT,
    "string_long": FieldType.TEXT,
    "text_long": FieldType.TEXT,
    "text_with_summary": FieldType.TEXT,
    "list_string": FieldType.TEXT,
    "integer": FieldType.INTEGER,
    "boolean": FieldType.BOOLEAN,
    "datetime": FieldType.DATE,
    "edtf": FieldType.DATE,
    "entity_reference": FieldType.REFERENCE,
    "typed_relation": FieldType.TYPED_REFERENCE,
}


class Multiplicity(str, Enum):
    """Whether a field holds at most one value or any number of values."""
    SINGLE = "single"
    MULTIPLE = "multiple"


UNLIMITED = -1


def parse_field_type(value: Any) -> FieldType:
    """Map a type name to a FieldType, falling back to UNKNOWN."""
    if isinstance(value, FieldType):
        return value
    name = str(value or "").strip().lower()
    try:
        return FieldType(name)
    except ValueError:
        return FIELD_TYPE_ALIASES.get(name, FieldType.UNKNOWN)


@dataclass(frozen=True)
class FieldDefinition:
    """Definition of one field within a bundle. Immutable once created."""
    name: str
    type: FieldType = FieldType.UNKNOWN
    multiplicity: Multiplicity = Multiplicity.SINGLE
    required: bool = False
    source_type: str = ""  # Originating system's type, e.g. "typed_relation", "edtf"
    label: str = ""
    description: str = ""
    ref_type: str = ""  # Target entity type for reference fields
    cardinality: int = 1  # 1 = single, -1 = unlimited, N = at most N

    @property
    def is_multi_value(self) -> bool:
        """True if the field can hold more than one value."""
        return self.multiplicity == Multiplicity.MULTIPLE

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        result = {
            "name": self.name,
            "type": self.type.value,
            "cardinality": self.cardinality,
            "required": self.required,
        }
        if self.source_type:
            result["source_type"] = self.source_type
        if self.label:
            result["label"] = self.label
        if self.description:
            result["description"] = self.description
        if self.ref_type:
            result["ref_type"] = self.ref_type
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FieldDefinition":
        """Create from dictionary representation."""
        cardinality = data.get("cardinality")
        multiplicity = data.get("multiplicity")

        if multiplicity is not None:
            multiplicity = Multiplicity(multiplicity)
            if cardinality is None:
                cardinality = 1 if multiplicity == Multiplicity.SINGLE else UNLIMITED
        else:
            if cardinality is None:
                cardinality = 1
            multiplicity = Multiplicity.SINGLE if int(cardinality) == 1 else Multiplicity.MULTIPLE

        return cls(
            name=data.get("name", ""),
            type=parse_field_type(data.get("type")),
            multiplicity=multiplicity,
            required=bool(data.get("required", False)),
            source_type=data.get("source_type") or "",
            label=data.get("label") or "",
            description=data.get("description") or "",
            ref_type=data.get("ref_type") or "",
            cardinality=int(cardinality),
        )


@dataclass
class EntityDefinition:
    """Schema for one bundle of an entity type (e.g. node/article)."""
    entity_type: str
    bundle: str
    name: str = ""
    description: str = ""
    fields: List[FieldDefinition] = field(default_factory=list)

    def __post_init__(self):
        self._index: Dict[str, FieldDefinition] = {f.name: f for f in self.fields}

    def add_field(self, definition: FieldDefinition) -> None:
        """Append a field definition; existing definitions are never replaced."""
        if definition.name in self._index:
            raise ValueError(
                f"Field already registered: {self.entity_type}.{self.bundle}.{definition.name}"
            )
        self.fields.append(definition)
        self._index[definition.name] = definition

    def get_field(self, name: str) -> Optional[FieldDefinition]:
        """Get a field definition by name."""
        return self._index.get(name)

    def has_field(self, name: str) -> bool:
        return name in self._index

    def field_names(self) -> List[str]:
        """Field names in registration order."""
        return [f.name for f in self.fields]

    def required_fields(self) -> List[str]:
        """Required field names in registration order."""
        return [f.name for f in self.fields if f.required]

    def validate(self, has_field: Callable[[str], bool]) -> List[str]:
        """Return the required field names for which ``has_field`` is false."""
        return [name for name in self.required_fields() if not has_field(name)]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "entity_type": self.entity_type,
            "bundle": self.bundle,
            "name": self.name,
            "description": self.description,
            "fields": [f.to_dict() for f in self.fields],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EntityDefinition":
        """Create from dictionary representation."""
        definition = cls(
            entity_type=data.get("entity_type", ""),
            bundle=data.get("bundle", ""),
            name=data.get("name", ""),
            description=data.get("description", ""),
        )
        for field_data in data.get("fields", []):
            definition.add_field(FieldDefinition.from_dict(field_data))
        return definition
