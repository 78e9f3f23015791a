"""Dynamic entity: a migrated record whose fields stay encoded until read."""

import json
import logging
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Set

from .schema import FieldDefinition, FieldType
from .values import Date, Link, Ref, TypedRef
from ..values.coerce import TextOptions
from ..values.decoders import (
    RawPayload,
    RefOptions,
    TypedRefOptions,
    decode_bool,
    decode_dates,
    decode_formatted_text,
    decode_generic,
    decode_int,
    decode_links,
    decode_refs,
    decode_text,
    decode_texts,
    decode_typed_refs,
    with_default_type,
)

if TYPE_CHECKING:
    from ..services.schema_registry import SchemaRegistry

logger = logging.getLogger(__name__)


def _decode_text_field(raw: RawPayload, definition: FieldDefinition) -> Any:
    if definition.is_multi_value:
        return decode_texts(raw)
    return decode_text(raw)


def _decode_ref_field(raw: RawPayload, definition: FieldDefinition) -> Any:
    return decode_refs(raw, with_default_type(None, definition.ref_type))


def _decode_typed_ref_field(raw: RawPayload, definition: FieldDefinition) -> Any:
    return decode_typed_refs(raw, with_default_type(TypedRefOptions(), definition.ref_type))


# Declared type -> decoder. Types missing here are decoded generically.
FIELD_DECODERS: Dict[FieldType, Callable[[RawPayload, FieldDefinition], Any]] = {
    FieldType.TEXT: _decode_text_field,
    FieldType.INTEGER: lambda raw, definition: decode_int(raw),
    FieldType.BOOLEAN: lambda raw, definition: decode_bool(raw),
    FieldType.DATE: lambda raw, definition: decode_dates(raw),
    FieldType.REFERENCE: _decode_ref_field,
    FieldType.TYPED_REFERENCE: _decode_typed_ref_field,
    FieldType.LINK: lambda raw, definition: decode_links(raw),
}


class DynamicEntity:
    """
    An entity with a fixed type/bundle and a dynamic set of encoded fields.

    Fields are stored as raw JSON bytes and decoded lazily by the accessors;
    reading never mutates the stored payloads. A schema registry may be
    attached once to enable type-inferred ``get`` and ``validate``. Without
    one, schema-dependent operations return their no-schema defaults.
    """

    def __init__(self, entity_type: str, bundle: str, entity_id: Optional[str] = None):
        """
        Initialize an empty entity.

        Args:
            entity_type: Entity type (e.g. "node", "taxonomy_term")
            bundle: Bundle name (e.g. "article", "tags")
            entity_id: Source identifier, used for reporting only
        """
        self._entity_type = entity_type
        self._bundle = bundle
        self.entity_id = entity_id
        self.fields: Dict[str, bytes] = {}
        self._registry: Optional["SchemaRegistry"] = None

    def __repr__(self) -> str:
        return (
            f"DynamicEntity(entity_type={self._entity_type!r}, bundle={self._bundle!r}, "
            f"entity_id={self.entity_id!r}, fields={len(self.fields)})"
        )

    @property
    def entity_type(self) -> str:
        return self._entity_type

    @property
    def bundle(self) -> str:
        return self._bundle

    @property
    def registry(self) -> Optional["SchemaRegistry"]:
        """The attached schema registry, or None."""
        return self._registry

    # -------------------------------------------------------------------------
    # Population
    # -------------------------------------------------------------------------

    def set_field(self, name: str, payload: RawPayload) -> None:
        """Store a field's encoded payload as-is."""
        if payload is None:
            payload = b""
        elif isinstance(payload, str):
            payload = payload.encode("utf-8")
        self.fields[name] = bytes(payload)

    def set_value(self, name: str, value: Any) -> None:
        """JSON-encode a Python value and store it as a field payload."""
        self.fields[name] = json.dumps(value).encode("utf-8")

    def attach_registry(self, registry: "SchemaRegistry") -> None:
        """Attach a schema registry. Allowed at most once."""
        if registry is None:
            raise ValueError("registry must not be None")
        if self._registry is not None:
            raise RuntimeError(
                f"A schema registry is already attached to {self._entity_type}.{self._bundle}"
            )
        self._registry = registry

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    def has_field(self, name: str) -> bool:
        """Check if a field is present, regardless of schema."""
        return name in self.fields

    def field_names(self) -> Set[str]:
        """All present field names."""
        return set(self.fields)

    def raw(self, name: str) -> bytes:
        """The still-encoded payload of a field, or b"" if absent."""
        return self.fields.get(name, b"")

    def get_field_schema(self, name: str) -> Optional[FieldDefinition]:
        """The registry's definition of a field; None without a registry or match."""
        if self._registry is None:
            return None
        return self._registry.get_field(self._entity_type, self._bundle, name)

    def get_source_type(self, name: str) -> str:
        """The field's source-system type from the registry, or ""."""
        if self._registry is None:
            return ""
        return self._registry.get_source_type(self._entity_type, self._bundle, name) or ""

    def validate(self) -> List[str]:
        """Names of required fields that are absent; empty without a registry."""
        if self._registry is None:
            return []
        return self._registry.validate(self._entity_type, self._bundle, self.has_field)

    # -------------------------------------------------------------------------
    # Type-requested accessors
    # -------------------------------------------------------------------------

    def get_text(self, name: str) -> str:
        return decode_text(self.raw(name))

    def get_texts(self, name: str, options: Optional[TextOptions] = None) -> List[str]:
        return decode_texts(self.raw(name), options)

    def get_int(self, name: str) -> int:
        return decode_int(self.raw(name))

    def get_bool(self, name: str) -> bool:
        return decode_bool(self.raw(name))

    def get_refs(self, name: str, options: Optional[RefOptions] = None) -> List[Ref]:
        return decode_refs(self.raw(name), options)

    def get_typed_refs(self, name: str, options: Optional[TypedRefOptions] = None) -> List[TypedRef]:
        return decode_typed_refs(self.raw(name), options)

    def get_dates(self, name: str) -> List[Date]:
        """Field values parsed as dates. Unparseable values are dropped and logged."""
        raw = self.raw(name)
        dates = decode_dates(raw)
        if raw:
            dropped = len(decode_texts(raw)) - len(dates)
            if dropped > 0:
                logger.debug(
                    f"Dropped {dropped} unparseable date value(s) from "
                    f"{self._entity_type}.{self._bundle}.{name}"
                )
        return dates

    def get_links(self, name: str) -> List[Link]:
        return decode_links(self.raw(name))

    def get_formatted_text(self, name: str, use_processed: bool = False) -> str:
        return decode_formatted_text(self.raw(name), use_processed)

    # -------------------------------------------------------------------------
    # Type-inferred accessor
    # -------------------------------------------------------------------------

    def get(self, name: str) -> Any:
        """
        Decode a field using its declared type from the registry.

        Multi-value text fields decode to a list, single-value to a string.
        Without a registry, for unregistered fields, and for types with no
        dedicated decoder, falls back to generic decoding. Returns None when
        the field is absent.
        """
        raw = self.raw(name)
        if not raw:
            return None

        definition = self.get_field_schema(name)
        if definition is not None:
            decoder = FIELD_DECODERS.get(definition.type)
            if decoder is not None:
                return decoder(raw, definition)
        return decode_generic(raw)

    def to_dict(self) -> Dict[str, Any]:
        """Decoded snapshot of the entity, suitable for JSON reports."""
        return {
            "entity_type": self._entity_type,
            "bundle": self._bundle,
            "id": self.entity_id,
            "fields": {name: to_plain(self.get(name)) for name in sorted(self.fields)},
        }


def to_plain(value: Any) -> Any:
    """Convert decoded values (refs, links, dates) into JSON-friendly structures."""
    if isinstance(value, list):
        return [to_plain(item) for item in value]
    if isinstance(value, (Ref, Link, Date)):
        return value.to_dict()
    return value
