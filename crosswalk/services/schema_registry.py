"""Schema registry holding field definitions keyed by entity type, bundle and field name."""

import json
import logging
import re
from collections import Counter
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from ..models.documents import SchemaDocument
from ..models.entity import DynamicEntity
from ..models.schema import (
    EntityDefinition,
    FieldDefinition,
    FieldType,
    Multiplicity,
    UNLIMITED,
    parse_field_type,
)
from ..values.decoders import repetitions

logger = logging.getLogger(__name__)

_DATE_LIKE = re.compile(r"^\d{4}(-\d{2}(-\d{2})?)?([T ][\d:.]+(Z|[+-]\d{2}:?\d{2})?)?[~?%]?$")
_SCALAR_TYPES = {FieldType.TEXT, FieldType.INTEGER, FieldType.BOOLEAN, FieldType.DATE}


class SchemaRegistry:
    """
    Registry of entity bundle schemas.

    Supports:
    - Registering bundle definitions or individual field tuples
    - Exact (entity type, bundle, field) lookups with no cross-bundle fallback
    - Required-field validation against a presence predicate
    - Loading schema documents from JSON files
    - Inferring a bundle schema from sample entities

    A registry is meant to be populated once and then shared read-only by
    any number of entities.
    """

    def __init__(self, schemas_dir: Optional[str] = None):
        """
        Initialize the schema registry.

        Args:
            schemas_dir: Directory containing schema JSON files
        """
        # entities[entity_type][bundle] = EntityDefinition
        self.entities: Dict[str, Dict[str, EntityDefinition]] = {}

        if schemas_dir:
            self.load_from_directory(schemas_dir)

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def register(self, definition: EntityDefinition) -> None:
        """Register a bundle definition, replacing any existing one."""
        self.entities.setdefault(definition.entity_type, {})[definition.bundle] = definition

    def register_field(
        self,
        entity_type: str,
        bundle: str,
        name: str,
        field_type: Union[FieldType, str] = FieldType.UNKNOWN,
        multiplicity: Union[Multiplicity, str] = Multiplicity.SINGLE,
        required: bool = False,
        source_type: str = "",
        **extra: Any
    ) -> FieldDefinition:
        """
        Register a single field definition.

        Args:
            entity_type: Entity type (e.g. "node")
            bundle: Bundle name (e.g. "article")
            name: Field machine name
            field_type: Declared semantic type
            multiplicity: Single or multi-value
            required: Whether the field must be present
            source_type: The originating system's field type
            **extra: label, description, ref_type, cardinality

        Returns:
            The registered FieldDefinition

        Raises:
            ValueError: If the field is already registered for this bundle
        """
        multiplicity = Multiplicity(multiplicity)
        extra.setdefault("cardinality", 1 if multiplicity == Multiplicity.SINGLE else UNLIMITED)
        definition = FieldDefinition(
            name=name,
            type=parse_field_type(field_type),
            multiplicity=multiplicity,
            required=required,
            source_type=source_type,
            **extra
        )

        entity = self.get(entity_type, bundle)
        if entity is None:
            entity = EntityDefinition(entity_type=entity_type, bundle=bundle)
            self.register(entity)
        entity.add_field(definition)
        return definition

    def merge(self, other: "SchemaRegistry") -> None:
        """Copy all bundle definitions from another registry, overriding existing ones."""
        for bundles in other.entities.values():
            for definition in bundles.values():
                # Field definitions are frozen; only the field list needs its own copy
                self.register(replace(definition, fields=list(definition.fields)))

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def get(self, entity_type: str, bundle: str) -> Optional[EntityDefinition]:
        """Get a bundle definition."""
        return self.entities.get(entity_type, {}).get(bundle)

    def get_field(self, entity_type: str, bundle: str, name: str) -> Optional[FieldDefinition]:
        """Get a field definition by exact (entity type, bundle, name)."""
        entity = self.get(entity_type, bundle)
        if entity is None:
            return None
        return entity.get_field(name)

    def get_field_type(self, entity_type: str, bundle: str, name: str) -> Optional[FieldType]:
        """Get the declared type of a field."""
        definition = self.get_field(entity_type, bundle, name)
        return definition.type if definition else None

    def get_source_type(self, entity_type: str, bundle: str, name: str) -> Optional[str]:
        """Get the source-system type of a field."""
        definition = self.get_field(entity_type, bundle, name)
        return definition.source_type if definition else None

    def list_entity_types(self) -> List[str]:
        """List all registered entity types."""
        return list(self.entities.keys())

    def list_bundles(self, entity_type: str) -> List[str]:
        """List all registered bundles of an entity type."""
        return list(self.entities.get(entity_type, {}).keys())

    def validate(
        self,
        entity_type: str,
        bundle: str,
        has_field: Callable[[str], bool]
    ) -> List[str]:
        """
        Check required fields for a bundle.

        Args:
            entity_type: Entity type
            bundle: Bundle name
            has_field: Predicate reporting whether a field is present

        Returns:
            Names of required fields that are absent, in registration order.
            Empty for an unknown bundle.
        """
        entity = self.get(entity_type, bundle)
        if entity is None:
            return []
        return entity.validate(has_field)

    # -------------------------------------------------------------------------
    # Loading and export
    # -------------------------------------------------------------------------

    def load_from_dict(self, data: Dict[str, Any]) -> int:
        """
        Register every bundle in a schema document.

        Returns:
            Number of bundle definitions registered

        Raises:
            ValueError: If the document is not a valid schema document
        """
        try:
            document = SchemaDocument.model_validate(data)
            definitions = [
                EntityDefinition.from_dict(entity.model_dump()) for entity in document.entities
            ]
        except PydanticValidationError as e:
            raise ValueError(f"Invalid schema document: {e}") from e

        for definition in definitions:
            self.register(definition)
        return len(definitions)

    def load_from_file(self, file_path: str) -> int:
        """Load a schema document from a JSON file."""
        with open(file_path, "r") as f:
            data = json.load(f)
        loaded = self.load_from_dict(data)
        logger.info(f"Loaded {loaded} bundle definition(s) from {file_path}")
        return loaded

    def load_from_directory(self, directory: str) -> int:
        """
        Load all schema files from a directory.

        Files that cannot be read or parsed are logged and skipped.

        Args:
            directory: Path to directory containing schema JSON files

        Returns:
            Number of files loaded
        """
        loaded = 0
        path = Path(directory)

        if not path.exists():
            logger.warning(f"Schema directory does not exist: {directory}")
            return 0

        for file_path in sorted(path.glob("**/*.json")):
            try:
                self.load_from_file(str(file_path))
                loaded += 1
            except (OSError, ValueError) as e:
                logger.error(f"Failed to load schema from {file_path}: {e}")

        return loaded

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a schema document."""
        return {
            "entities": [
                definition.to_dict()
                for bundles in self.entities.values()
                for definition in bundles.values()
            ],
        }

    def export(self, file_path: str) -> None:
        """Write the registry to a JSON schema file."""
        with open(file_path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    # -------------------------------------------------------------------------
    # Inference
    # -------------------------------------------------------------------------

    def infer_entity_definition(
        self,
        entities: Iterable[DynamicEntity],
        entity_type: str,
        bundle: str,
        register: bool = False
    ) -> EntityDefinition:
        """
        Infer a bundle schema from sample entities.

        Field types come from payload shapes, multiplicity from whether any
        sample holds more than one value, and a field is required when every
        sample carries a non-empty value for it.

        Args:
            entities: Sample entities; only those matching type and bundle are used
            entity_type: Entity type
            bundle: Bundle name
            register: Whether to register the inferred definition

        Returns:
            Inferred EntityDefinition
        """
        samples = [e for e in entities if e.entity_type == entity_type and e.bundle == bundle]

        field_types: Dict[str, Counter] = {}
        field_multi: Dict[str, bool] = {}
        field_counts: Counter = Counter()
        ref_types: Dict[str, str] = {}

        for entity in samples:
            for name in sorted(entity.field_names()):
                items = repetitions(entity.raw(name))
                if not items:
                    continue
                field_counts[name] += 1
                field_multi[name] = field_multi.get(name, False) or len(items) > 1
                counter = field_types.setdefault(name, Counter())
                for item in items:
                    counter[self._infer_item_type(item)] += 1
                    if isinstance(item, dict) and item.get("target_type") and name not in ref_types:
                        ref_types[name] = str(item["target_type"])

        definition = EntityDefinition(
            entity_type=entity_type,
            bundle=bundle,
            description=f"Inferred from {len(samples)} sample(s)",
        )
        for name, counter in field_types.items():
            multi = field_multi.get(name, False)
            definition.add_field(FieldDefinition(
                name=name,
                type=self._determine_field_type(counter),
                multiplicity=Multiplicity.MULTIPLE if multi else Multiplicity.SINGLE,
                required=bool(samples) and field_counts[name] == len(samples),
                source_type="inferred",
                ref_type=ref_types.get(name, ""),
                cardinality=UNLIMITED if multi else 1,
            ))

        if register:
            self.register(definition)
        return definition

    def _infer_item_type(self, item: Any) -> FieldType:
        """Guess the field type of one repetition."""
        if isinstance(item, dict):
            if "target_id" in item:
                if "rel_type" in item:
                    return FieldType.TYPED_REFERENCE
                return FieldType.REFERENCE
            if "uri" in item:
                return FieldType.LINK
            if "value" in item:
                return self._infer_item_type(item["value"])
            return FieldType.COMPOSITE
        if isinstance(item, bool):
            return FieldType.BOOLEAN
        if isinstance(item, int):
            return FieldType.INTEGER
        if isinstance(item, str) and _DATE_LIKE.match(item.strip()):
            return FieldType.DATE
        if isinstance(item, list):
            return FieldType.COMPOSITE
        return FieldType.TEXT

    def _determine_field_type(self, counter: Counter) -> FieldType:
        """Pick one type from the types observed across samples."""
        observed = set(counter)
        if len(observed) == 1:
            return observed.pop()
        if observed <= _SCALAR_TYPES:
            return FieldType.TEXT
        return FieldType.UNKNOWN
