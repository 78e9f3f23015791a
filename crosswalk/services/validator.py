"""Validation reporting for dynamic entities."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from ..models.entity import DynamicEntity
from ..values.coerce import text_or

logger = logging.getLogger(__name__)


@dataclass
class ValidationError:
    """A validation problem found on an entity."""
    field: str
    message: str
    error_type: str = "validation"
    severity: str = "error"  # error, warning, info
    value: Optional[Any] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "field": self.field,
            "message": self.message,
            "error_type": self.error_type,
            "severity": self.severity,
            "value": self.value,
        }


class EntityValidator:
    """
    Validator turning schema checks into reportable errors.

    Decoding never fails on bad data, so strictness lives here: callers
    decide whether warnings or errors stop a record.

    Supports:
    - Required field validation (from the attached registry)
    - Unknown field detection in strict mode
    - Batch validation keyed by entity ID
    """

    def validate_entity(self, entity: DynamicEntity, strict: bool = False) -> List[ValidationError]:
        """
        Validate an entity against its attached registry.

        Args:
            entity: The entity to validate
            strict: If True, fields unknown to the registry are reported as warnings

        Returns:
            List of validation errors
        """
        if entity.registry is None:
            return [ValidationError(
                field="",
                message=f"No schema registry attached to {entity.entity_type}.{entity.bundle}",
                error_type="schema",
                severity="warning",
            )]

        errors = [
            ValidationError(
                field=name,
                message=f"Missing required field {name!r}",
                error_type="required",
                severity="error",
            )
            for name in entity.validate()
        ]

        if strict:
            for name in sorted(entity.field_names()):
                if entity.get_field_schema(name) is None:
                    errors.append(ValidationError(
                        field=name,
                        message=f"Field not defined in schema for {entity.entity_type}.{entity.bundle}",
                        error_type="unknown_field",
                        severity="warning",
                    ))

        return errors

    def validate_batch(
        self,
        entities: Iterable[DynamicEntity],
        strict: bool = False,
        stop_on_first_error: bool = False
    ) -> Dict[str, List[ValidationError]]:
        """
        Validate a batch of entities.

        Args:
            entities: Entities to validate
            strict: Passed through to validate_entity
            stop_on_first_error: If True, stop on the first entity with errors

        Returns:
            Dictionary mapping entity IDs (or positions) to their validation errors
        """
        all_errors = {}

        for index, entity in enumerate(entities):
            errors = self.validate_entity(entity, strict=strict)
            if errors:
                key = text_or(entity.entity_id, str(index))
                all_errors[key] = errors
                if stop_on_first_error and any(e.severity == "error" for e in errors):
                    logger.info(f"Stopping batch validation at entity {key}")
                    break

        return all_errors

    def is_valid(self, entity: DynamicEntity) -> bool:
        """Quick check if an entity has no error-level problems."""
        errors = self.validate_entity(entity)
        return not any(e.severity == "error" for e in errors)
