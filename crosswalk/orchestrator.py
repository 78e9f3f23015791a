"""Extraction orchestrator - loads an export, validates entities and decodes their fields."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .config import CrosswalkConfig
from .extractors.base import ExtractionResult
from .extractors.json_extractor import JSONExportExtractor
from .models.entity import DynamicEntity, to_plain
from .models.schema import FieldType
from .services.schema_registry import SchemaRegistry
from .services.validator import EntityValidator, ValidationError
from .values.coerce import text_or

logger = logging.getLogger(__name__)


@dataclass
class ExtractionRun:
    """Outcome of one orchestrated extraction."""
    extraction: ExtractionResult
    records: List[Dict[str, Any]] = field(default_factory=list)
    validation: Dict[str, List[ValidationError]] = field(default_factory=dict)
    failed: List[str] = field(default_factory=list)
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    @property
    def entities(self) -> List[DynamicEntity]:
        return self.extraction.entities

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "extraction": self.extraction.to_dict(),
            "records": self.records,
            "validation": {k: [e.to_dict() for e in v] for k, v in self.validation.items()},
            "failed": self.failed,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }


class ExtractionOrchestrator:
    """
    Coordinates a complete extraction.

    Handles:
    - Registry loading from the configured schemas directory
    - Entity extraction from JSON exports
    - Required-field validation (lenient or strict)
    - Generic, schema-driven decoding of every field
    """

    def __init__(self, config: Optional[CrosswalkConfig] = None, registry: Optional[SchemaRegistry] = None):
        """
        Initialize the orchestrator.

        Args:
            config: Run configuration
            registry: Pre-built registry; otherwise loaded from config.schemas_dir when set
        """
        self.config = config or CrosswalkConfig()
        self.registry = registry
        if self.registry is None and self.config.schemas_dir:
            self.registry = SchemaRegistry(self.config.schemas_dir)
        self.validator = EntityValidator()

    def run(self, file_path: Optional[str] = None, data: Optional[Any] = None) -> ExtractionRun:
        """
        Extract, validate and decode an export.

        Args:
            file_path: Path or glob pattern of JSON export files
            data: Already-parsed export data

        Returns:
            ExtractionRun with decoded records and validation results
        """
        started_at = datetime.now(timezone.utc)
        extractor = JSONExportExtractor(
            file_path=file_path,
            data=data,
            entity_type=self.config.entity_type,
            bundle=self.config.bundle,
            registry=self.registry,
            batch_size=self.config.batch_size,
        )
        extraction = extractor.extract()
        run = ExtractionRun(extraction=extraction, started_at=started_at)

        for index, entity in enumerate(extraction.entities):
            key = text_or(entity.entity_id, str(index))
            errors = [e for e in self.validator.validate_entity(entity) if e.error_type != "schema"]
            if errors:
                run.validation[key] = errors
                for error in errors:
                    logger.warning(f"Entity {key}: {error.message}")
                if self.config.strict and any(e.severity == "error" for e in errors):
                    run.failed.append(key)
                    continue

            run.records.append(self.extract_values(entity))

        run.completed_at = datetime.now(timezone.utc)
        logger.info(
            f"Extraction complete: {len(run.records)} records, "
            f"{len(run.validation)} with validation issues, {len(run.failed)} failed"
        )
        return run

    def extract_values(self, entity: DynamicEntity) -> Dict[str, Any]:
        """Decode every field of an entity into JSON-friendly values."""
        values = {}
        text_options = self.config.text_options()
        for name in sorted(entity.field_names()):
            definition = entity.get_field_schema(name)
            if definition is not None and definition.type == FieldType.TEXT and definition.is_multi_value:
                values[name] = entity.get_texts(name, text_options)
            else:
                values[name] = to_plain(entity.get(name))
        return {
            "entity_type": entity.entity_type,
            "bundle": entity.bundle,
            "id": entity.entity_id,
            "fields": values,
        }
