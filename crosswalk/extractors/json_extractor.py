"""Extractor for JSON entity exports (e.g. Drupal REST/serialization output)."""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
import glob as globmodule

from .base import BaseExtractor, ExtractionResult
from ..models.entity import DynamicEntity
from ..services.schema_registry import SchemaRegistry
from ..values.decoders import decode_text

logger = logging.getLogger(__name__)

# Identifier key -> entity type it implies when none is configured
ID_KEYS: Tuple[Tuple[str, str], ...] = (
    ("nid", "node"),
    ("tid", "taxonomy_term"),
    ("mid", "media"),
    ("uid", "user"),
    ("id", ""),
    ("uuid", ""),
)
BUNDLE_KEYS = ("type", "vid", "bundle")
DEFAULT_ENTITY_TYPE = "node"
DATA_SOURCE = "<data>"


class JSONExportExtractor(BaseExtractor):
    """
    Extractor for JSON exports holding one object per entity.

    Every top-level key of an object becomes a field whose payload is the
    re-encoded JSON of its value; nothing is decoded at this stage.

    Supports:
    - A single JSON file, a glob pattern, or already-parsed data
    - A top-level array of entities or a single entity object
    - Bundle detection from "type"/"vid"/"bundle" and ID detection from nid/tid/mid/uid/id/uuid
    """

    def __init__(
        self,
        file_path: Optional[str] = None,
        data: Optional[Any] = None,
        entity_type: Optional[str] = None,
        bundle: Optional[str] = None,
        registry: Optional[SchemaRegistry] = None,
        batch_size: int = 100,
        encoding: str = "utf-8-sig"
    ):
        """
        Initialize the JSON extractor.

        Args:
            file_path: Path or glob pattern of JSON export files
            data: Already-parsed export (list of objects or one object)
            entity_type: Entity type for all entities (detected per record when None)
            bundle: Bundle for all entities (read per record when None)
            registry: Schema registry to attach to every entity
            batch_size: Default batch size for streaming
            encoding: File encoding; the default tolerates a byte order mark
        """
        super().__init__(entity_type=entity_type, bundle=bundle, registry=registry, batch_size=batch_size)
        if file_path is None and data is None:
            raise ValueError("Either file_path or data is required")
        self.file_path = file_path
        self.data = data
        self.encoding = encoding
        self._cache: Optional[List[DynamicEntity]] = None

    def extract(self) -> ExtractionResult:
        """Extract all entities from the export."""
        self.reset()
        started_at = datetime.now(timezone.utc)

        entities: List[DynamicEntity] = []
        for source, records in self._load_sources():
            for index, record in enumerate(records):
                entity = self._build_entity(record, index, source)
                if entity is not None:
                    entities.append(entity)

        self._cache = entities
        result = self.get_extraction_result(entities)
        result.started_at = started_at
        result.completed_at = datetime.now(timezone.utc)
        logger.info(f"Extracted {len(entities)} entities ({len(result.errors)} errors)")
        return result

    def extract_batch(self, offset: int = 0, limit: int = 100) -> List[DynamicEntity]:
        """Extract a batch of entities."""
        if self._cache is None:
            self.extract()
        return self._cache[offset:offset + limit]

    def reset(self) -> None:
        """Reset the extractor state."""
        super().reset()
        self._cache = None

    def _get_files(self) -> List[Path]:
        """Resolve the configured path or glob pattern to files."""
        if any(ch in self.file_path for ch in "*?["):
            return [Path(p) for p in sorted(globmodule.glob(self.file_path, recursive=True))]
        path = Path(self.file_path)
        return [path] if path.exists() else []

    def _load_sources(self) -> List[Tuple[str, List[Any]]]:
        """Load every configured source as a (label, records) pair."""
        if self.data is not None:
            return [(DATA_SOURCE, self._as_records(self.data))]

        files = self._get_files()
        if not files:
            self.add_warning(f"No files found matching: {self.file_path}", source=self.file_path)
            return []

        sources = []
        for file_path in files:
            logger.info(f"Processing file: {file_path}")
            try:
                with open(file_path, "r", encoding=self.encoding) as f:
                    content = f.read()
            except (OSError, UnicodeDecodeError) as e:
                self.add_error(f"Failed to read {file_path}: {e}", source=str(file_path))
                continue

            if not content.strip():
                self.add_warning(f"Empty export file: {file_path}", source=str(file_path))
                continue

            try:
                parsed = json.loads(content)
            except (ValueError, RecursionError) as e:
                self.add_error(f"Invalid JSON in {file_path}: {e}", source=str(file_path))
                continue

            sources.append((str(file_path), self._as_records(parsed)))
        return sources

    def _as_records(self, parsed: Any) -> List[Any]:
        if isinstance(parsed, list):
            return parsed
        return [parsed]

    def _build_entity(self, record: Any, index: int, source: str) -> Optional[DynamicEntity]:
        """Populate one entity from an export object."""
        if not isinstance(record, dict):
            self.add_error(
                f"Record {index} is not a JSON object",
                record_index=index,
                source=source,
                details={"type": type(record).__name__},
            )
            return None

        entity_id, detected_type = self._detect_identity(record)
        entity_type = self.entity_type or detected_type or DEFAULT_ENTITY_TYPE
        bundle = self.bundle or self._detect_bundle(record)
        if not bundle:
            self.add_warning(
                f"Record {index} has no bundle; using entity type {entity_type!r}", source=source
            )
            bundle = entity_type

        entity = DynamicEntity(entity_type, bundle, entity_id=entity_id)
        try:
            for name, value in record.items():
                entity.set_value(name, value)
        except (ValueError, RecursionError) as e:
            self.add_error(f"Record {index} cannot be encoded: {e}", record_index=index, source=source)
            return None
        return self.finalize_entity(entity)

    def _detect_identity(self, record: Dict[str, Any]) -> Tuple[Optional[str], str]:
        for key, implied_type in ID_KEYS:
            if key in record:
                entity_id = decode_text(json.dumps(record[key]))
                if entity_id:
                    return entity_id, implied_type
        return None, ""

    def _detect_bundle(self, record: Dict[str, Any]) -> str:
        for key in BUNDLE_KEYS:
            if key in record:
                bundle = decode_text(json.dumps(record[key]))
                if bundle:
                    return bundle
        return ""
