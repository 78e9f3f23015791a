"""Base extractor interface."""

from abc import ABC, abstractmethod
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional
import logging

from ..models.entity import DynamicEntity
from ..services.schema_registry import SchemaRegistry

logger = logging.getLogger(__name__)


@dataclass
class ExtractionResult:
    """Result of an extraction operation."""
    entities: List[DynamicEntity] = field(default_factory=list)
    total_extracted: int = 0
    errors: List[Dict[str, Any]] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def duration_seconds(self) -> Optional[float]:
        """Get duration in seconds."""
        if self.started_at and self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None

    @property
    def success(self) -> bool:
        """Check if extraction was successful."""
        return len(self.errors) == 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "total_extracted": self.total_extracted,
            "errors": self.errors,
            "warnings": self.warnings,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "duration_seconds": self.duration_seconds,
            "metadata": self.metadata,
        }


class BaseExtractor(ABC):
    """
    Base class for entity extractors.

    Extractors read a source export and populate DynamicEntity objects with
    still-encoded field payloads. They attach the shared registry, if one
    is configured, once an entity is fully populated.
    """

    def __init__(
        self,
        entity_type: Optional[str] = None,
        bundle: Optional[str] = None,
        registry: Optional[SchemaRegistry] = None,
        batch_size: int = 100
    ):
        """
        Initialize the extractor.

        Args:
            entity_type: Entity type for extracted entities (detected when None)
            bundle: Bundle for extracted entities (read from each record when None)
            registry: Schema registry to attach to every entity
            batch_size: Default batch size for streaming
        """
        self.entity_type = entity_type
        self.bundle = bundle
        self.registry = registry
        self.batch_size = batch_size
        self._errors: List[Dict[str, Any]] = []
        self._warnings: List[str] = []
        self._bundle_counts: Counter = Counter()

    @abstractmethod
    def extract(self) -> ExtractionResult:
        """
        Extract all entities from the source.

        Returns:
            ExtractionResult containing all extracted entities
        """
        pass

    @abstractmethod
    def extract_batch(self, offset: int = 0, limit: int = 100) -> List[DynamicEntity]:
        """
        Extract a batch of entities.

        Args:
            offset: Starting offset
            limit: Maximum entities to extract

        Returns:
            List of extracted entities
        """
        pass

    def stream(self, batch_size: Optional[int] = None) -> Iterator[List[DynamicEntity]]:
        """
        Yield extracted entities in consecutive batches.

        A short batch ends the stream without a further (empty) request.

        Raises:
            ValueError: If the batch size is not positive
        """
        batch_size = batch_size or self.batch_size
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")

        offset = 0
        batch = self.extract_batch(offset=0, limit=batch_size)
        while batch:
            logger.debug(f"Streaming entities {offset}-{offset + len(batch) - 1}")
            yield batch
            if len(batch) < batch_size:
                return
            offset += len(batch)
            batch = self.extract_batch(offset=offset, limit=batch_size)

    def finalize_entity(self, entity: DynamicEntity) -> DynamicEntity:
        """Attach the configured registry to a fully populated entity and count its bundle."""
        if self.registry is not None:
            entity.attach_registry(self.registry)
        self._bundle_counts[f"{entity.entity_type}.{entity.bundle}"] += 1
        return entity

    def add_error(
        self,
        message: str,
        record_index: Optional[int] = None,
        source: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Record a problem that cost a source or a record."""
        error = {
            "message": message,
            "record_index": record_index,
            "source": source,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        if details:
            error.update(details)
        self._errors.append(error)
        logger.error(f"[{source or '-'}] {message}")

    def add_warning(self, message: str, source: Optional[str] = None) -> None:
        """Record a recoverable oddity; the affected record is still extracted."""
        self._warnings.append(message)
        logger.warning(f"[{source or '-'}] {message}")

    def get_extraction_result(self, entities: List[DynamicEntity]) -> ExtractionResult:
        """
        Bundle the extracted entities with the collected errors and warnings.

        ``metadata["bundles"]`` counts entities per ``entity_type.bundle``.
        """
        return ExtractionResult(
            entities=entities,
            total_extracted=len(entities),
            errors=list(self._errors),
            warnings=list(self._warnings),
            metadata={"bundles": dict(self._bundle_counts)},
        )

    def reset(self) -> None:
        """Forget errors, warnings and bundle counts from a previous run."""
        self._errors = []
        self._warnings = []
        self._bundle_counts = Counter()
