"""Extractors that populate dynamic entities from source exports."""

from .base import BaseExtractor, ExtractionResult
from .json_extractor import JSONExportExtractor

__all__ = [
    "BaseExtractor",
    "ExtractionResult",
    "JSONExportExtractor",
]
