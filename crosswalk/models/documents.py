"""Pydantic models for schema export documents loaded into the registry."""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class FieldDocument(BaseModel):
    name: str
    type: str = "unknown"
    source_type: str = ""
    cardinality: Optional[int] = None
    multiplicity: Optional[str] = None
    required: bool = False
    label: str = ""
    description: str = ""
    ref_type: str = ""
    settings: Dict[str, Any] = Field(default_factory=dict)


class EntityDocument(BaseModel):
    entity_type: str
    bundle: str
    name: str = ""
    description: str = ""
    fields: List[FieldDocument] = Field(default_factory=list)


class SchemaDocument(BaseModel):
    """Top-level schema file: a version tag and a list of bundle definitions."""
    version: str = ""
    entities: List[EntityDocument] = Field(default_factory=list)
