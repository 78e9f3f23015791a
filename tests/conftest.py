"""Shared fixtures for crosswalk tests."""

import json

import pytest

from crosswalk.models.entity import DynamicEntity
from crosswalk.models.schema import FieldType, Multiplicity
from crosswalk.services.schema_registry import SchemaRegistry


@pytest.fixture
def registry():
    """Registry with a node/article bundle covering every decoder type"""
    reg = SchemaRegistry()
    reg.register_field("node", "article", "title", FieldType.TEXT, Multiplicity.SINGLE, True, "string")
    reg.register_field("node", "article", "field_date", FieldType.DATE, Multiplicity.MULTIPLE, True, "edtf")
    reg.register_field("node", "article", "tags", FieldType.TEXT, Multiplicity.MULTIPLE, False, "list_string")
    reg.register_field("node", "article", "field_pages", FieldType.INTEGER, Multiplicity.SINGLE, False, "integer")
    reg.register_field("node", "article", "status", FieldType.BOOLEAN, Multiplicity.SINGLE, False, "boolean")
    reg.register_field(
        "node", "article", "field_subject", FieldType.REFERENCE, Multiplicity.MULTIPLE, False,
        "entity_reference", ref_type="taxonomy_term",
    )
    reg.register_field(
        "node", "article", "field_linked_agent", FieldType.TYPED_REFERENCE, Multiplicity.MULTIPLE,
        False, "typed_relation",
    )
    reg.register_field("node", "article", "field_link", FieldType.LINK, Multiplicity.MULTIPLE, False, "link")
    reg.register_field("node", "article", "field_extent", FieldType.COMPOSITE, Multiplicity.SINGLE, False, "")
    return reg


@pytest.fixture
def make_entity():
    """Factory building an entity from Python field values"""
    def _make(fields, entity_type="node", bundle="article", registry=None, entity_id=None):
        entity = DynamicEntity(entity_type, bundle, entity_id=entity_id)
        for name, value in fields.items():
            entity.set_field(name, json.dumps(value))
        if registry is not None:
            entity.attach_registry(registry)
        return entity
    return _make


@pytest.fixture
def drupal_node():
    """A node as emitted by Drupal's JSON serializer"""
    return {
        "nid": [{"value": 42}],
        "uuid": [{"value": "0b0c6c57-5a5b-4a0e-9a56-3fd1a2c0f0aa"}],
        "type": [{"target_id": "article", "target_type": "node_type"}],
        "title": [{"value": "Annual Report"}],
        "status": [{"value": True}],
        "field_date": [{"value": "2021-03-04"}, {"value": "1999~"}],
        "tags": [{"value": "history"}, {"value": "maps"}],
        "field_subject": [
            {"target_id": 7, "target_type": "taxonomy_term", "target_uuid": "abc"},
        ],
        "body": [{"value": "<p>Hi</p>", "format": "basic_html", "processed": "<p>Hi</p>\n"}],
    }
