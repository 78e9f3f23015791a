"""
Unit tests for EntityValidator
"""
from crosswalk.services.validator import EntityValidator, ValidationError


class TestEntityValidator:
    """Validation reporting"""

    def test_missing_registry_is_warning(self, make_entity):
        errors = EntityValidator().validate_entity(make_entity({"title": "x"}))
        assert len(errors) == 1
        assert errors[0].error_type == "schema"
        assert errors[0].severity == "warning"

    def test_required_fields(self, make_entity, registry):
        entity = make_entity({"tags": ["a"]}, registry=registry)
        errors = EntityValidator().validate_entity(entity)
        assert [e.field for e in errors] == ["title", "field_date"]
        assert all(e.error_type == "required" for e in errors)

    def test_valid_entity(self, make_entity, registry):
        entity = make_entity({"title": "x", "field_date": ["1999"]}, registry=registry)
        validator = EntityValidator()
        assert validator.validate_entity(entity) == []
        assert validator.is_valid(entity)

    def test_strict_reports_unknown_fields(self, make_entity, registry):
        entity = make_entity({"title": "x", "field_date": ["1999"], "extra": 1}, registry=registry)
        validator = EntityValidator()
        assert validator.validate_entity(entity) == []

        errors = validator.validate_entity(entity, strict=True)
        assert [(e.field, e.error_type, e.severity) for e in errors] == [
            ("extra", "unknown_field", "warning"),
        ]
        assert validator.is_valid(entity)

    def test_batch_keys(self, make_entity, registry):
        entities = [
            make_entity({"title": "x", "field_date": ["1999"]}, registry=registry, entity_id="n1"),
            make_entity({}, registry=registry, entity_id="n2"),
            make_entity({}, registry=registry),
        ]
        results = EntityValidator().validate_batch(entities)
        assert sorted(results) == ["2", "n2"]
        assert [e.field for e in results["n2"]] == ["title", "field_date"]

    def test_batch_stop_on_first_error(self, make_entity, registry):
        entities = [make_entity({}, registry=registry, entity_id=str(i)) for i in range(3)]
        results = EntityValidator().validate_batch(entities, stop_on_first_error=True)
        assert list(results) == ["0"]

    def test_to_dict(self):
        error = ValidationError(field="title", message="Missing", error_type="required")
        assert error.to_dict() == {
            "field": "title",
            "message": "Missing",
            "error_type": "required",
            "severity": "error",
            "value": None,
        }
