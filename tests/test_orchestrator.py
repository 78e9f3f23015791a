"""
Unit tests for ExtractionOrchestrator
"""
from crosswalk.config import CrosswalkConfig
from crosswalk.orchestrator import ExtractionOrchestrator


class TestExtractionOrchestrator:
    """End-to-end extraction runs"""

    def test_lenient_run_decodes_everything(self, drupal_node, registry):
        incomplete = {"nid": [{"value": 43}], "type": [{"target_id": "article"}], "tags": ["x"]}
        run = ExtractionOrchestrator(registry=registry).run(data=[drupal_node, incomplete])

        assert len(run.records) == 2
        assert run.failed == []
        assert [e.field for e in run.validation["43"]] == ["title", "field_date"]

        record = run.records[0]
        assert record["id"] == "42"
        assert record["bundle"] == "article"
        assert record["fields"]["title"] == "Annual Report"
        assert record["fields"]["tags"] == ["history", "maps"]
        assert record["fields"]["field_subject"] == [
            {"id": "7", "type": "taxonomy_term", "uuid": "abc"},
        ]
        assert [d["value"] for d in record["fields"]["field_date"]] == ["2021-03-04", "1999~"]

    def test_strict_run_skips_invalid(self, drupal_node, registry):
        incomplete = {"nid": [{"value": 43}], "type": [{"target_id": "article"}]}
        config = CrosswalkConfig(strict=True)
        run = ExtractionOrchestrator(config=config, registry=registry).run(data=[drupal_node, incomplete])

        assert [r["id"] for r in run.records] == ["42"]
        assert run.failed == ["43"]
        assert run.to_dict()["failed"] == ["43"]

    def test_locale_filter(self, registry):
        node = {
            "nid": 1,
            "type": "article",
            "title": "T",
            "field_date": "2000",
            "tags": [{"value": "map", "langcode": "en"}, {"value": "carte", "langcode": "fr"}],
        }
        run = ExtractionOrchestrator(CrosswalkConfig(locale="fr"), registry=registry).run(data=node)
        assert run.records[0]["fields"]["tags"] == ["carte"]

    def test_without_registry(self, drupal_node):
        run = ExtractionOrchestrator().run(data=[drupal_node])
        assert run.validation == {}
        assert run.records[0]["fields"]["title"] == ["Annual Report"]

    def test_registry_from_schemas_dir(self, tmp_path):
        (tmp_path / "node.json").write_text(
            '{"entities": [{"entity_type": "node", "bundle": "page", '
            '"fields": [{"name": "title", "type": "text", "required": true}]}]}'
        )
        orchestrator = ExtractionOrchestrator(CrosswalkConfig(schemas_dir=str(tmp_path)))
        run = orchestrator.run(data=[{"nid": 5, "type": "page"}])
        assert [e.field for e in run.validation["5"]] == ["title"]

    def test_entity_type_detected_per_record(self, registry):
        registry.register_field("taxonomy_term", "tags", "name", "text", required=True)
        terms = [{"tid": [{"value": 3}], "vid": [{"target_id": "tags"}]}]
        run = ExtractionOrchestrator(registry=registry).run(data=terms)

        assert run.records[0]["entity_type"] == "taxonomy_term"
        assert [e.field for e in run.validation["3"]] == ["name"]
