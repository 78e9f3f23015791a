"""
Unit tests for configuration loading
"""
import json
import logging

from crosswalk.config import CrosswalkConfig, configure_logging


class TestCrosswalkConfig:
    """Dictionary, file and environment configuration"""

    def test_defaults(self):
        config = CrosswalkConfig()
        assert config.entity_type is None
        assert config.strict is False
        assert config.batch_size == 100

    def test_from_dict(self):
        config = CrosswalkConfig.from_dict({"bundle": "article", "batch_size": "25", "log_level": "debug"})
        assert config.bundle == "article"
        assert config.batch_size == 25
        assert config.log_level == "DEBUG"

    def test_from_json_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"schemas_dir": "schemas", "strict": True}))
        config = CrosswalkConfig.from_json_file(str(path))
        assert config.schemas_dir == "schemas"
        assert config.strict is True

    def test_from_env(self):
        environ = {
            "CROSSWALK_BUNDLE": "page",
            "CROSSWALK_STRICT": "yes",
            "CROSSWALK_TRIM_TEXT": "0",
            "CROSSWALK_BATCH_SIZE": "10",
            "UNRELATED": "x",
        }
        config = CrosswalkConfig.from_env(CrosswalkConfig(locale="en"), environ=environ)
        assert config.bundle == "page"
        assert config.strict is True
        assert config.trim_text is False
        assert config.batch_size == 10
        assert config.locale == "en"

    def test_text_options(self):
        options = CrosswalkConfig(locale="fr", trim_text=False).text_options()
        assert options.locale == "fr"
        assert options.trim is False

    def test_to_dict_round_trip(self):
        config = CrosswalkConfig(bundle="x", strict=True)
        assert CrosswalkConfig.from_dict(config.to_dict()) == config


def test_configure_logging():
    configure_logging("warning")
    assert logging.getLogger().getEffectiveLevel() <= logging.WARNING
