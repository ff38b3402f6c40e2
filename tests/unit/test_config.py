"""
🧪 Unit Tests for Configuration
File: tests/unit/test_config.py

Tests config.py: dot-notation access, updates, environment overrides and
validation.

Run with: pytest tests/unit/test_config.py -v
"""

import json

import pytest

from config import CONFIG, ConfigManager

pytestmark = pytest.mark.unit


class TestConfigManager:

    def test_defaults(self):
        config = ConfigManager()
        assert config.get("table.missing_symbol") == "---"
        assert config.get("theme.font_size") == 13
        assert config.get("logging.logger_name") == "sumextras"

    def test_get_default_for_missing_key(self):
        assert ConfigManager().get("table.nope", default="x") == "x"
        assert ConfigManager().get("nope.nope") is None

    def test_update(self):
        config = ConfigManager()
        config.update("table.pvalue_digits", 2)
        assert config.get("table.pvalue_digits") == 2

    def test_update_unknown_key(self):
        with pytest.raises(KeyError):
            ConfigManager().update("table.nope", 1)
        with pytest.raises(KeyError):
            ConfigManager().update("nope.key", 1)

    def test_set_nested_create(self):
        config = ConfigManager()
        config.set_nested("report.title.text", "Table 1", create=True)
        assert config.get("report.title.text") == "Table 1"

        with pytest.raises(KeyError):
            config.set_nested("other.key", 1)

    def test_get_section_is_copy(self):
        config = ConfigManager()
        section = config.get_section("table")
        section["missing_symbol"] = "changed"
        assert config.get("table.missing_symbol") == "---"

    def test_to_json(self, tmp_path):
        path = tmp_path / "config.json"
        text = ConfigManager().to_json(str(path))
        assert json.loads(path.read_text()) == json.loads(text)
        assert json.loads(text)["labels"]["variable_column"] == "Variable"

    def test_validate_defaults(self):
        is_valid, errors = ConfigManager().validate()
        assert is_valid
        assert errors == []

    def test_validate_errors(self):
        config = ConfigManager()
        config.update("table.pvalue_digits", 5)
        config.update("table.categorical_max_levels", 0)
        config.update("logging.level", "LOUD")

        is_valid, errors = config.validate()

        assert not is_valid
        assert len(errors) == 3

    def test_global_instance(self):
        assert isinstance(CONFIG, ConfigManager)


class TestEnvironmentOverrides:

    @pytest.mark.parametrize(
        "env_value,expected",
        [
            ("false", False),
            ("TRUE", True),
            ("7", 7),
            ("2.5", 2.5),
            ("none", None),
            ("hello", "hello"),
        ],
    )
    def test_coercion(self, env_value, expected):
        assert ConfigManager._coerce_env_value(env_value) == expected

    def test_override_applied(self, monkeypatch):
        monkeypatch.setenv("SUMEXTRAS_THEME_COMPACT_ON_IMPORT", "false")
        monkeypatch.setenv("SUMEXTRAS_TABLE_MISSING_SYMBOL", "--")

        config = ConfigManager()

        assert config.get("theme.compact_on_import") is False
        assert config.get("table.missing_symbol") == "--"

    def test_unknown_override_warns(self, monkeypatch):
        monkeypatch.setenv("SUMEXTRAS_TABLE_NOT_A_KEY", "1")
        with pytest.warns(UserWarning, match="SUMEXTRAS_TABLE_NOT_A_KEY"):
            ConfigManager()
