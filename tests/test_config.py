"""Tests for configuration loading."""

import json

import pytest

from sqlreview.config import Config, default_config, load_config, load_schema_metadata
from sqlreview.models import ReviewRule, RuleLevel
from sqlreview.rules.registry import AdvisorRegistry


def test_default_config_enables_every_rule():
    config = default_config()

    assert [rule.type for rule in config.rules] == AdvisorRegistry.with_default_rules().list_rule_types()
    assert all(rule.level == RuleLevel.WARNING for rule in config.rules)
    naming = next(rule for rule in config.rules if rule.type == "naming.table")
    assert naming.payload["format"] == "^[a-z]+(_[a-z]+)*$"


def test_enabled_rules_skip_disabled():
    config = Config(
        rules=[
            ReviewRule(type="statement.select.no-select-all", level=RuleLevel.DISABLED),
            ReviewRule(type="statement.disallow-commit", level=RuleLevel.ERROR),
        ]
    )

    assert [rule.type for rule in config.enabled_rules()] == ["statement.disallow-commit"]


def test_load_json_config(tmp_path):
    path = tmp_path / "sqlreview.json"
    path.write_text(
        json.dumps(
            {
                "id": "prod",
                "rules": [
                    {"type": "statement.where.require.update-delete", "level": "ERROR"},
                    {"type": "index.total-number-limit", "level": "WARNING", "payload": {"number": 3}},
                ],
            }
        )
    )

    config = load_config(path)

    assert config.id == "prod"
    assert config.rules[0].level == RuleLevel.ERROR
    assert config.rules[1].payload == {"number": 3}


def test_load_toml_config_section(tmp_path):
    path = tmp_path / "pyproject.toml"
    path.write_text(
        '[sqlreview]\nid = "toml"\n\n'
        '[[sqlreview.rules]]\ntype = "naming.table"\nlevel = "ERROR"\n'
        'payload = { format = "^[a-z_]+$", maxLength = 32 }\n'
    )

    config = load_config(path)

    assert config.id == "toml"
    assert config.rules[0].payload == {"format": "^[a-z_]+$", "maxLength": 32}


def test_load_config_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.json")

    yaml_path = tmp_path / "config.yaml"
    yaml_path.write_text("rules: []")
    with pytest.raises(ValueError, match="Unsupported configuration file format"):
        load_config(yaml_path)

    bad_json = tmp_path / "bad.json"
    bad_json.write_text("{")
    with pytest.raises(ValueError, match="JSON parsing error"):
        load_config(bad_json)

    bad_level = tmp_path / "level.json"
    bad_level.write_text(json.dumps({"rules": [{"type": "naming.table", "level": "LOUD"}]}))
    with pytest.raises(ValueError, match="Invalid configuration"):
        load_config(bad_level)


def test_load_schema_metadata(tmp_path):
    path = tmp_path / "schema.json"
    path.write_text(
        json.dumps(
            {
                "name": "shop",
                "schemas": [{"tables": [{"name": "orders", "row_count": 42, "columns": [{"name": "id"}]}]}],
            }
        )
    )

    metadata = load_schema_metadata(path)

    assert metadata.name == "shop"
    assert metadata.schemas[0].tables[0].row_count == 42
