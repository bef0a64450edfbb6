"""Module for working with configuration files."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .catalog import DatabaseSchemaMetadata
from .models import ReviewRule, RuleLevel

logger = logging.getLogger(__name__)

# Payloads used by the built-in configuration
DEFAULT_PAYLOADS: Dict[str, Dict[str, Any]] = {
    "index.total-number-limit": {"number": 5},
    "table.limit-size": {"number": 1000000},
    "system.charset.allowlist": {"list": ["utf8mb4"]},
    "statement.where.maximum-logical-operator-count": {"number": 10},
    "naming.table": {"format": "^[a-z]+(_[a-z]+)*$", "maxLength": 64},
}


class Config(BaseModel):
    """Review configuration: the rules to run and how."""

    id: str = Field(default="default", description="Configuration identifier")
    rules: List[ReviewRule] = Field(default_factory=list, description="Configured rules")

    model_config = ConfigDict(extra="ignore")

    def enabled_rules(self) -> List[ReviewRule]:
        """Rules whose level is not DISABLED, in configuration order."""
        return [rule for rule in self.rules if rule.level != RuleLevel.DISABLED]


def default_config() -> Config:
    """
    Build the configuration that enables every built-in rule at WARNING.

    Returns:
        Config with default payloads
    """
    from .rules.registry import AdvisorRegistry

    rules = [
        ReviewRule(type=rule_type, level=RuleLevel.WARNING, payload=DEFAULT_PAYLOADS.get(rule_type))
        for rule_type in AdvisorRegistry.with_default_rules().list_rule_types()
    ]
    return Config(id="default", rules=rules)


def _read_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    suffix = path.suffix.lower()
    if suffix == ".json":
        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"JSON parsing error in {path}: {e}")
    elif suffix == ".toml":
        import tomli

        try:
            with open(path, "rb") as f:
                data = tomli.load(f)
        except tomli.TOMLDecodeError as e:
            raise ValueError(f"TOML parsing error in {path}: {e}")
        # Extract [sqlreview] section if it exists, otherwise use root level
        return data.get("sqlreview", data)
    else:
        raise ValueError(f"Unsupported configuration file format: {suffix}. Supported: .json, .toml")


def load_config(config_path: Path) -> Config:
    """
    Loads review configuration from a file.

    Supports formats:
    - JSON (.json)
    - TOML (.toml), rules as [[rules]] tables or under [sqlreview]

    Args:
        config_path: Path to the configuration file

    Returns:
        Config object with the configured rules

    Raises:
        FileNotFoundError: If the file is not found
        ValueError: If the file format is not supported or the file is invalid
    """
    config_path = Path(config_path)
    data = _read_file(config_path)
    try:
        config = Config(**data)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration in {config_path}: {e}")
    logger.debug(f"Loaded {len(config.rules)} rule(s) from {config_path}")
    return config


def load_schema_metadata(schema_path: Path) -> DatabaseSchemaMetadata:
    """
    Loads database schema metadata from a JSON or TOML file.

    Args:
        schema_path: Path to the metadata file

    Returns:
        DatabaseSchemaMetadata describing the existing database

    Raises:
        FileNotFoundError: If the file is not found
        ValueError: If the file format is not supported or the file is invalid
    """
    schema_path = Path(schema_path)
    data = _read_file(schema_path)
    try:
        return DatabaseSchemaMetadata(**data)
    except ValidationError as e:
        raise ValueError(f"Invalid schema metadata in {schema_path}: {e}")
