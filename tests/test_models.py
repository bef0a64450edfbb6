"""Tests for core models."""

import pytest

from sqlreview.models import (
    Advice,
    AdviceCode,
    AdviceStatus,
    ReviewRule,
    RuleLevel,
    convert_line_to_position,
    status_from_rule_level,
)


def test_status_from_rule_level():
    """ERROR and WARNING map to the same advice status."""
    assert status_from_rule_level(RuleLevel.ERROR) == AdviceStatus.ERROR
    assert status_from_rule_level(RuleLevel.WARNING) == AdviceStatus.WARNING


def test_status_from_disabled_level_fails():
    """A disabled rule has no advice status."""
    with pytest.raises(ValueError, match="unexpected rule level type"):
        status_from_rule_level(RuleLevel.DISABLED)


def test_convert_line_to_position():
    """Lines are shifted to 0-based, line 0 stays 0."""
    assert convert_line_to_position(1).line == 0
    assert convert_line_to_position(12).line == 11
    assert convert_line_to_position(0).line == 0


def test_advice_is_immutable():
    """Advice cannot be changed once produced."""
    advice = Advice(status=AdviceStatus.WARNING, code=AdviceCode.STATEMENT_NO_WHERE, title="t", content="c")

    with pytest.raises(Exception):
        advice.content = "other"


def test_review_rule_defaults():
    """Rules default to WARNING without payload and ignore unknown fields."""
    rule = ReviewRule(type="statement.select.no-select-all", engine="MYSQL")

    assert rule.level == RuleLevel.WARNING
    assert rule.payload is None
    assert rule.comment == ""


def test_review_rule_level_from_string():
    """Levels can be given as plain strings, as in configuration files."""
    rule = ReviewRule(type="naming.table", level="ERROR")

    assert rule.level == RuleLevel.ERROR
