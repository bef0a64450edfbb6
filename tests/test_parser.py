"""Tests for splitting and parsing SQL text."""

import pytest
from sqlglot import exp

from sqlreview.models import AdviceCode, AdviceStatus
from sqlreview.parser import SQLSyntaxError, parse_statements, split_statements


def test_split_keeps_base_lines():
    """Each statement keeps the line it starts on, without its delimiter."""
    pieces = split_statements("SELECT 1;\nSELECT 2;\n\nSELECT 3")

    assert pieces == [("SELECT 1", 0), ("SELECT 2", 1), ("SELECT 3", 3)]


def test_split_several_statements_on_one_line():
    """Statements sharing a line share the base line."""
    pieces = split_statements("SELECT 1; SELECT 2")

    assert pieces == [("SELECT 1", 0), ("SELECT 2", 0)]


def test_parse_empty_input():
    """Blank input has no statements."""
    assert parse_statements("") == []
    assert parse_statements("  ;  ") == []


def test_parse_statements_text_and_tree():
    """Parsed statements carry their text and syntax tree."""
    statements = parse_statements("SELECT a FROM t;\nDELETE FROM t WHERE id = 1;")

    assert len(statements) == 2
    assert statements[0].text == "SELECT a FROM t"
    assert statements[1].text == "DELETE FROM t WHERE id = 1"
    assert statements[1].base_line == 1
    assert statements[0].tree is not None


def test_parse_error_becomes_syntax_error_advice():
    """A statement that does not parse becomes a syntax error advice."""
    with pytest.raises(SQLSyntaxError) as exc_info:
        parse_statements("SELECT 1;\nCREATE TABLE t (id INT")

    advice = exc_info.value.to_advice()
    assert advice.status == AdviceStatus.ERROR
    assert advice.code == AdviceCode.STATEMENT_SYNTAX_ERROR
    assert advice.title == "Syntax error"
    assert advice.start_position is not None
    assert exc_info.value.line >= 2


def test_tokenize_error_is_internal():
    """Text that cannot be tokenized is reported without a position."""
    with pytest.raises(SQLSyntaxError) as exc_info:
        parse_statements("SELECT 'unterminated")

    advice = exc_info.value.to_advice()
    assert advice.code == AdviceCode.INTERNAL
    assert advice.start_position is None


@pytest.mark.parametrize(
    "sql",
    [
        "DROP TABLE t, u",
        "DROP TEMPORARY TABLE IF EXISTS t, `shop`.`u` CASCADE",
        "ALTER TABLE t ADD COLUMN (a INT, b INT UNIQUE)",
        "CREATE UNIQUE INDEX uk USING BTREE ON t (a)",
    ],
)
def test_valid_ddl_the_parser_rejects_is_kept_raw(sql):
    """Valid MySQL DDL outside the parser's grammar is kept as a raw command, not a syntax error."""
    statements = parse_statements(f"SELECT 1;\n{sql}")

    assert len(statements) == 2
    assert isinstance(statements[1].tree, exp.Command)
    assert statements[1].text == sql
    assert statements[1].base_line == 1


@pytest.mark.parametrize("sql", ["DROP TABLE t,,", "ALTER TABLE t ADD COLUMN (a INT", "CREATE TABLE t (id INT"])
def test_invalid_ddl_is_still_a_syntax_error(sql):
    with pytest.raises(SQLSyntaxError):
        parse_statements(sql)
