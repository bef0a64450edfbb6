"""Tests for node type resolution."""

import pytest
import sqlglot

from sqlreview.parser import parse_statements
from sqlreview.rules.node_types import NodeType, is_ddl, is_dml, resolve


@pytest.mark.parametrize(
    "sql,expected",
    [
        ("SELECT a FROM t", NodeType.SELECT),
        ("INSERT INTO t (a) VALUES (1)", NodeType.INSERT),
        ("UPDATE t SET a = 1", NodeType.UPDATE),
        ("DELETE FROM t", NodeType.DELETE),
        ("CREATE TABLE t (id INT)", NodeType.CREATE_TABLE),
        ("ALTER TABLE t ADD COLUMN c INT", NodeType.ALTER_TABLE),
        ("DROP TABLE t", NodeType.DROP_TABLE),
        ("DROP DATABASE shop", NodeType.DROP_DATABASE),
        ("CREATE INDEX idx_a ON t (a)", NodeType.CREATE_INDEX),
        ("COMMIT", NodeType.COMMIT),
    ],
)
def test_resolve_statements(sql, expected):
    """Statement roots resolve to their grammar category."""
    assert resolve(sqlglot.parse_one(sql, read="mysql")) == expected


def test_resolve_statement_wrapper_is_query():
    """The statement wrapper itself is the query node."""
    statement = parse_statements("SELECT 1")[0]

    assert resolve(statement) == NodeType.QUERY


def test_resolve_expressions():
    """Expression nodes inside a statement get their own tags."""
    tree = sqlglot.parse_one("SELECT * FROM t WHERE a = 1 OR b LIKE 'x%'", read="mysql")
    tags = {resolve(node) for node in tree.walk()}

    assert {NodeType.STAR, NodeType.WHERE, NodeType.EXPR_OR, NodeType.PREDICATE_LIKE, NodeType.TABLE_REF} <= tags


def test_resolve_non_expression_is_other():
    assert resolve("not a node") == NodeType.OTHER


def test_ddl_and_dml_categories():
    """Schema changes and data changes are disjoint."""
    assert is_ddl(NodeType.CREATE_TABLE)
    assert is_ddl(NodeType.DROP_DATABASE)
    assert not is_ddl(NodeType.INSERT)
    assert is_dml(NodeType.UPDATE)
    assert not is_dml(NodeType.SELECT)
    assert not is_dml(NodeType.CREATE_INDEX)


@pytest.mark.parametrize(
    "sql,expected",
    [
        ("DROP TABLE t, u", NodeType.DROP_TABLE),
        ("CREATE UNIQUE INDEX uk ON t (a) USING BTREE", NodeType.CREATE_INDEX),
        ("CREATE INDEX idx_a ON t (a) COMMENT 'lookup'", NodeType.CREATE_INDEX),
        ("CREATE FULLTEXT INDEX ft_body ON t (body)", NodeType.CREATE_INDEX),
        ("CREATE UNIQUE INDEX uk USING BTREE ON t (a)", NodeType.CREATE_INDEX),
        ("ALTER TABLE t ADD COLUMN (a INT, b INT)", NodeType.ALTER_TABLE),
    ],
)
def test_resolve_raw_ddl_commands(sql, expected):
    """Statements kept as raw text still resolve by their leading keywords."""
    assert resolve(parse_statements(sql)[0].tree) == expected
