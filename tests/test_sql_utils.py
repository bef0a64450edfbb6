"""Tests for reading statements the parser keeps as raw text."""

import pytest

from sqlreview.parser import parse_statements
from sqlreview.sql_utils import (
    added_column_definitions,
    create_index_parts,
    drop_if_exists,
    drop_targets,
    raw_alter_items,
)


def _tree(sql):
    return parse_statements(sql)[0].tree


def test_drop_targets_of_table_list():
    targets = drop_targets(_tree("DROP TABLE orders, `shop`.`users` CASCADE"))

    assert [(t.text("db"), t.name) for t in targets] == [("", "orders"), ("shop", "users")]


def test_drop_if_exists():
    assert drop_if_exists(_tree("DROP TABLE IF EXISTS a, b"))
    assert not drop_if_exists(_tree("DROP TABLE a, b"))
    assert drop_if_exists(_tree("DROP TABLE IF EXISTS a"))


@pytest.mark.parametrize(
    "sql,unique,index_type",
    [
        ("CREATE UNIQUE INDEX uk_a ON t (a, `b`(10) DESC) USING BTREE", True, "BTREE"),
        ("CREATE UNIQUE INDEX uk_a USING HASH ON t (a, b)", True, "BTREE"),
        ("CREATE INDEX uk_a ON t (a, b) COMMENT 'pair'", False, "BTREE"),
        ("CREATE SPATIAL INDEX uk_a ON t (a, b)", False, "SPATIAL"),
    ],
)
def test_create_index_parts_of_raw_statements(sql, unique, index_type):
    table, definition = create_index_parts(_tree(sql))

    assert table.name == "t"
    assert definition.name == "uk_a"
    assert definition.columns == ["a", "b"]
    assert definition.unique is unique
    assert definition.type == index_type


def test_create_index_parts_of_parsed_statement():
    table, definition = create_index_parts(_tree("CREATE UNIQUE INDEX uk_a ON t (a)"))

    assert table.name == "t"
    assert definition.columns == ["a"]
    assert definition.unique


def test_added_column_definitions():
    tree = _tree("ALTER TABLE t ADD COLUMN (a INT, b VARCHAR(10) UNIQUE)")
    items = raw_alter_items(tree)

    assert items == ["ADD COLUMN (a INT, b VARCHAR(10) UNIQUE)"]
    assert [c.name for c in added_column_definitions(items[0])] == ["a", "b"]
    assert added_column_definitions("ADD INDEX idx_a (a)") is None
    assert added_column_definitions("ALGORITHM=INPLACE") is None
