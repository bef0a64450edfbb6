"""Tests for the catalog walk-through."""

import pytest

from sqlreview.catalog import Catalog, DatabaseState, WalkThroughError, WalkThroughErrorType, walk_through
from sqlreview.parser import parse_statements


def _walk(state, sql):
    walk_through(state, parse_statements(sql))


@pytest.fixture
def state(shop_metadata):
    return DatabaseState(shop_metadata)


def test_walk_through_changes_final_state_only(catalog):
    finder = catalog.get_finder()

    finder.walk_through(parse_statements("CREATE TABLE logs (id INT PRIMARY KEY, msg TEXT)"))

    assert finder.final.find_table("logs") is not None
    assert finder.origin.find_table("logs") is None


def test_create_table_columns_and_keys(state):
    _walk(state, "CREATE TABLE logs (id INT PRIMARY KEY, sku INT UNIQUE, msg TEXT NOT NULL)")

    table = state.find_table("LOGS")
    assert list(table.columns) == ["id", "sku", "msg"]
    assert table.find_column("msg").nullable is False
    assert table.find_index("PRIMARY").expressions == ["id"]
    assert table.find_index("sku").unique is True
    assert table.count_index() == 2


def test_create_existing_table(state):
    with pytest.raises(WalkThroughError) as exc_info:
        _walk(state, "SELECT 1;\nCREATE TABLE orders (id INT)")

    assert exc_info.value.type == WalkThroughErrorType.TABLE_EXISTS
    assert exc_info.value.line == 2
    assert str(exc_info.value) == "[301] Table `orders` already exists"


def test_create_table_if_not_exists(state):
    _walk(state, "CREATE TABLE IF NOT EXISTS orders (id INT)")

    assert state.find_table("orders").count_index() == 2


def test_create_table_as_select(state):
    with pytest.raises(WalkThroughError) as exc_info:
        _walk(state, "CREATE TABLE copy_orders AS SELECT * FROM orders")

    assert exc_info.value.type == WalkThroughErrorType.USE_CREATE_TABLE_AS


def test_drop_table(state):
    _walk(state, "DROP TABLE users")

    assert state.find_table("users") is None


def test_drop_missing_table(state):
    with pytest.raises(WalkThroughError) as exc_info:
        _walk(state, "DROP TABLE missing")

    assert exc_info.value.type == WalkThroughErrorType.TABLE_NOT_EXISTS
    _walk(state, "DROP TABLE IF EXISTS missing")


def test_alter_table_columns(state):
    _walk(state, "ALTER TABLE orders ADD COLUMN note TEXT")
    assert state.find_table("orders").find_column("note") is not None

    _walk(state, "ALTER TABLE orders DROP COLUMN user_id")
    table = state.find_table("orders")
    assert table.find_column("user_id") is None
    assert table.find_index("idx_user") is None


def test_add_existing_column(state):
    with pytest.raises(WalkThroughError) as exc_info:
        _walk(state, "ALTER TABLE orders ADD COLUMN status INT")

    assert exc_info.value.type == WalkThroughErrorType.COLUMN_EXISTS


def test_drop_missing_column(state):
    with pytest.raises(WalkThroughError) as exc_info:
        _walk(state, "ALTER TABLE orders DROP COLUMN missing")

    assert exc_info.value.type == WalkThroughErrorType.COLUMN_NOT_EXISTS


def test_create_index(state):
    _walk(state, "CREATE INDEX idx_status ON orders (status)")

    assert state.find_table("orders").find_index("idx_status").expressions == ["status"]


def test_create_index_on_missing_table(state):
    with pytest.raises(WalkThroughError) as exc_info:
        _walk(state, "CREATE INDEX idx_a ON missing (a)")

    assert exc_info.value.type == WalkThroughErrorType.TABLE_NOT_EXISTS


def test_dropped_database_rejects_changes(state):
    with pytest.raises(WalkThroughError) as exc_info:
        _walk(state, "DROP DATABASE shop; CREATE TABLE t (id INT)")

    assert exc_info.value.type == WalkThroughErrorType.DATABASE_IS_DELETED


def test_access_other_database(state):
    with pytest.raises(WalkThroughError) as exc_info:
        _walk(state, "DROP DATABASE archive")

    assert exc_info.value.type == WalkThroughErrorType.ACCESS_OTHER_DATABASE


def test_data_statements_are_ignored(state):
    _walk(state, "SELECT * FROM missing; DELETE FROM missing WHERE id = 1")

    assert state.find_table("missing") is None


def test_catalog_without_metadata():
    finder = Catalog().get_finder()

    finder.walk_through(parse_statements("CREATE TABLE t (id INT)"))

    assert finder.final.table_names() == ["t"]
    assert finder.origin.has_no_table()


def test_drop_table_list(state):
    """Every table of a multi-table DROP TABLE is removed."""
    _walk(state, "DROP TABLE orders, `shop`.`users`")

    assert state.has_no_table()


def test_drop_table_list_with_missing_table(state):
    with pytest.raises(WalkThroughError) as exc_info:
        _walk(state, "DROP TABLE users, missing")

    assert exc_info.value.type == WalkThroughErrorType.TABLE_NOT_EXISTS

    _walk(state, "DROP TABLE IF EXISTS orders, missing")
    assert state.find_table("orders") is None


def test_alter_table_adds_column_list(state):
    """A parenthesized ADD COLUMN list adds every column and its inline keys."""
    _walk(state, "ALTER TABLE orders ADD COLUMN (note TEXT, sku INT UNIQUE)")

    table = state.find_table("orders")
    assert table.find_column("note") is not None
    assert table.find_column("sku") is not None
    assert table.find_index("sku").unique
    assert table.count_index() == 3


def test_alter_table_raw_text_with_other_items_is_unsupported(state):
    with pytest.raises(WalkThroughError) as exc_info:
        _walk(state, "ALTER TABLE orders ADD COLUMN (note TEXT), ALGORITHM=INPLACE")

    assert exc_info.value.type == WalkThroughErrorType.UNSUPPORTED
    assert state.find_table("orders").find_column("note") is None


@pytest.mark.parametrize(
    "sql",
    [
        "CREATE UNIQUE INDEX uk_status ON orders (status) USING BTREE",
        "CREATE UNIQUE INDEX uk_status USING BTREE ON orders (status)",
        "CREATE UNIQUE INDEX uk_status ON orders (status(8) DESC) COMMENT 'state' ALGORITHM=INPLACE",
    ],
)
def test_create_index_with_index_options(state, sql):
    """Index options the parser keeps as raw text still add the index."""
    _walk(state, sql)

    index = state.find_table("orders").find_index("uk_status")
    assert index.unique
    assert index.expressions == ["status"]


def test_create_fulltext_index(state):
    _walk(state, "CREATE FULLTEXT INDEX ft_status ON orders (status)")

    index = state.find_table("orders").find_index("ft_status")
    assert index.type == "FULLTEXT"
    assert not index.unique
