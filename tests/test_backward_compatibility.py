"""Tests for schema.backward-compatibility."""

import pytest
import sqlglot
from sqlglot import exp

from sqlreview.models import AdviceCode, AdviceStatus
from sqlreview.parser import Statement
from sqlreview.rules import GenericChecker
from sqlreview.rules.schema_backward_compatibility import (
    SchemaBackwardCompatibilityAdvisor,
    SchemaBackwardCompatibilityRule,
)

RULE_TYPE = "schema.backward-compatibility"


@pytest.fixture
def check(make_rule):
    advisor = SchemaBackwardCompatibilityAdvisor()
    rule = make_rule(RULE_TYPE)
    return lambda sql: advisor.check(sql, rule)


def _walk_single(tree, text):
    rule = SchemaBackwardCompatibilityRule(AdviceStatus.WARNING, RULE_TYPE)
    checker = GenericChecker([rule])
    rule.reset_for_statement()
    checker.walk(Statement(tree=tree, base_line=0, text=text))
    return checker.get_advice_list()


def test_drop_table(check):
    advice = check("DROP TABLE orders")

    assert len(advice) == 1
    assert advice[0].code == AdviceCode.COMPATIBILITY_DROP_TABLE
    assert advice[0].content == '"DROP TABLE orders" may cause incompatibility with the existing data and code'
    assert advice[0].title == RULE_TYPE


def test_drop_database(check):
    advice = check("DROP DATABASE shop")

    assert [a.code for a in advice] == [AdviceCode.COMPATIBILITY_DROP_DATABASE]


def test_drop_column(check):
    advice = check("ALTER TABLE orders DROP COLUMN status")

    assert [a.code for a in advice] == [AdviceCode.COMPATIBILITY_DROP_COLUMN]


def test_rename_column(check):
    advice = check("ALTER TABLE orders RENAME COLUMN status TO state")

    assert [a.code for a in advice] == [AdviceCode.COMPATIBILITY_RENAME_COLUMN]


def test_create_unique_index(check):
    advice = check("CREATE UNIQUE INDEX uk_status ON orders (status)")

    assert [a.code for a in advice] == [AdviceCode.COMPATIBILITY_ADD_UNIQUE_KEY]


def test_compatible_changes(check):
    """Adding a nullable column or a plain index is compatible."""
    assert check("ALTER TABLE orders ADD COLUMN note TEXT") == []
    assert check("CREATE INDEX idx_status ON orders (status)") == []
    assert check("SELECT * FROM orders") == []


def test_table_created_in_batch_is_exempt(check):
    """Altering a table created earlier in the same batch is compatible."""
    advice = check("CREATE TABLE t (id INT, a INT); ALTER TABLE t DROP COLUMN a")

    assert advice == []


def test_one_advice_per_statement(check):
    """Each incompatible statement is reported once, at its own line."""
    advice = check("DROP TABLE a;\nDROP TABLE b;")

    assert [a.start_position.line for a in advice] == [0, 1]


def test_first_incompatible_action_decides_code():
    """When a statement holds several breaking changes, the first one wins."""
    tree = sqlglot.parse_one("ALTER TABLE orders DROP COLUMN a", read="mysql")
    drop = tree.args["actions"][0]
    foreign_key = exp.ForeignKey(expressions=[exp.to_identifier("b")])

    tree.set("actions", [drop, foreign_key])
    assert [a.code for a in _walk_single(tree, "drop first")] == [AdviceCode.COMPATIBILITY_DROP_COLUMN]

    tree.set("actions", [foreign_key, drop])
    assert [a.code for a in _walk_single(tree, "fk first")] == [AdviceCode.COMPATIBILITY_ADD_FOREIGN_KEY]


def test_first_incompatible_item_of_real_alter_decides_code(check):
    sql = "ALTER TABLE t DROP COLUMN a, ADD CONSTRAINT fk FOREIGN KEY (b) REFERENCES u(id)"

    assert [a.code for a in check(sql)] == [AdviceCode.COMPATIBILITY_DROP_COLUMN]


def test_first_incompatible_item_of_raw_alter_decides_code():
    tree = exp.Command(
        this="ALTER", expression=" TABLE t ADD CONSTRAINT fk FOREIGN KEY (b) REFERENCES u(id), DROP COLUMN a"
    )

    assert [a.code for a in _walk_single(tree, "fk first")] == [AdviceCode.COMPATIBILITY_ADD_FOREIGN_KEY]


@pytest.mark.parametrize(
    "sql",
    [
        "CREATE UNIQUE INDEX uk_status ON orders (status) USING BTREE",
        "CREATE UNIQUE INDEX uk_status USING BTREE ON orders (status)",
        "CREATE UNIQUE INDEX uk_status ON orders (status) COMMENT 'state'",
        "CREATE UNIQUE INDEX uk_status ON orders (status) ALGORITHM=INPLACE",
    ],
)
def test_create_unique_index_with_index_options(check, sql):
    """Index options do not hide a new unique key."""
    assert [a.code for a in check(sql)] == [AdviceCode.COMPATIBILITY_ADD_UNIQUE_KEY]


def test_create_non_unique_index_with_index_options(check):
    assert check("CREATE INDEX idx_status ON orders (status) USING BTREE") == []
    assert check("CREATE FULLTEXT INDEX ft_status ON orders (status)") == []


def test_unique_index_on_table_created_in_batch_with_index_options(check):
    assert check("CREATE TABLE t (id INT, a INT); CREATE UNIQUE INDEX uk_a ON t (a) USING BTREE") == []


def test_multi_table_drop(check):
    advice = check("DROP TABLE a, b")

    assert [a.code for a in advice] == [AdviceCode.COMPATIBILITY_DROP_TABLE]
    assert advice[0].content == '"DROP TABLE a, b" may cause incompatibility with the existing data and code'
