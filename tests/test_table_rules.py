"""Tests for table.require-pk, table.no-foreign-key and naming.table."""

import pytest

from sqlreview.models import AdviceCode
from sqlreview.rules.naming_table import NamingTableAdvisor
from sqlreview.rules.table_no_foreign_key import TableNoForeignKeyAdvisor
from sqlreview.rules.table_require_pk import TableRequirePKAdvisor


def _check(advisor, make_rule, sql, payload=None, context=None):
    return advisor.check(sql, make_rule(advisor.rule_type, payload), context)


def test_create_table_without_primary_key(make_rule):
    advice = _check(TableRequirePKAdvisor(), make_rule, "CREATE TABLE t (id INT, name VARCHAR(10))")

    assert len(advice) == 1
    assert advice[0].code == AdviceCode.TABLE_REQUIRE_PK
    assert advice[0].content == "Table `t` requires PRIMARY KEY"


@pytest.mark.parametrize(
    "sql",
    [
        "CREATE TABLE t (id INT PRIMARY KEY, name VARCHAR(10))",
        "CREATE TABLE t (id INT, name VARCHAR(10), PRIMARY KEY (id))",
    ],
)
def test_create_table_with_primary_key(make_rule, sql):
    assert _check(TableRequirePKAdvisor(), make_rule, sql) == []


def test_drop_primary_key(make_rule):
    advice = _check(TableRequirePKAdvisor(), make_rule, "ALTER TABLE orders DROP PRIMARY KEY")

    assert [a.content for a in advice] == ["Table `orders` requires PRIMARY KEY"]


def test_drop_primary_key_column_needs_catalog(make_rule, context):
    """Only the catalog knows which columns form the primary key."""
    sql = "ALTER TABLE orders DROP COLUMN id"

    assert len(_check(TableRequirePKAdvisor(), make_rule, sql, context=context)) == 1
    assert _check(TableRequirePKAdvisor(), make_rule, sql) == []
    assert _check(TableRequirePKAdvisor(), make_rule, "ALTER TABLE orders DROP COLUMN status", context=context) == []


def test_foreign_key_in_create_table(make_rule):
    advice = _check(
        TableNoForeignKeyAdvisor(),
        make_rule,
        "CREATE TABLE t (id INT PRIMARY KEY, user_id INT, FOREIGN KEY (user_id) REFERENCES users (id))",
    )

    assert len(advice) == 1
    assert advice[0].code == AdviceCode.TABLE_HAS_FK
    assert advice[0].content == "Foreign key is not allowed in the table `t`"


def test_table_without_foreign_key(make_rule):
    assert _check(TableNoForeignKeyAdvisor(), make_rule, "CREATE TABLE t (id INT PRIMARY KEY, user_id INT)") == []


def test_table_name_format(make_rule):
    payload = {"format": "^[a-z]+(_[a-z]+)*$", "maxLength": 64}

    advice = _check(NamingTableAdvisor(), make_rule, "CREATE TABLE UserInfo (id INT)", payload)

    assert len(advice) == 1
    assert advice[0].code == AdviceCode.NAMING_TABLE_CONVENTION
    assert advice[0].content == (
        '`UserInfo` mismatches table naming convention, naming format should be "^[a-z]+(_[a-z]+)*$"'
    )
    assert _check(NamingTableAdvisor(), make_rule, "CREATE TABLE user_info (id INT)", payload) == []


def test_table_name_length(make_rule):
    advice = _check(
        NamingTableAdvisor(), make_rule, "CREATE TABLE orders_archive (id INT)", {"format": "^[a-z_]+$", "maxLength": 5}
    )

    assert [a.content for a in advice] == [
        "`orders_archive` mismatches table naming convention, its length should be within 5 characters"
    ]


def test_table_name_length_defaults_to_mysql_limit(make_rule):
    name = "a" * 65

    advice = _check(NamingTableAdvisor(), make_rule, f"CREATE TABLE {name} (id INT)", {"format": "^[a-z]+$"})

    assert len(advice) == 1
    assert "within 64 characters" in advice[0].content


def test_invalid_naming_format(make_rule):
    with pytest.raises(ValueError, match="failed to compile regular expression"):
        _check(NamingTableAdvisor(), make_rule, "CREATE TABLE t (id INT)", {"format": "(["})
