"""Shared fixtures for sqlreview tests."""

import pytest

from sqlreview.catalog import (
    Catalog,
    ColumnMetadata,
    DatabaseSchemaMetadata,
    IndexMetadata,
    SchemaMetadata,
    TableMetadata,
)
from sqlreview.base import CheckContext
from sqlreview.models import ReviewRule, RuleLevel


@pytest.fixture
def make_rule():
    """Factory for configured rules."""

    def _make(rule_type: str, payload=None, level: RuleLevel = RuleLevel.WARNING) -> ReviewRule:
        return ReviewRule(type=rule_type, level=level, payload=payload)

    return _make


@pytest.fixture
def shop_metadata():
    """Database `shop` with a large `orders` table and a small `users` table."""
    return DatabaseSchemaMetadata(
        name="shop",
        schemas=[
            SchemaMetadata(
                tables=[
                    TableMetadata(
                        name="orders",
                        row_count=2000000,
                        columns=[
                            ColumnMetadata(name="id", type="int", nullable=False),
                            ColumnMetadata(name="user_id", type="int"),
                            ColumnMetadata(name="status", type="varchar(16)"),
                        ],
                        indexes=[
                            IndexMetadata(name="PRIMARY", expressions=["id"], unique=True, primary=True),
                            IndexMetadata(name="idx_user", expressions=["user_id"]),
                        ],
                    ),
                    TableMetadata(
                        name="users",
                        row_count=10,
                        columns=[
                            ColumnMetadata(name="id", type="int", nullable=False),
                            ColumnMetadata(name="email", type="varchar(255)"),
                        ],
                        indexes=[IndexMetadata(name="PRIMARY", expressions=["id"], unique=True, primary=True)],
                    ),
                ]
            )
        ],
    )


@pytest.fixture
def catalog(shop_metadata):
    """Fresh catalog over the shop database."""
    return Catalog(shop_metadata)


@pytest.fixture
def context(catalog):
    """Check context backed by the shop catalog."""
    return CheckContext(catalog=catalog)
