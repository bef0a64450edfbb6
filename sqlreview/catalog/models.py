"""Schema metadata supplied by callers to describe an existing database."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ColumnMetadata(BaseModel):
    """Column of an existing table."""

    model_config = ConfigDict(extra="ignore")

    name: str
    type: str = ""
    nullable: bool = True
    default: Optional[str] = None
    comment: str = ""


class IndexMetadata(BaseModel):
    """Index of an existing table.

    Attributes:
        name: Index name, "PRIMARY" for the primary key.
        expressions: Indexed column names in key order.
        unique: Whether the index enforces uniqueness.
        primary: Whether this is the primary key.
        type: Index type such as BTREE or FULLTEXT.
    """

    model_config = ConfigDict(extra="ignore")

    name: str
    expressions: List[str] = Field(default_factory=list)
    unique: bool = False
    primary: bool = False
    type: str = "BTREE"


class TableMetadata(BaseModel):
    """Existing table with its approximate row count."""

    model_config = ConfigDict(extra="ignore")

    name: str
    row_count: int = 0
    columns: List[ColumnMetadata] = Field(default_factory=list)
    indexes: List[IndexMetadata] = Field(default_factory=list)
    engine: str = ""
    collation: str = ""
    comment: str = ""


class SchemaMetadata(BaseModel):
    """Schema of a database. MySQL databases hold a single unnamed schema."""

    model_config = ConfigDict(extra="ignore")

    name: str = ""
    tables: List[TableMetadata] = Field(default_factory=list)


class DatabaseSchemaMetadata(BaseModel):
    """Snapshot of the database the statements are going to run against.

    Example:
        >>> metadata = DatabaseSchemaMetadata(
        ...     name="shop",
        ...     schemas=[SchemaMetadata(tables=[TableMetadata(name="orders", row_count=10)])],
        ... )
    """

    model_config = ConfigDict(extra="ignore")

    name: str = ""
    character_set: str = ""
    collation: str = ""
    schemas: List[SchemaMetadata] = Field(default_factory=list)
