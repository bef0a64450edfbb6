"""Mutable database state used to follow schema changes statement by statement."""

import logging
from typing import Dict, List, Optional

from .models import DatabaseSchemaMetadata, IndexMetadata, TableMetadata

logger = logging.getLogger(__name__)

PRIMARY_KEY_NAME = "PRIMARY"


class ColumnState:
    """Column of a table in the simulated database."""

    def __init__(self, name: str, type: str = "", nullable: bool = True) -> None:
        self.name = name
        self.type = type
        self.nullable = nullable

    def __repr__(self) -> str:
        return f"ColumnState(name={self.name!r}, type={self.type!r})"


class IndexState:
    """Index of a table in the simulated database."""

    def __init__(
        self,
        name: str,
        expressions: Optional[List[str]] = None,
        unique: bool = False,
        primary: bool = False,
        type: str = "BTREE",
    ) -> None:
        self.name = name
        self.expressions = list(expressions or [])
        self.unique = unique
        self.primary = primary
        self.type = type

    def __repr__(self) -> str:
        return f"IndexState(name={self.name!r}, expressions={self.expressions!r})"


class TableState:
    """Table of the simulated database.

    Attributes:
        name: Table name.
        row_count: Approximate number of rows reported by the metadata.
        columns: Columns in definition order, keyed by lower-cased name.
        indexes: Indexes keyed by lower-cased name.
    """

    def __init__(self, name: str, row_count: int = 0) -> None:
        self.name = name
        self.row_count = row_count
        self.columns: Dict[str, ColumnState] = {}
        self.indexes: Dict[str, IndexState] = {}

    @classmethod
    def from_metadata(cls, metadata: TableMetadata) -> "TableState":
        table = cls(metadata.name, metadata.row_count)
        for column in metadata.columns:
            table.columns[column.name.lower()] = ColumnState(column.name, column.type, column.nullable)
        for index in metadata.indexes:
            table.add_index(_index_state(index))
        return table

    def copy(self, name: str) -> "TableState":
        """Return a structural copy of this table under a new name, without rows."""
        table = TableState(name)
        for key, column in self.columns.items():
            table.columns[key] = ColumnState(column.name, column.type, column.nullable)
        for key, index in self.indexes.items():
            table.indexes[key] = IndexState(index.name, index.expressions, index.unique, index.primary, index.type)
        return table

    def find_column(self, name: str) -> Optional[ColumnState]:
        return self.columns.get(name.lower())

    def find_index(self, name: str) -> Optional[IndexState]:
        return self.indexes.get(name.lower())

    def add_index(self, index: IndexState) -> None:
        self.indexes[index.name.lower()] = index

    def count_index(self) -> int:
        """Number of indexes on the table, the primary key included."""
        return len(self.indexes)

    def __repr__(self) -> str:
        return f"TableState(name={self.name!r}, columns={len(self.columns)}, indexes={len(self.indexes)})"


def _index_state(index: IndexMetadata) -> IndexState:
    return IndexState(index.name, index.expressions, index.unique, index.primary, index.type)


class DatabaseState:
    """Simulated state of one MySQL database.

    Table names are matched case-insensitively.
    """

    def __init__(self, metadata: Optional[DatabaseSchemaMetadata] = None) -> None:
        metadata = metadata or DatabaseSchemaMetadata()
        self.name = metadata.name
        self.deleted = False
        self.tables: Dict[str, TableState] = {}
        for schema in metadata.schemas:
            for table in schema.tables:
                self.tables[table.name.lower()] = TableState.from_metadata(table)

    def database_name(self) -> str:
        return self.name

    def find_table(self, name: str) -> Optional[TableState]:
        """Return the table with the given name, None if it does not exist."""
        return self.tables.get(name.lower())

    def has_no_table(self) -> bool:
        return not self.tables

    def table_names(self) -> List[str]:
        return [table.name for table in self.tables.values()]

    def add_table(self, table: TableState) -> None:
        self.tables[table.name.lower()] = table

    def remove_table(self, name: str) -> Optional[TableState]:
        return self.tables.pop(name.lower(), None)

    def is_current_database(self, name: str) -> bool:
        """Whether a database qualifier refers to this database; empty means current."""
        return not name or name.lower() == self.name.lower()


class Finder:
    """Pair of database states: as supplied (origin) and after the checked statements (final).

    Example:
        >>> finder = Finder(metadata)
        >>> finder.walk_through(statements)
        >>> finder.final.find_table("orders").count_index()
        3
    """

    def __init__(self, metadata: Optional[DatabaseSchemaMetadata] = None) -> None:
        self.origin = DatabaseState(metadata)
        self.final = DatabaseState(metadata)

    def walk_through(self, statements) -> None:
        """
        Apply statements to the final state.

        Raises:
            WalkThroughError: If a statement cannot be applied
        """
        from .walk_through import walk_through

        walk_through(self.final, statements)


class Catalog:
    """Schema catalog handed to rules through the check context."""

    def __init__(self, metadata: Optional[DatabaseSchemaMetadata] = None) -> None:
        self.metadata = metadata or DatabaseSchemaMetadata()
        self._finder = Finder(self.metadata)

    def get_finder(self) -> Finder:
        return self._finder
