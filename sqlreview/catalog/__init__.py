"""Schema catalog: metadata snapshots and their simulated evolution."""

from .models import ColumnMetadata, DatabaseSchemaMetadata, IndexMetadata, SchemaMetadata, TableMetadata
from .state import PRIMARY_KEY_NAME, Catalog, ColumnState, DatabaseState, Finder, IndexState, TableState
from .walk_through import WalkThroughError, WalkThroughErrorType, walk_through

__all__ = [
    "ColumnMetadata",
    "IndexMetadata",
    "TableMetadata",
    "SchemaMetadata",
    "DatabaseSchemaMetadata",
    "PRIMARY_KEY_NAME",
    "ColumnState",
    "IndexState",
    "TableState",
    "DatabaseState",
    "Finder",
    "Catalog",
    "WalkThroughError",
    "WalkThroughErrorType",
    "walk_through",
]
