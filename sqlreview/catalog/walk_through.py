"""Simulation of schema changing statements against a DatabaseState."""

import logging
from enum import IntEnum
from typing import Iterable

from sqlglot import exp

from ..parser import Statement
from ..rules.node_types import NodeType, resolve
from ..sql_utils import (
    AlterAction,
    IndexDefinition,
    added_column_definitions,
    alter_table_items,
    alter_table_name,
    column_constraints,
    create_index_parts,
    create_table_target,
    database_name,
    drop_if_exists,
    drop_targets,
    index_definitions,
    node_name,
    raw_alter_items,
    rename_table_pairs,
    table_elements,
    unquote,
)
from .state import PRIMARY_KEY_NAME, ColumnState, DatabaseState, IndexState, TableState

logger = logging.getLogger(__name__)


class WalkThroughErrorType(IntEnum):
    """Reason a statement could not be applied to the simulated database."""

    UNSUPPORTED = 1
    INTERNAL = 2
    INVALID_STATEMENT = 3

    ACCESS_OTHER_DATABASE = 201
    DATABASE_IS_DELETED = 202

    TABLE_EXISTS = 301
    TABLE_NOT_EXISTS = 302
    USE_CREATE_TABLE_AS = 303

    COLUMN_EXISTS = 401
    COLUMN_NOT_EXISTS = 402
    DROP_ALL_COLUMNS = 403

    PRIMARY_KEY_EXISTS = 501
    INDEX_EXISTS = 502
    INDEX_EMPTY_KEYS = 503
    PRIMARY_KEY_NOT_EXISTS = 504
    INDEX_NOT_EXISTS = 505


class WalkThroughError(Exception):
    """Raised when a statement conflicts with the simulated database state."""

    def __init__(self, type: WalkThroughErrorType, content: str, line: int = 0) -> None:
        super().__init__(content)
        self.type = type
        self.content = content
        self.line = line

    def __str__(self) -> str:
        return f"[{int(self.type)}] {self.content}"


def walk_through(state: DatabaseState, statements: Iterable[Statement]) -> None:
    """
    Apply statements to a database state in order.

    Statements that do not change the schema are ignored.

    Args:
        state: State to mutate
        statements: Parsed statements

    Raises:
        WalkThroughError: On the first statement that cannot be applied;
            earlier statements stay applied
    """
    for statement in statements:
        try:
            _apply(state, statement.tree)
        except WalkThroughError as e:
            e.line = statement.base_line + 1
            raise


def _apply(state: DatabaseState, tree: exp.Expression) -> None:
    tag = resolve(tree)
    if tag in (NodeType.QUERY, NodeType.OTHER, NodeType.COMMAND):
        return
    if state.deleted and tag != NodeType.CREATE_DATABASE:
        raise WalkThroughError(WalkThroughErrorType.DATABASE_IS_DELETED, f"Database `{state.name}` is deleted")

    handler = _HANDLERS.get(tag)
    if handler is not None:
        handler(state, tree)


def _check_database(state: DatabaseState, name: str) -> None:
    if not state.is_current_database(name):
        raise WalkThroughError(
            WalkThroughErrorType.ACCESS_OTHER_DATABASE,
            f"Database `{name}` is not the current database `{state.name}`",
        )


def _find_table(state: DatabaseState, table: exp.Table) -> TableState:
    _check_database(state, table.text("db"))
    found = state.find_table(table.name)
    if found is None:
        raise WalkThroughError(WalkThroughErrorType.TABLE_NOT_EXISTS, f"Table `{table.name}` does not exist")
    return found


def _find_table_by_name(state: DatabaseState, name: str) -> TableState:
    found = state.find_table(name)
    if found is None:
        raise WalkThroughError(WalkThroughErrorType.TABLE_NOT_EXISTS, f"Table `{name}` does not exist")
    return found


def _create_database(state: DatabaseState, create: exp.Expression) -> None:
    _check_database(state, database_name(create.this))
    state.deleted = False


def _drop_database(state: DatabaseState, drop: exp.Expression) -> None:
    _check_database(state, database_name(drop.this))
    state.deleted = True


def _create_table(state: DatabaseState, create: exp.Expression) -> None:
    target = create_table_target(create)
    if target is None:
        return
    _check_database(state, target.text("db"))

    if state.find_table(target.name) is not None:
        if create.args.get("exists"):
            return
        raise WalkThroughError(WalkThroughErrorType.TABLE_EXISTS, f"Table `{target.name}` already exists")

    if create.expression is not None:
        raise WalkThroughError(
            WalkThroughErrorType.USE_CREATE_TABLE_AS,
            f"Disallow the CREATE TABLE AS statement but \"{create.sql(dialect='mysql')}\" uses",
        )

    like = create.find(exp.LikeProperty)
    if like is not None and isinstance(like.this, exp.Table):
        source = _find_table(state, like.this)
        state.add_table(source.copy(target.name))
        return

    table = TableState(target.name)
    state.add_table(table)
    for element in table_elements(create):
        if isinstance(element, exp.ColumnDef):
            _create_column(table, element)
        for definition in index_definitions(element):
            _create_index(table, definition)


def _create_column(table: TableState, column_def: exp.ColumnDef) -> None:
    if table.find_column(column_def.name) is not None:
        raise WalkThroughError(
            WalkThroughErrorType.COLUMN_EXISTS,
            f"Column `{column_def.name}` already exists in table `{table.name}`",
        )
    nullable = True
    for kind in column_constraints(column_def):
        if isinstance(kind, exp.NotNullColumnConstraint) and not kind.args.get("allow_null"):
            nullable = False
        if isinstance(kind, exp.PrimaryKeyColumnConstraint):
            nullable = False
    kind = column_def.args.get("kind")
    column_type = kind.sql(dialect="mysql") if isinstance(kind, exp.Expression) else ""
    table.columns[column_def.name.lower()] = ColumnState(column_def.name, column_type, nullable)


def _create_index(table: TableState, definition: IndexDefinition) -> None:
    if not definition.columns:
        raise WalkThroughError(
            WalkThroughErrorType.INDEX_EMPTY_KEYS,
            f"Index `{definition.name}` in table `{table.name}` has empty key",
        )
    if definition.primary:
        if table.find_index(PRIMARY_KEY_NAME) is not None:
            raise WalkThroughError(
                WalkThroughErrorType.PRIMARY_KEY_EXISTS, f"Primary key exists in table `{table.name}`"
            )
        for column_name in definition.columns:
            column = table.find_column(column_name)
            if column is not None:
                column.nullable = False
        table.add_index(IndexState(PRIMARY_KEY_NAME, definition.columns, unique=True, primary=True))
        return

    name = definition.name
    if not name:
        # MySQL names anonymous keys after their first column, with a numeric suffix on clashes
        name = definition.columns[0]
        suffix = 2
        while table.find_index(name) is not None:
            name = f"{definition.columns[0]}_{suffix}"
            suffix += 1
    elif table.find_index(name) is not None:
        raise WalkThroughError(
            WalkThroughErrorType.INDEX_EXISTS, f"Index `{name}` already exists in table `{table.name}`"
        )
    table.add_index(IndexState(name, definition.columns, definition.unique, False, definition.type))


def _drop_table(state: DatabaseState, drop: exp.Expression) -> None:
    for target in drop_targets(drop):
        _check_database(state, target.text("db"))
        if state.find_table(target.name) is None:
            if drop_if_exists(drop):
                continue
            raise WalkThroughError(WalkThroughErrorType.TABLE_NOT_EXISTS, f"Table `{target.name}` does not exist")
        state.remove_table(target.name)


def _rename_table(state: DatabaseState, old_name: str, new_name: str) -> None:
    table = _find_table_by_name(state, old_name)
    if state.find_table(new_name) is not None and new_name.lower() != old_name.lower():
        raise WalkThroughError(WalkThroughErrorType.TABLE_EXISTS, f"Table `{new_name}` already exists")
    state.remove_table(old_name)
    table.name = new_name
    state.add_table(table)


def _rename_tables(state: DatabaseState, command: exp.Expression) -> None:
    for old_name, new_name in rename_table_pairs(command):
        _rename_table(state, old_name, new_name)


def _alter_table(state: DatabaseState, alter: exp.Expression) -> None:
    if isinstance(alter, exp.Command):
        _alter_table_text(state, alter)
        return
    if not isinstance(alter.this, exp.Table):
        return
    table = _find_table(state, alter.this)

    for action, node in alter_table_items(alter):
        if action == AlterAction.ADD_COLUMN and isinstance(node, exp.ColumnDef):
            _create_column(table, node)
            for definition in index_definitions(node):
                _create_index(table, definition)
        elif action == AlterAction.DROP_COLUMN:
            _drop_column(table, node_name(node.this))
        elif action == AlterAction.DROP_INDEX:
            _drop_index(table, node_name(node.this))
        elif action == AlterAction.RENAME_COLUMN:
            _rename_column(table, node_name(node.this), node_name(node.args.get("to")))
        elif action == AlterAction.RENAME_TABLE:
            _rename_table(state, table.name, unquote(node_name(node.this)))
        elif action in (AlterAction.ADD_PRIMARY_KEY, AlterAction.ADD_UNIQUE_KEY, AlterAction.ADD_INDEX):
            for definition in index_definitions(node):
                _create_index(table, definition)
        elif action == AlterAction.MODIFY_COLUMN:
            column = table.find_column(node_name(node.this))
            if column is None:
                raise WalkThroughError(
                    WalkThroughErrorType.COLUMN_NOT_EXISTS,
                    f"Column `{node_name(node.this)}` does not exist in table `{table.name}`",
                )
            column.type = node.args["dtype"].sql(dialect="mysql")


def _alter_table_text(state: DatabaseState, alter: exp.Expression) -> None:
    table = _find_table_by_name(state, alter_table_name(alter))
    added = [added_column_definitions(item) for item in raw_alter_items(alter)]
    if not added or any(definitions is None for definitions in added):
        raise WalkThroughError(
            WalkThroughErrorType.UNSUPPORTED,
            f"Walk-through doesn't support the ALTER TABLE statement on `{table.name}`",
        )
    for definitions in added:
        for column_def in definitions:
            _create_column(table, column_def)
            for definition in index_definitions(column_def):
                _create_index(table, definition)


def _drop_column(table: TableState, column_name: str) -> None:
    if table.find_column(column_name) is None:
        raise WalkThroughError(
            WalkThroughErrorType.COLUMN_NOT_EXISTS,
            f"Column `{column_name}` does not exist in table `{table.name}`",
        )
    if len(table.columns) == 1:
        raise WalkThroughError(
            WalkThroughErrorType.DROP_ALL_COLUMNS,
            f"Can't delete all columns with ALTER TABLE; use DROP TABLE {table.name} instead",
        )
    del table.columns[column_name.lower()]

    for key, index in list(table.indexes.items()):
        index.expressions = [c for c in index.expressions if c.lower() != column_name.lower()]
        if not index.expressions:
            del table.indexes[key]


def _drop_index(table: TableState, index_name: str) -> None:
    if table.find_index(index_name) is None:
        if index_name.upper() == PRIMARY_KEY_NAME:
            raise WalkThroughError(
                WalkThroughErrorType.PRIMARY_KEY_NOT_EXISTS, f"Primary key does not exist in table `{table.name}`"
            )
        raise WalkThroughError(
            WalkThroughErrorType.INDEX_NOT_EXISTS, f"Index `{index_name}` does not exist in table `{table.name}`"
        )
    del table.indexes[index_name.lower()]


def _rename_column(table: TableState, old_name: str, new_name: str) -> None:
    column = table.find_column(old_name)
    if column is None:
        raise WalkThroughError(
            WalkThroughErrorType.COLUMN_NOT_EXISTS, f"Column `{old_name}` does not exist in table `{table.name}`"
        )
    if old_name.lower() != new_name.lower() and table.find_column(new_name) is not None:
        raise WalkThroughError(
            WalkThroughErrorType.COLUMN_EXISTS, f"Column `{new_name}` already exists in table `{table.name}`"
        )
    del table.columns[old_name.lower()]
    column.name = new_name
    table.columns[new_name.lower()] = column
    for index in table.indexes.values():
        index.expressions = [new_name if c.lower() == old_name.lower() else c for c in index.expressions]


def _create_index_statement(state: DatabaseState, create: exp.Expression) -> None:
    target, definition = create_index_parts(create)
    if target is None or definition is None:
        return
    _create_index(_find_table(state, target), definition)


def _drop_index_statement(state: DatabaseState, drop: exp.Expression) -> None:
    index_name = node_name(drop.this)
    cluster = drop.args.get("cluster")
    target = cluster.this if cluster is not None else None
    if isinstance(target, exp.Table):
        _drop_index(_find_table(state, target), index_name)
        return
    for table in state.tables.values():
        if table.find_index(index_name) is not None:
            _drop_index(table, index_name)
            return
    raise WalkThroughError(WalkThroughErrorType.INDEX_NOT_EXISTS, f"Index `{index_name}` does not exist")


_HANDLERS = {
    NodeType.CREATE_DATABASE: _create_database,
    NodeType.DROP_DATABASE: _drop_database,
    NodeType.CREATE_TABLE: _create_table,
    NodeType.DROP_TABLE: _drop_table,
    NodeType.RENAME_TABLE: _rename_tables,
    NodeType.ALTER_TABLE: _alter_table,
    NodeType.CREATE_INDEX: _create_index_statement,
    NodeType.DROP_INDEX: _drop_index_statement,
}
