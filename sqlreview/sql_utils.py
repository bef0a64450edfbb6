"""Helpers for reading names, keys and actions out of syntax trees.

sqlglot keeps statements it cannot fully parse as raw text (exp.Command).
Where rules need to understand such statements, the helpers here fall back
to reading the raw text with regular expressions.
"""

import re
from enum import Enum
from typing import Iterator, List, NamedTuple, Optional, Tuple

import sqlglot
from sqlglot import exp
from sqlglot.errors import ErrorLevel, ParseError

from .parser import DIALECT

# Class names of the rename-table alter action differ between sqlglot releases
_RENAME_TABLE_CLASSES: Tuple[type, ...] = tuple(
    getattr(exp, name) for name in ("AlterRename", "RenameTable") if hasattr(exp, name)
)

_QUOTED_NAME = r"[`\"]?([\w$]+(?:[`\"]?\.[`\"]?[\w$]+)?)[`\"]?"

_ALTER_TABLE_TEXT_RE = re.compile(r"^\s*TABLE\s+" + _QUOTED_NAME + r"\s*(.*)$", re.IGNORECASE | re.DOTALL)
_RENAME_PAIR_RE = re.compile(_QUOTED_NAME + r"\s+TO\s+" + _QUOTED_NAME, re.IGNORECASE)
_CHARSET_TEXT_RE = re.compile(r"\b(?:CHARACTER\s+SET|CHARSET)\s*=?\s*[`'\"]?(\w+)", re.IGNORECASE)
_DROP_TABLE_TEXT_RE = re.compile(
    r"^\s*(?:TEMPORARY\s+)?TABLE\s+(IF\s+EXISTS\s+)?(.*?)\s*(?:\b(?:RESTRICT|CASCADE))?\s*$",
    re.IGNORECASE | re.DOTALL,
)
_CREATE_INDEX_TEXT_RE = re.compile(
    r"^\s*(?:(UNIQUE|FULLTEXT|SPATIAL)\s+)?INDEX\s+"
    + _QUOTED_NAME
    + r"\s+(?:USING\s+\w+\s+)?ON\s+"
    + _QUOTED_NAME
    + r"\s*\(",
    re.IGNORECASE,
)
_ADD_COLUMNS_TEXT_RE = re.compile(r"^ADD\s+(?:COLUMN\s+)?\((.*)\)$", re.IGNORECASE | re.DOTALL)
_KEY_PART_RE = re.compile(r"^[`\"]?([\w$]+)")

_CONSTRAINT_PREFIX = r"^ADD\s+(?:CONSTRAINT(?:\s+[`\w]+)?\s+)?"


class AlterAction(str, Enum):
    """Kind of one item of an ALTER TABLE statement."""

    ADD_COLUMN = "add_column"
    DROP_COLUMN = "drop_column"
    RENAME_COLUMN = "rename_column"
    MODIFY_COLUMN = "modify_column"
    RENAME_TABLE = "rename_table"
    ADD_PRIMARY_KEY = "add_primary_key"
    ADD_UNIQUE_KEY = "add_unique_key"
    ADD_FOREIGN_KEY = "add_foreign_key"
    ADD_INDEX = "add_index"
    ADD_CHECK = "add_check"
    ALTER_CHECK = "alter_check"
    DROP_INDEX = "drop_index"
    DROP_PRIMARY_KEY = "drop_primary_key"
    OTHER = "other"


_TEXT_ACTIONS = (
    (re.compile(r"^RENAME\s+COLUMN\b", re.IGNORECASE), AlterAction.RENAME_COLUMN),
    (re.compile(r"^RENAME\s+(?:INDEX|KEY)\b", re.IGNORECASE), AlterAction.OTHER),
    (re.compile(r"^RENAME\b", re.IGNORECASE), AlterAction.RENAME_TABLE),
    (re.compile(r"^DROP\s+PRIMARY\s+KEY\b", re.IGNORECASE), AlterAction.DROP_PRIMARY_KEY),
    (re.compile(r"^DROP\s+(?:INDEX|KEY)\b", re.IGNORECASE), AlterAction.DROP_INDEX),
    (re.compile(r"^DROP\s+(?:FOREIGN\s+KEY|CHECK|CONSTRAINT|PARTITION)\b", re.IGNORECASE), AlterAction.OTHER),
    (re.compile(r"^DROP\b", re.IGNORECASE), AlterAction.DROP_COLUMN),
    (re.compile(_CONSTRAINT_PREFIX + r"PRIMARY\s+KEY\b", re.IGNORECASE), AlterAction.ADD_PRIMARY_KEY),
    (re.compile(_CONSTRAINT_PREFIX + r"UNIQUE\b", re.IGNORECASE), AlterAction.ADD_UNIQUE_KEY),
    (re.compile(_CONSTRAINT_PREFIX + r"FOREIGN\s+KEY\b", re.IGNORECASE), AlterAction.ADD_FOREIGN_KEY),
    (re.compile(_CONSTRAINT_PREFIX + r"CHECK\b.*\bENFORCED\s*$", re.IGNORECASE | re.DOTALL), AlterAction.ADD_CHECK),
    (re.compile(_CONSTRAINT_PREFIX + r"CHECK\b", re.IGNORECASE), AlterAction.OTHER),
    (re.compile(r"^ADD\s+(?:INDEX|KEY|FULLTEXT|SPATIAL)\b", re.IGNORECASE), AlterAction.ADD_INDEX),
    (re.compile(r"^ADD\b", re.IGNORECASE), AlterAction.ADD_COLUMN),
    (re.compile(r"^ALTER\s+(?:CHECK|CONSTRAINT)\s+[`\w]+\s+(?:NOT\s+)?ENFORCED\b", re.IGNORECASE), AlterAction.ALTER_CHECK),
    (re.compile(r"^(?:MODIFY|CHANGE)\b", re.IGNORECASE), AlterAction.MODIFY_COLUMN),
)


class IndexDefinition(NamedTuple):
    """Key declared by a table element or an alter action."""

    name: str
    columns: List[str]
    unique: bool = False
    primary: bool = False
    type: str = "BTREE"


def unquote(name: str) -> str:
    """Strip MySQL identifier quotes and any database qualifier."""
    name = name.strip().strip("`\"")
    if "." in name:
        name = name.rsplit(".", 1)[1].strip("`\"")
    return name


def node_name(node) -> str:
    """Return the plain name of an identifier-like node, "" for None."""
    if node is None:
        return ""
    if isinstance(node, str):
        return node
    if isinstance(node, exp.Ordered):
        return node_name(node.this)
    return node.name


def database_name(node) -> str:
    """Database named by a CREATE/DROP DATABASE target."""
    if isinstance(node, exp.Table):
        return node.name or node.text("db")
    return node_name(node)


def create_table_target(create: exp.Expression) -> Optional[exp.Table]:
    """Table created by a CREATE TABLE statement."""
    target = create.this
    if isinstance(target, exp.Schema):
        target = target.this
    return target if isinstance(target, exp.Table) else None


def table_elements(create: exp.Expression) -> List[exp.Expression]:
    """Column and key definitions of a CREATE TABLE statement."""
    if isinstance(create.this, exp.Schema):
        return list(create.this.expressions)
    return []


def drop_targets(drop: exp.Expression) -> List[exp.Table]:
    """Tables named by a DROP TABLE statement, parsed or raw."""
    if isinstance(drop, exp.Command):
        match = _DROP_TABLE_TEXT_RE.match(command_tail(drop))
        if not match:
            return []
        return [table_from_text(name) for name in split_top_level(match.group(2))]
    targets = [drop.this] + list(drop.expressions)
    return [t for t in targets if isinstance(t, exp.Table)]


def drop_if_exists(drop: exp.Expression) -> bool:
    """Whether a DROP TABLE statement carries IF EXISTS."""
    if isinstance(drop, exp.Command):
        match = _DROP_TABLE_TEXT_RE.match(command_tail(drop))
        return bool(match and match.group(1))
    return bool(drop.args.get("exists"))


def table_from_text(name: str) -> exp.Table:
    """Build a table reference from a possibly quoted and qualified name."""
    parts = [part.strip().strip("`\"") for part in name.strip().split(".")]
    return exp.table_(parts[-1], db=parts[-2] if len(parts) > 1 else None)


def truncate_targets(node: exp.Expression) -> List[str]:
    """Table names of a TRUNCATE statement, parsed or raw."""
    if isinstance(node, exp.Command):
        words = command_text(node).split()
        names = [w for w in words[1:] if w.upper() != "TABLE"]
        return [unquote(names[0])] if names else []
    return [t.name for t in node.expressions if isinstance(t, exp.Table)]


def command_text(node: exp.Expression) -> str:
    """Full text of a statement the parser kept as a raw command."""
    tail = node.expression
    tail_text = tail.name if isinstance(tail, exp.Expression) else str(tail or "")
    return f"{node.this}{tail_text}" if tail_text[:1].isspace() else f"{node.this} {tail_text}"


def command_tail(node: exp.Expression) -> str:
    """Text of a raw command after its leading keyword."""
    tail = node.expression
    return tail.name if isinstance(tail, exp.Expression) else str(tail or "")


def alter_table_name(alter: exp.Expression) -> str:
    """Name of the table an ALTER TABLE statement changes."""
    if isinstance(alter, exp.Command):
        match = _ALTER_TABLE_TEXT_RE.match(command_tail(alter))
        return unquote(match.group(1)) if match else ""
    return alter.this.name if isinstance(alter.this, exp.Table) else ""


def rename_table_pairs(node: exp.Expression) -> List[Tuple[str, str]]:
    """(old, new) table name pairs of a RENAME TABLE statement."""
    tail = command_tail(node)
    tail = re.sub(r"^\s*TABLE\s+", "", tail, flags=re.IGNORECASE)
    return [(unquote(old), unquote(new)) for old, new in _RENAME_PAIR_RE.findall(tail)]


def split_top_level(text: str) -> List[str]:
    """Split a comma separated list, ignoring commas inside parentheses and quotes."""
    items, depth, quote, start = [], 0, "", 0
    for i, ch in enumerate(text):
        if quote:
            if ch == quote:
                quote = ""
        elif ch in "'\"`":
            quote = ch
        elif ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        elif ch == "," and depth == 0:
            items.append(text[start:i].strip())
            start = i + 1
    items.append(text[start:].strip())
    return [item for item in items if item]


def classify_alter_text(item: str) -> AlterAction:
    """Classify one raw ALTER TABLE item."""
    item = item.strip()
    for pattern, action in _TEXT_ACTIONS:
        if pattern.search(item):
            return action
    return AlterAction.OTHER


def classify_alter_action(action: exp.Expression) -> AlterAction:
    """Classify one parsed ALTER TABLE action."""
    if isinstance(action, exp.ColumnDef):
        return AlterAction.ADD_COLUMN
    if isinstance(action, exp.RenameColumn):
        return AlterAction.RENAME_COLUMN
    if _RENAME_TABLE_CLASSES and isinstance(action, _RENAME_TABLE_CLASSES):
        return AlterAction.RENAME_TABLE
    if isinstance(action, exp.Drop):
        kind = (action.args.get("kind") or "COLUMN").upper()
        if kind == "COLUMN":
            return AlterAction.DROP_COLUMN
        if kind in ("INDEX", "KEY"):
            return AlterAction.DROP_INDEX
        if kind in ("PRIMARY KEY", "PRIMARY"):
            return AlterAction.DROP_PRIMARY_KEY
        return AlterAction.OTHER
    if isinstance(action, exp.AlterColumn):
        return AlterAction.MODIFY_COLUMN if action.args.get("dtype") else AlterAction.OTHER
    if isinstance(action, exp.Command):
        return classify_alter_text(command_text(action))

    for sub in action.walk(bfs=False):
        if isinstance(sub, (exp.PrimaryKey, exp.PrimaryKeyColumnConstraint)):
            return AlterAction.ADD_PRIMARY_KEY
        if isinstance(sub, exp.UniqueColumnConstraint):
            return AlterAction.ADD_UNIQUE_KEY
        if isinstance(sub, exp.ForeignKey):
            return AlterAction.ADD_FOREIGN_KEY
        if isinstance(sub, exp.IndexColumnConstraint):
            return AlterAction.ADD_INDEX
        if isinstance(sub, exp.CheckColumnConstraint):
            return AlterAction.ADD_CHECK if sub.args.get("enforced") else AlterAction.OTHER
    return AlterAction.OTHER


def alter_table_items(alter: exp.Expression) -> List[Tuple[AlterAction, Optional[exp.Expression]]]:
    """
    Classified items of an ALTER TABLE statement, in source order.

    Args:
        alter: Parsed ALTER TABLE or raw ALTER TABLE command

    Returns:
        (action, node) pairs; node is None for items read from raw text
    """
    if isinstance(alter, exp.Command):
        return [(classify_alter_text(item), None) for item in raw_alter_items(alter)]
    return [(classify_alter_action(action), action) for action in alter.args.get("actions") or []]


def raw_alter_items(alter: exp.Expression) -> List[str]:
    """Item texts of an ALTER TABLE statement kept as a raw command."""
    match = _ALTER_TABLE_TEXT_RE.match(command_tail(alter))
    return split_top_level(match.group(2)) if match else []


def added_column_definitions(item: str) -> Optional[List[exp.ColumnDef]]:
    """
    Column definitions of a raw ``ADD [COLUMN] (...)`` alter item.

    The parenthesized list has the shape of a CREATE TABLE element list and
    is parsed as one.

    Returns:
        Column definitions in source order, None when the item is not a
        column list or the list does not parse
    """
    match = _ADD_COLUMNS_TEXT_RE.match(item.strip())
    if not match:
        return None
    try:
        create = sqlglot.parse_one(f"CREATE TABLE t ({match.group(1)})", read=DIALECT, error_level=ErrorLevel.RAISE)
    except ParseError:
        return None
    return [element for element in table_elements(create) if isinstance(element, exp.ColumnDef)]



def charsets_in(node: exp.Expression) -> List[str]:
    """Lower-cased charset names declared anywhere in a statement, in source order."""
    if isinstance(node, exp.Command):
        return [name.lower() for name in _CHARSET_TEXT_RE.findall(command_text(node))]
    names = []
    for sub in node.walk(bfs=False):
        if isinstance(sub, (exp.CharacterSetColumnConstraint, exp.CharacterSetProperty)):
            names.append(unquote(node_name(sub.this)).lower())
    return names


def column_constraints(column_def: exp.Expression) -> Iterator[exp.Expression]:
    """Constraint kinds attached to a column definition."""
    for constraint in column_def.args.get("constraints") or []:
        kind = constraint.args.get("kind") if isinstance(constraint, exp.ColumnConstraint) else constraint
        if kind is not None:
            yield kind


def key_columns(nodes) -> List[str]:
    """Column names of a key part list."""
    names = []
    for node in nodes or []:
        if isinstance(node, exp.Ordered):
            node = node.this
        if isinstance(node, exp.Expression):
            names.append(node.name)
    return names


def index_definitions(element: exp.Expression, name: str = "") -> List[IndexDefinition]:
    """
    Keys declared by a CREATE TABLE element or an ALTER TABLE action.

    Args:
        element: Column definition, key definition or constraint wrapper
        name: Constraint name given by an enclosing CONSTRAINT clause

    Returns:
        Index definitions in declaration order; foreign keys are not included
    """
    if isinstance(element, exp.ColumnDef):
        definitions = []
        for kind in column_constraints(element):
            if isinstance(kind, exp.PrimaryKeyColumnConstraint):
                definitions.append(IndexDefinition("PRIMARY", [element.name], unique=True, primary=True))
            elif isinstance(kind, exp.UniqueColumnConstraint):
                definitions.append(IndexDefinition("", [element.name], unique=True))
        return definitions
    if isinstance(element, exp.PrimaryKey):
        return [IndexDefinition("PRIMARY", key_columns(element.expressions), unique=True, primary=True)]
    if isinstance(element, exp.UniqueColumnConstraint):
        target = element.this
        if isinstance(target, exp.Schema):
            return [IndexDefinition(node_name(target.this) or name, key_columns(target.expressions), unique=True)]
        return [IndexDefinition(node_name(target) or name, key_columns(element.expressions), unique=True)]
    if isinstance(element, exp.IndexColumnConstraint):
        kind = element.args.get("kind")
        index_type = kind.upper() if isinstance(kind, str) and kind else "BTREE"
        return [IndexDefinition(node_name(element.this) or name, key_columns(element.expressions), type=index_type)]
    if isinstance(element, exp.Constraint):
        definitions = []
        for inner in element.expressions:
            definitions.extend(index_definitions(inner, node_name(element.this)))
        return definitions
    if type(element).__name__ == "AddConstraint":
        definitions = []
        for inner in element.expressions:
            definitions.extend(index_definitions(inner, name))
        return definitions
    return []


def _parenthesized(text: str, start: int) -> str:
    """Text inside the parentheses opening at text[start]."""
    depth = 0
    for i in range(start, len(text)):
        if text[i] == "(":
            depth += 1
        elif text[i] == ")":
            depth -= 1
            if depth == 0:
                return text[start + 1 : i]
    return text[start + 1 :]


def create_index_parts(create: exp.Expression) -> Tuple[Optional[exp.Table], Optional[IndexDefinition]]:
    """
    Target table and key of a CREATE INDEX statement, parsed or raw.

    Args:
        create: Parsed CREATE INDEX or raw CREATE ... INDEX command

    Returns:
        (table, definition); both None when the statement cannot be read
    """
    if isinstance(create, exp.Command):
        tail = command_tail(create)
        match = _CREATE_INDEX_TEXT_RE.match(tail)
        if not match:
            return None, None
        modifier = (match.group(1) or "").upper()
        columns = []
        for part in split_top_level(_parenthesized(tail, match.end() - 1)):
            key = _KEY_PART_RE.match(part)
            if key:
                columns.append(key.group(1))
        definition = IndexDefinition(
            unquote(match.group(2)),
            columns,
            unique=modifier == "UNIQUE",
            type=modifier if modifier in ("FULLTEXT", "SPATIAL") else "BTREE",
        )
        return table_from_text(match.group(3)), definition

    index = create.this
    if not isinstance(index, exp.Index):
        return None, None
    target = index.args.get("table")
    params = index.args.get("params")
    columns = key_columns(params.args.get("columns")) if params is not None else []
    if not columns:
        columns = key_columns(index.expressions)
    unique = bool(create.args.get("unique") or index.args.get("unique"))
    definition = IndexDefinition(index.name, columns, unique=unique)
    return (target if isinstance(target, exp.Table) else None), definition
