"""Resolution of syntax tree nodes to grammar category tags."""

from enum import Enum
from typing import Dict

from sqlglot import exp

from ..parser import Statement


class NodeType(str, Enum):
    """Grammar category of a syntax tree node."""

    QUERY = "Query"

    # Data definition
    CREATE_DATABASE = "CreateDatabase"
    ALTER_DATABASE = "AlterDatabase"
    DROP_DATABASE = "DropDatabase"
    CREATE_TABLE = "CreateTable"
    ALTER_TABLE = "AlterTable"
    DROP_TABLE = "DropTable"
    RENAME_TABLE = "RenameTableStatement"
    TRUNCATE_TABLE = "TruncateTableStatement"
    CREATE_INDEX = "CreateIndex"
    DROP_INDEX = "DropIndex"
    CREATE_VIEW = "CreateView"
    DROP_VIEW = "DropView"
    CREATE_ROUTINE = "CreateRoutine"
    CREATE_OTHER = "CreateOther"
    DROP_OTHER = "DropOther"
    ALTER_OTHER = "AlterOther"

    # Table elements and alter actions
    COLUMN_DEF = "ColumnDefinition"
    DROP_COLUMN = "DropColumn"
    RENAME_COLUMN = "RenameColumn"
    ALTER_COLUMN = "AlterColumn"
    PRIMARY_KEY = "PrimaryKey"
    FOREIGN_KEY = "ForeignKey"

    # Data manipulation
    SELECT = "SelectStatement"
    UNION = "Union"
    INSERT = "InsertStatement"
    UPDATE = "UpdateStatement"
    DELETE = "DeleteStatement"
    WHERE = "WhereClause"
    JOIN = "Join"
    SUBQUERY = "Subquery"
    TABLE_REF = "TableRef"
    COLUMN_REF = "ColumnRef"
    STAR = "Star"

    # Expressions
    EXPR_OR = "ExprOr"
    EXPR_AND = "ExprAnd"
    PREDICATE_IN = "PredicateExprIn"
    PREDICATE_LIKE = "PredicateExprLike"

    # Transaction control
    BEGIN = "BeginWork"
    COMMIT = "Commit"
    ROLLBACK = "Rollback"

    # Anything the parser could only keep as raw text
    COMMAND = "Command"
    OTHER = "Other"


_CLASS_MAP: Dict[str, NodeType] = {
    "Select": NodeType.SELECT,
    "Union": NodeType.UNION,
    "Except": NodeType.UNION,
    "Intersect": NodeType.UNION,
    "Insert": NodeType.INSERT,
    "Update": NodeType.UPDATE,
    "Delete": NodeType.DELETE,
    "TruncateTable": NodeType.TRUNCATE_TABLE,
    "Where": NodeType.WHERE,
    "Join": NodeType.JOIN,
    "Subquery": NodeType.SUBQUERY,
    "Table": NodeType.TABLE_REF,
    "Column": NodeType.COLUMN_REF,
    "Star": NodeType.STAR,
    "Or": NodeType.EXPR_OR,
    "And": NodeType.EXPR_AND,
    "In": NodeType.PREDICATE_IN,
    "Like": NodeType.PREDICATE_LIKE,
    "ColumnDef": NodeType.COLUMN_DEF,
    "RenameColumn": NodeType.RENAME_COLUMN,
    "AlterColumn": NodeType.ALTER_COLUMN,
    "PrimaryKey": NodeType.PRIMARY_KEY,
    "ForeignKey": NodeType.FOREIGN_KEY,
    "Transaction": NodeType.BEGIN,
    "Commit": NodeType.COMMIT,
    "Rollback": NodeType.ROLLBACK,
}

_CREATE_KINDS: Dict[str, NodeType] = {
    "TABLE": NodeType.CREATE_TABLE,
    "INDEX": NodeType.CREATE_INDEX,
    "VIEW": NodeType.CREATE_VIEW,
    "DATABASE": NodeType.CREATE_DATABASE,
    "SCHEMA": NodeType.CREATE_DATABASE,
    "FUNCTION": NodeType.CREATE_ROUTINE,
    "PROCEDURE": NodeType.CREATE_ROUTINE,
}

_DROP_KINDS: Dict[str, NodeType] = {
    "TABLE": NodeType.DROP_TABLE,
    "INDEX": NodeType.DROP_INDEX,
    "VIEW": NodeType.DROP_VIEW,
    "DATABASE": NodeType.DROP_DATABASE,
    "SCHEMA": NodeType.DROP_DATABASE,
    "COLUMN": NodeType.DROP_COLUMN,
}

# Statements sqlglot keeps as exp.Command, keyed by their leading keywords
_COMMAND_PREFIXES = (
    (("RENAME", "TABLE"), NodeType.RENAME_TABLE),
    (("ALTER", "DATABASE"), NodeType.ALTER_DATABASE),
    (("ALTER", "SCHEMA"), NodeType.ALTER_DATABASE),
    (("ALTER", "TABLE"), NodeType.ALTER_TABLE),
    (("DROP", "TABLE"), NodeType.DROP_TABLE),
    (("DROP", "TEMPORARY", "TABLE"), NodeType.DROP_TABLE),
    (("CREATE", "INDEX"), NodeType.CREATE_INDEX),
    (("CREATE", "UNIQUE", "INDEX"), NodeType.CREATE_INDEX),
    (("CREATE", "FULLTEXT", "INDEX"), NodeType.CREATE_INDEX),
    (("CREATE", "SPATIAL", "INDEX"), NodeType.CREATE_INDEX),
    (("TRUNCATE",), NodeType.TRUNCATE_TABLE),
    (("COMMIT",), NodeType.COMMIT),
    (("BEGIN",), NodeType.BEGIN),
    (("START", "TRANSACTION"), NodeType.BEGIN),
)


def resolve(node) -> NodeType:
    """
    Return the grammar category tag of a node.

    The result depends only on the node's class and statement kind, never on
    names or positions, so equivalent productions always share a tag.

    Args:
        node: A Statement or a sqlglot expression

    Returns:
        NodeType of the node, NodeType.OTHER when it has no dedicated tag
    """
    if isinstance(node, Statement):
        return NodeType.QUERY
    if not isinstance(node, exp.Expression):
        return NodeType.OTHER

    cls_name = type(node).__name__
    tag = _CLASS_MAP.get(cls_name)
    if tag is not None:
        return tag

    kind = node.args.get("kind")
    kind = kind.upper() if isinstance(kind, str) else ""
    if cls_name == "Create":
        return _CREATE_KINDS.get(kind, NodeType.CREATE_OTHER)
    if cls_name == "Drop":
        return _DROP_KINDS.get(kind, NodeType.DROP_OTHER)
    if cls_name in ("Alter", "AlterTable"):
        if cls_name == "AlterTable" or kind in ("", "TABLE"):
            return NodeType.ALTER_TABLE
        return NodeType.ALTER_OTHER
    if cls_name == "Command":
        return _resolve_command(node)
    return NodeType.OTHER


def command_words(node: exp.Expression) -> list[str]:
    """Return the upper-cased words of a raw command node."""
    head = str(node.this or "")
    tail = node.expression
    tail_text = tail.name if isinstance(tail, exp.Expression) else str(tail or "")
    return f"{head} {tail_text}".upper().split()


def _resolve_command(node: exp.Expression) -> NodeType:
    words = command_words(node)
    for prefix, tag in _COMMAND_PREFIXES:
        if tuple(words[: len(prefix)]) == prefix:
            return tag
    return NodeType.COMMAND


_DDL_TAGS = frozenset(
    {
        NodeType.CREATE_DATABASE,
        NodeType.ALTER_DATABASE,
        NodeType.DROP_DATABASE,
        NodeType.CREATE_TABLE,
        NodeType.ALTER_TABLE,
        NodeType.DROP_TABLE,
        NodeType.RENAME_TABLE,
        NodeType.TRUNCATE_TABLE,
        NodeType.CREATE_INDEX,
        NodeType.DROP_INDEX,
        NodeType.CREATE_VIEW,
        NodeType.DROP_VIEW,
        NodeType.CREATE_ROUTINE,
        NodeType.CREATE_OTHER,
        NodeType.DROP_OTHER,
        NodeType.ALTER_OTHER,
    }
)

_DML_TAGS = frozenset({NodeType.INSERT, NodeType.UPDATE, NodeType.DELETE})


def is_ddl(tag: NodeType) -> bool:
    """Whether a statement tag is a schema change."""
    return tag in _DDL_TAGS


def is_dml(tag: NodeType) -> bool:
    """Whether a statement tag is a data change."""
    return tag in _DML_TAGS
