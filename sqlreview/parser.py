"""Parsing of MySQL text into statements for review.

The input is split on statement delimiters with the dialect tokenizer so
that every statement keeps the line it started on, then each piece is
parsed on its own. A few valid DDL forms the parser rejects are kept as raw
commands instead of being reported as syntax errors.
"""

import logging
import re
from typing import List, Optional, Tuple

import sqlglot
from pydantic import BaseModel, ConfigDict
from sqlglot import exp
from sqlglot.dialects.dialect import Dialect
from sqlglot.errors import ErrorLevel, ParseError, TokenError
from sqlglot.tokens import Token, TokenType

from .models import SYNTAX_ERROR_TITLE, Advice, AdviceCode, AdviceStatus, convert_line_to_position

logger = logging.getLogger(__name__)

DIALECT = "mysql"

# Characters of context kept in syntax error messages
RELATED_TEXT_LENGTH = 40

_NAME = r"[`\"]?[\w$]+[`\"]?(?:\.[`\"]?[\w$]+[`\"]?)?"

# Valid MySQL DDL the parser rejects. These are kept as raw commands and read
# from their text by the rules.
_RAW_DDL_PATTERNS = (
    re.compile(
        r"^DROP\s+(?:TEMPORARY\s+)?TABLE\s+(?:IF\s+EXISTS\s+)?"
        + _NAME
        + r"(?:\s*,\s*"
        + _NAME
        + r")+\s*(?:RESTRICT|CASCADE)?\s*$",
        re.IGNORECASE,
    ),
    re.compile(r"^ALTER\s+TABLE\s+" + _NAME + r"\s.*\bADD\s+(?:COLUMN\s+)?\(", re.IGNORECASE | re.DOTALL),
    re.compile(
        r"^CREATE\s+(?:(?:UNIQUE|FULLTEXT|SPATIAL)\s+)?INDEX\s+" + _NAME + r"\s+(?:USING\s+\w+\s+)?ON\s",
        re.IGNORECASE,
    ),
)


class Statement(BaseModel):
    """One parsed SQL statement.

    Attributes:
        tree: Syntax tree of the statement.
        base_line: Offset added to in-tree lines to get the absolute line.
        text: Statement source without the trailing delimiter.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    tree: exp.Expression
    base_line: int
    text: str


class SQLSyntaxError(Exception):
    """Raised when the input cannot be tokenized or parsed."""

    def __init__(self, message: str, line: Optional[int] = None, column: int = 0, internal: bool = False):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column
        self.internal = internal

    def to_advice(self) -> Advice:
        """Convert the error into the single advice reported for the input."""
        if self.internal:
            return Advice(
                status=AdviceStatus.ERROR,
                code=AdviceCode.INTERNAL,
                title="Parse error",
                content=self.message,
            )
        position = None
        if self.line is not None:
            position = convert_line_to_position(self.line)
        return Advice(
            status=AdviceStatus.ERROR,
            code=AdviceCode.STATEMENT_SYNTAX_ERROR,
            title=SYNTAX_ERROR_TITLE,
            content=self.message,
            start_position=position,
        )


def split_statements(sql: str) -> List[Tuple[str, int]]:
    """
    Split SQL text into statement texts with their base lines.

    Args:
        sql: Raw SQL, possibly holding several statements

    Returns:
        List of (text, base_line) pairs in input order

    Raises:
        SQLSyntaxError: If the text cannot be tokenized
    """
    try:
        tokens = Dialect.get_or_raise(DIALECT).tokenize(sql)
    except TokenError as e:
        raise SQLSyntaxError(str(e), internal=True) from e

    pieces: List[Tuple[str, int]] = []
    current: List[Token] = []
    for token in tokens:
        if token.token_type == TokenType.SEMICOLON:
            if current:
                pieces.append(_piece(sql, current))
            current = []
            continue
        current.append(token)
    if current:
        pieces.append(_piece(sql, current))
    return pieces


def _piece(sql: str, tokens: List[Token]) -> Tuple[str, int]:
    first, last = tokens[0], tokens[-1]
    return sql[first.start : last.end + 1], first.line - 1


def parse_statements(sql: str) -> List[Statement]:
    """
    Parse SQL text into statements.

    Args:
        sql: Raw SQL text

    Returns:
        Parsed statements, empty for blank input

    Raises:
        SQLSyntaxError: On the first statement that does not parse
    """
    statements = []
    for text, base_line in split_statements(sql):
        try:
            tree = sqlglot.parse_one(text, read=DIALECT, error_level=ErrorLevel.RAISE)
        except ParseError as e:
            tree = _raw_command(text)
            if tree is None:
                raise _syntax_error(e, text, base_line) from e
            logger.debug(f"Keeping statement at line {base_line + 1} as raw text: {e}")
        if tree is None:
            continue
        statements.append(Statement(tree=tree, base_line=base_line, text=text))
    logger.debug(f"Parsed {len(statements)} statement(s)")
    return statements


def _raw_command(text: str) -> Optional[exp.Command]:
    """Wrap a statement the parser rejects as a raw command, if it is known valid DDL."""
    if text.count("(") != text.count(")"):
        return None
    if not any(pattern.match(text) for pattern in _RAW_DDL_PATTERNS):
        return None
    size = len(text.split(None, 1)[0])
    return exp.Command(this=text[:size], expression=text[size:])


def _syntax_error(error: ParseError, text: str, base_line: int) -> SQLSyntaxError:
    details = error.errors[0] if error.errors else {}
    line = (details.get("line") or 1) + base_line
    column = details.get("col") or 0
    related = (details.get("start_context") or "") + (details.get("highlight") or "")
    related = related[-RELATED_TEXT_LENGTH:] if related else text[:RELATED_TEXT_LENGTH]
    message = f"Syntax error at line {line}:{column} \nrelated text: {related}"
    return SQLSyntaxError(message, line=line, column=column)


def node_line(node) -> int:
    """Return the 1-based line of a node inside its statement.

    The parser only keeps positions on some leaf nodes, so the first
    positioned descendant is used. Nodes without any position report 1,
    the statement's first line.
    """
    if isinstance(node, Statement):
        return 1
    if not isinstance(node, exp.Expression):
        return 1
    for sub in node.walk(bfs=False):
        line = sub.meta.get("line") if sub.meta else None
        if line:
            return line
    return 1
