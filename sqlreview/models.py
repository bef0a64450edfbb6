from enum import Enum, IntEnum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class AdviceStatus(str, Enum):
    """Advice severity level."""

    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class RuleLevel(str, Enum):
    """Level configured for a review rule."""

    ERROR = "ERROR"
    WARNING = "WARNING"
    DISABLED = "DISABLED"


class ChangeType(str, Enum):
    """Kind of change a batch of statements belongs to."""

    UNSPECIFIED = "UNSPECIFIED"
    DDL = "DDL"
    DML = "DML"
    SDL = "SDL"


class AdviceCode(IntEnum):
    """Stable advice codes reported to callers."""

    INTERNAL = 1

    # Compatibility
    COMPATIBILITY_DROP_DATABASE = 101
    COMPATIBILITY_RENAME_TABLE = 102
    COMPATIBILITY_DROP_TABLE = 103
    COMPATIBILITY_RENAME_COLUMN = 104
    COMPATIBILITY_DROP_COLUMN = 105
    COMPATIBILITY_ADD_PRIMARY_KEY = 106
    COMPATIBILITY_ADD_UNIQUE_KEY = 107
    COMPATIBILITY_ADD_FOREIGN_KEY = 108
    COMPATIBILITY_ADD_CHECK = 109
    COMPATIBILITY_ALTER_CHECK = 110
    COMPATIBILITY_ALTER_COLUMN = 111
    COMPATIBILITY_DROP_SCHEMA = 112

    # Statement
    STATEMENT_SYNTAX_ERROR = 201
    STATEMENT_NO_WHERE = 202
    STATEMENT_SELECT_ALL = 203
    STATEMENT_LEADING_WILDCARD_LIKE = 204
    STATEMENT_DISALLOW_COMMIT = 206
    STATEMENT_WHERE_MAXIMUM_LOGICAL_OPERATOR_COUNT = 225
    STATEMENT_DISALLOW_MIX_DDL_DML = 227

    # Naming
    NAMING_TABLE_CONVENTION = 301

    # Database
    NOT_CURRENT_DATABASE = 502
    DATABASE_NOT_EMPTY = 701

    # Table
    TABLE_REQUIRE_PK = 601
    TABLE_HAS_FK = 602
    TABLE_EXCEED_LIMIT_SIZE = 615

    # Index
    INDEX_COUNT_EXCEEDS_LIMIT = 813

    # System
    DISABLED_CHARSET = 1001
    INSERT_NOT_SPECIFY_COLUMN = 1107


SYNTAX_ERROR_TITLE = "Syntax error"


class Position(BaseModel):
    """Caller-visible source position (0-based line)."""

    model_config = ConfigDict(frozen=True)

    line: int = 0
    column: int = 0


class Advice(BaseModel):
    """Diagnostic finding produced by a review rule.

    Attributes:
        status: Severity of the finding.
        code: Stable numeric code, see AdviceCode.
        title: Rule type that produced the finding.
        content: Human readable message with the offending values.
        start_position: Where the finding starts, None when unknown.
    """

    model_config = ConfigDict(frozen=True)

    status: AdviceStatus
    code: int
    title: str
    content: str
    start_position: Optional[Position] = None


class ReviewRule(BaseModel):
    """A configured review rule.

    Attributes:
        type: Rule type identifier, e.g. "naming.table".
        level: ERROR, WARNING or DISABLED.
        payload: Rule specific settings.
        comment: Free text description.
    """

    model_config = ConfigDict(extra="ignore")

    type: str
    level: RuleLevel = RuleLevel.WARNING
    payload: Optional[Dict[str, Any]] = Field(default=None, description="Rule specific payload")
    comment: str = ""


def status_from_rule_level(level: Any) -> AdviceStatus:
    """
    Convert a configured rule level into the advice status it reports with.

    Args:
        level: RuleLevel (or its string value)

    Returns:
        The matching AdviceStatus

    Raises:
        ValueError: If the level is not ERROR or WARNING
    """
    if level == RuleLevel.ERROR:
        return AdviceStatus.ERROR
    if level == RuleLevel.WARNING:
        return AdviceStatus.WARNING
    raise ValueError(f"unexpected rule level type {level}")


def convert_line_to_position(line: int) -> Position:
    """Convert a 1-based absolute line to the caller-visible position.

    Line 0 stays 0.

    Example:
        >>> convert_line_to_position(1).line
        0
        >>> convert_line_to_position(0).line
        0
    """
    if line == 0:
        return Position(line=0)
    return Position(line=line - 1)
