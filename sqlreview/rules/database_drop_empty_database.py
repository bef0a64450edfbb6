"""Rule for only allowing DROP DATABASE on empty databases."""

from typing import List, Optional

from ..base import Advisor, CheckContext
from ..catalog import Finder
from ..models import AdviceCode, AdviceStatus, ReviewRule
from ..parser import Statement
from ..sql_utils import database_name
from .base import Rule
from .node_types import NodeType


class DatabaseDropEmptyDatabaseRule(Rule):
    """Reports DROP DATABASE unless the catalog shows the current database is empty.

    Without a catalog the database is assumed not to be empty.
    """

    name = "DatabaseDropEmptyDatabaseRule"

    def __init__(self, level: AdviceStatus, title: str, finder: Optional[Finder]) -> None:
        super().__init__(level, title)
        self.finder = finder

    def on_enter(self, node, tag: NodeType) -> None:
        if tag != NodeType.DROP_DATABASE:
            return
        db_name = database_name(node.this)
        if not db_name:
            return
        line = self.line_of(node)

        if self.finder is None:
            self._not_empty(db_name, line)
            return
        origin = self.finder.origin
        if not origin.is_current_database(db_name):
            self.add_advice(
                AdviceCode.NOT_CURRENT_DATABASE,
                f"Database `{db_name}` that is trying to be deleted is not the current database "
                f"`{origin.database_name()}`",
                line,
            )
        elif not origin.has_no_table():
            self._not_empty(db_name, line)

    def _not_empty(self, db_name: str, line: int) -> None:
        self.add_advice(AdviceCode.DATABASE_NOT_EMPTY, f"Database `{db_name}` is not allowed to drop if not empty", line)


class DatabaseDropEmptyDatabaseAdvisor(Advisor):
    rule_type = "database.drop-empty-database"

    def build_rules(
        self, status: AdviceStatus, rule: ReviewRule, context: CheckContext, statements: List[Statement]
    ) -> List[Rule]:
        return [DatabaseDropEmptyDatabaseRule(status, rule.type, context.get_finder())]
