"""Rule requiring every table to have a primary key."""

from typing import List, Optional

from ..base import Advisor, CheckContext
from ..catalog import PRIMARY_KEY_NAME, Finder
from ..models import AdviceCode, AdviceStatus, ReviewRule
from ..parser import Statement
from ..sql_utils import (
    AlterAction,
    alter_table_items,
    alter_table_name,
    create_table_target,
    index_definitions,
    node_name,
    table_elements,
)
from .base import Rule, is_top_level
from .node_types import NodeType


class TableRequirePKRule(Rule):
    """Reports tables created without a primary key and ALTERs that remove it.

    Dropping a primary key column is only detected when a catalog is
    available to tell which columns form the key.
    """

    name = "TableRequirePKRule"

    def __init__(self, level: AdviceStatus, title: str, finder: Optional[Finder] = None) -> None:
        super().__init__(level, title)
        self.finder = finder

    def on_enter(self, node, tag: NodeType) -> None:
        if not is_top_level(node):
            return
        if tag == NodeType.CREATE_TABLE:
            self._check_create_table(node)
        elif tag == NodeType.ALTER_TABLE:
            self._check_alter_table(node)

    def _check_create_table(self, node) -> None:
        target = create_table_target(node)
        elements = table_elements(node)
        if target is None or not elements:
            return
        for element in elements:
            if any(definition.primary for definition in index_definitions(element)):
                return
        self._report(target.name, node)

    def _check_alter_table(self, node) -> None:
        table_name = alter_table_name(node)
        for action, item in alter_table_items(node):
            if action == AlterAction.DROP_PRIMARY_KEY:
                self._report(table_name, node)
                return
            if action == AlterAction.DROP_COLUMN and item is not None and self._in_primary_key(
                table_name, node_name(item.this)
            ):
                self._report(table_name, node)
                return

    def _in_primary_key(self, table_name: str, column_name: str) -> bool:
        if self.finder is None:
            return False
        table = self.finder.origin.find_table(table_name)
        if table is None:
            return False
        primary = table.find_index(PRIMARY_KEY_NAME)
        if primary is None:
            return False
        return column_name.lower() in (column.lower() for column in primary.expressions)

    def _report(self, table_name: str, node) -> None:
        self.add_advice(AdviceCode.TABLE_REQUIRE_PK, f"Table `{table_name}` requires PRIMARY KEY", self.line_of(node))


class TableRequirePKAdvisor(Advisor):
    rule_type = "table.require-pk"

    def build_rules(
        self, status: AdviceStatus, rule: ReviewRule, context: CheckContext, statements: List[Statement]
    ) -> List[Rule]:
        return [TableRequirePKRule(status, rule.type, context.get_finder())]
