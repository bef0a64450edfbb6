"""Rule for disallowing foreign keys."""

from typing import List

from sqlglot import exp

from ..base import Advisor, CheckContext
from ..models import AdviceCode, AdviceStatus, ReviewRule
from ..parser import Statement
from ..sql_utils import AlterAction, alter_table_items, alter_table_name, create_table_target, table_elements
from .base import Rule, is_top_level
from .node_types import NodeType


def _declares_foreign_key(element) -> bool:
    return element is not None and element.find(exp.ForeignKey) is not None


class TableNoForeignKeyRule(Rule):
    name = "TableNoForeignKeyRule"

    def on_enter(self, node, tag: NodeType) -> None:
        if not is_top_level(node):
            return
        if tag == NodeType.CREATE_TABLE:
            target = create_table_target(node)
            if target is None:
                return
            for element in table_elements(node):
                if not isinstance(element, exp.ColumnDef) and _declares_foreign_key(element):
                    self._report(target.name, element)
        elif tag == NodeType.ALTER_TABLE:
            table_name = alter_table_name(node)
            for action, item in alter_table_items(node):
                if action == AlterAction.ADD_FOREIGN_KEY:
                    self._report(table_name, item if item is not None else node)

    def _report(self, table_name: str, node) -> None:
        self.add_advice(AdviceCode.TABLE_HAS_FK, f"Foreign key is not allowed in the table `{table_name}`", self.line_of(node))


class TableNoForeignKeyAdvisor(Advisor):
    rule_type = "table.no-foreign-key"

    def build_rules(
        self, status: AdviceStatus, rule: ReviewRule, context: CheckContext, statements: List[Statement]
    ) -> List[Rule]:
        return [TableNoForeignKeyRule(status, rule.type)]
