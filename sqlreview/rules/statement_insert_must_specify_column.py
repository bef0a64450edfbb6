"""Rule requiring INSERT statements to name their target columns."""

from typing import List

from sqlglot import exp

from ..base import Advisor, CheckContext
from ..models import AdviceCode, AdviceStatus, ReviewRule
from ..parser import Statement
from .base import Rule, StatementScopedRule, is_top_level
from .node_types import NodeType
from .statement_select_no_select_all import selects_all


class StatementInsertMustSpecifyColumnRule(StatementScopedRule):
    """Reports INSERT ... VALUES without a column list and INSERT ... SELECT *."""

    name = "StatementInsertMustSpecifyColumnRule"

    def __init__(self, level: AdviceStatus, title: str) -> None:
        super().__init__(level, title)
        self.text = ""
        self.has_select = False

    def reset_for_statement(self) -> None:
        self.has_select = False

    def on_enter(self, node, tag: NodeType) -> None:
        if tag == NodeType.QUERY:
            self.text = node.text
        elif tag == NodeType.INSERT and is_top_level(node):
            self._check_insert(node)
        elif tag == NodeType.SELECT and self.has_select and selects_all(node):
            self._report(node)

    def _check_insert(self, node) -> None:
        source = node.expression
        if isinstance(source, (exp.Select, exp.Union, exp.Subquery)):
            self.has_select = True
            return
        if not isinstance(source, exp.Values):
            return
        target = node.this
        if isinstance(target, exp.Schema) and target.expressions:
            return
        self._report(node)

    def _report(self, node) -> None:
        self.add_advice(
            AdviceCode.INSERT_NOT_SPECIFY_COLUMN,
            f'The INSERT statement must specify columns but "{self.text}" does not',
            self.line_of(node),
        )


class StatementInsertMustSpecifyColumnAdvisor(Advisor):
    rule_type = "statement.insert.must-specify-column"

    def build_rules(
        self, status: AdviceStatus, rule: ReviewRule, context: CheckContext, statements: List[Statement]
    ) -> List[Rule]:
        return [StatementInsertMustSpecifyColumnRule(status, rule.type)]
