"""Rule for disallowing SELECT *."""

from typing import List

from sqlglot import exp

from ..base import Advisor, CheckContext
from ..models import AdviceCode, AdviceStatus, ReviewRule
from ..parser import Statement
from .base import Rule
from .node_types import NodeType


def selects_all(select) -> bool:
    """Whether a SELECT projects * or table.*."""
    for projection in select.expressions:
        if isinstance(projection, exp.Star):
            return True
        if isinstance(projection, exp.Column) and isinstance(projection.this, exp.Star):
            return True
    return False


class StatementSelectNoSelectAllRule(Rule):
    name = "StatementSelectNoSelectAllRule"

    def __init__(self, level: AdviceStatus, title: str) -> None:
        super().__init__(level, title)
        self.text = ""

    def on_enter(self, node, tag: NodeType) -> None:
        if tag == NodeType.QUERY:
            self.text = node.text
        elif tag == NodeType.SELECT and selects_all(node):
            self.add_advice(AdviceCode.STATEMENT_SELECT_ALL, f'"{self.text}" uses SELECT all', self.line_of(node))


class StatementSelectNoSelectAllAdvisor(Advisor):
    rule_type = "statement.select.no-select-all"

    def build_rules(
        self, status: AdviceStatus, rule: ReviewRule, context: CheckContext, statements: List[Statement]
    ) -> List[Rule]:
        return [StatementSelectNoSelectAllRule(status, rule.type)]
