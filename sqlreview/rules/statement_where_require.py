"""Rules requiring a WHERE clause on SELECT, UPDATE and DELETE."""

from typing import List

from ..base import Advisor, CheckContext
from ..models import AdviceCode, AdviceStatus, ReviewRule
from ..parser import Statement
from .base import Rule
from .node_types import NodeType


class StatementWhereRequireSelectRule(Rule):
    """Reports every SELECT that reads from a table without a WHERE clause.

    Selects without FROM, such as SELECT 1, are not reported.
    """

    name = "StatementWhereRequireSelectRule"

    def __init__(self, level: AdviceStatus, title: str) -> None:
        super().__init__(level, title)
        self.text = ""

    def on_enter(self, node, tag: NodeType) -> None:
        if tag == NodeType.QUERY:
            self.text = node.text
        elif tag == NodeType.SELECT:
            if node.args.get("from") is None:
                return
            if node.args.get("where") is None:
                self.add_advice(AdviceCode.STATEMENT_NO_WHERE, f'"{self.text}" requires WHERE clause', self.line_of(node))


class StatementWhereRequireUpdateDeleteRule(Rule):
    name = "StatementWhereRequireUpdateDeleteRule"

    def __init__(self, level: AdviceStatus, title: str) -> None:
        super().__init__(level, title)
        self.text = ""

    def on_enter(self, node, tag: NodeType) -> None:
        if tag == NodeType.QUERY:
            self.text = node.text
        elif tag in (NodeType.UPDATE, NodeType.DELETE):
            if node.args.get("where") is None:
                self.add_advice(AdviceCode.STATEMENT_NO_WHERE, f'"{self.text}" requires WHERE clause', self.line_of(node))


class StatementWhereRequireSelectAdvisor(Advisor):
    rule_type = "statement.where.require.select"

    def build_rules(
        self, status: AdviceStatus, rule: ReviewRule, context: CheckContext, statements: List[Statement]
    ) -> List[Rule]:
        return [StatementWhereRequireSelectRule(status, rule.type)]


class StatementWhereRequireUpdateDeleteAdvisor(Advisor):
    rule_type = "statement.where.require.update-delete"

    def build_rules(
        self, status: AdviceStatus, rule: ReviewRule, context: CheckContext, statements: List[Statement]
    ) -> List[Rule]:
        return [StatementWhereRequireUpdateDeleteRule(status, rule.type)]
