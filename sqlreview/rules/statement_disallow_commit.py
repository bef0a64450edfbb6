"""Rule for disallowing COMMIT inside reviewed SQL."""

from typing import List

from ..base import Advisor, CheckContext
from ..models import AdviceCode, AdviceStatus, ReviewRule
from ..parser import Statement
from .base import Rule, is_top_level
from .node_types import NodeType


class StatementDisallowCommitRule(Rule):
    name = "StatementDisallowCommitRule"

    def __init__(self, level: AdviceStatus, title: str) -> None:
        super().__init__(level, title)
        self.text = ""

    def on_enter(self, node, tag: NodeType) -> None:
        if tag == NodeType.QUERY:
            self.text = node.text
        elif tag == NodeType.COMMIT and is_top_level(node):
            self.add_advice(
                AdviceCode.STATEMENT_DISALLOW_COMMIT,
                f'Commit is not allowed, related statement: "{self.text}"',
                self.line_of(node),
            )


class StatementDisallowCommitAdvisor(Advisor):
    rule_type = "statement.disallow-commit"

    def build_rules(
        self, status: AdviceStatus, rule: ReviewRule, context: CheckContext, statements: List[Statement]
    ) -> List[Rule]:
        return [StatementDisallowCommitRule(status, rule.type)]
