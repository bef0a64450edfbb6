"""Rule for disallowing LIKE patterns that start with a wildcard."""

from typing import List

from sqlglot import exp

from ..base import Advisor, CheckContext
from ..models import AdviceCode, AdviceStatus, ReviewRule
from ..parser import Statement
from .base import Rule
from .node_types import NodeType


class StatementWhereNoLeadingWildcardLikeRule(Rule):
    """Reports LIKE '%...' predicates, which cannot use an index."""

    name = "StatementWhereNoLeadingWildcardLikeRule"

    def __init__(self, level: AdviceStatus, title: str) -> None:
        super().__init__(level, title)
        self.text = ""

    def on_enter(self, node, tag: NodeType) -> None:
        if tag == NodeType.QUERY:
            self.text = node.text
            return
        if tag != NodeType.PREDICATE_LIKE:
            return
        pattern = node.expression
        if isinstance(pattern, exp.Literal) and pattern.is_string and pattern.this.startswith("%"):
            self.add_advice(
                AdviceCode.STATEMENT_LEADING_WILDCARD_LIKE,
                f'"{self.text}" uses leading wildcard LIKE',
                self.line_of(node),
            )


class StatementWhereNoLeadingWildcardLikeAdvisor(Advisor):
    rule_type = "statement.where.no-leading-wildcard-like"

    def build_rules(
        self, status: AdviceStatus, rule: ReviewRule, context: CheckContext, statements: List[Statement]
    ) -> List[Rule]:
        return [StatementWhereNoLeadingWildcardLikeRule(status, rule.type)]
