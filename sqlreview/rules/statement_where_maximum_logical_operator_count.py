"""Rule for limiting the size of IN lists and OR chains."""

from typing import List

from ..base import Advisor, CheckContext
from ..models import AdviceCode, AdviceStatus, ReviewRule
from ..parser import Statement
from ..payload import unmarshal_number_payload
from .base import Rule, StatementScopedRule
from .node_types import NodeType


class StatementWhereMaximumLogicalOperatorCountRule(StatementScopedRule):
    """Reports IN lists with too many values and OR chains with too many operands.

    IN lists are reported as soon as they are seen. The OR operand count is
    the deepest OR nesting plus one, so it is only known once the whole
    statement was walked and is reported from finalize_statement().
    """

    name = "StatementWhereMaximumLogicalOperatorCountRule"

    def __init__(self, level: AdviceStatus, title: str, maximum: int) -> None:
        super().__init__(level, title)
        self.maximum = maximum
        self.text = ""
        self.reset_for_statement()

    def reset_for_statement(self) -> None:
        self.depth = 0
        self.max_or_count = 0
        self.max_or_count_line = 0

    def on_enter(self, node, tag: NodeType) -> None:
        if tag == NodeType.QUERY:
            self.text = node.text
        elif tag == NodeType.PREDICATE_IN:
            self._check_in(node)
        elif tag == NodeType.EXPR_OR:
            self.depth += 1
            count = self.depth + 1
            if count > self.max_or_count:
                self.max_or_count = count
                self.max_or_count_line = self.line_of(node)

    def on_exit(self, node, tag: NodeType) -> None:
        if tag == NodeType.EXPR_OR:
            self.depth -= 1

    def _check_in(self, node) -> None:
        count = len(node.expressions)
        if count > self.maximum:
            self.add_advice(
                AdviceCode.STATEMENT_WHERE_MAXIMUM_LOGICAL_OPERATOR_COUNT,
                f"Number of tokens ({count}) in IN predicate operation exceeds limit ({self.maximum}) "
                f'in statement "{self.text}".',
                self.line_of(node),
            )

    def finalize_statement(self) -> None:
        if self.max_or_count > self.maximum:
            self.add_advice(
                AdviceCode.STATEMENT_WHERE_MAXIMUM_LOGICAL_OPERATOR_COUNT,
                f"Number of tokens ({self.max_or_count}) in the OR predicate operation exceeds limit "
                f'({self.maximum}) in statement "{self.text}".',
                self.max_or_count_line,
            )


class StatementWhereMaximumLogicalOperatorCountAdvisor(Advisor):
    rule_type = "statement.where.maximum-logical-operator-count"

    def build_rules(
        self, status: AdviceStatus, rule: ReviewRule, context: CheckContext, statements: List[Statement]
    ) -> List[Rule]:
        payload = unmarshal_number_payload(rule.payload)
        return [StatementWhereMaximumLogicalOperatorCountRule(status, rule.type, payload.number)]
