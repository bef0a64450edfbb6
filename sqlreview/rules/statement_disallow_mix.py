"""Rules keeping schema changes and data changes in separate batches."""

from typing import List

from ..base import Advisor, CheckContext
from ..models import AdviceCode, AdviceStatus, ChangeType, ReviewRule
from ..parser import Statement
from .base import Rule
from .node_types import NodeType, is_ddl, is_dml, resolve


class StatementDisallowMixInDDLRule(Rule):
    """Reports data changes in a schema change batch."""

    name = "StatementDisallowMixInDDLRule"

    def on_enter(self, node, tag: NodeType) -> None:
        if tag == NodeType.QUERY and is_dml(resolve(node.tree)):
            self.add_advice(
                AdviceCode.STATEMENT_DISALLOW_MIX_DDL_DML,
                f'Alter schema can only run DDL, "{node.text}" is not DDL',
                self.line_of(node),
            )


class StatementDisallowMixInDMLRule(Rule):
    """Reports schema changes in a data change batch."""

    name = "StatementDisallowMixInDMLRule"

    def on_enter(self, node, tag: NodeType) -> None:
        if tag == NodeType.QUERY and is_ddl(resolve(node.tree)):
            self.add_advice(
                AdviceCode.STATEMENT_DISALLOW_MIX_DDL_DML,
                f'Data change can only run DML, "{node.text}" is not DML',
                self.line_of(node),
            )


class StatementDisallowMixInDDLAdvisor(Advisor):
    rule_type = "statement.disallow-mix-in-ddl"
    change_types = (ChangeType.DDL, ChangeType.SDL)

    def build_rules(
        self, status: AdviceStatus, rule: ReviewRule, context: CheckContext, statements: List[Statement]
    ) -> List[Rule]:
        return [StatementDisallowMixInDDLRule(status, rule.type)]


class StatementDisallowMixInDMLAdvisor(Advisor):
    rule_type = "statement.disallow-mix-in-dml"
    change_types = (ChangeType.DML,)

    def build_rules(
        self, status: AdviceStatus, rule: ReviewRule, context: CheckContext, statements: List[Statement]
    ) -> List[Rule]:
        return [StatementDisallowMixInDMLRule(status, rule.type)]
