"""Rule for enforcing the table naming convention."""

import re
from typing import List

from ..base import Advisor, CheckContext
from ..models import AdviceCode, AdviceStatus, ReviewRule
from ..parser import Statement
from ..payload import unmarshal_naming_payload
from ..sql_utils import (
    AlterAction,
    alter_table_items,
    create_table_target,
    node_name,
    rename_table_pairs,
    unquote,
)
from .base import Rule, is_top_level
from .node_types import NodeType

# MySQL identifier length limit, used when the payload sets none
DEFAULT_MAX_LENGTH = 64


class NamingTableRule(Rule):
    """Checks names of created and renamed tables against a pattern and a length."""

    name = "NamingTableRule"

    def __init__(self, level: AdviceStatus, title: str, pattern: "re.Pattern[str]", max_length: int) -> None:
        super().__init__(level, title)
        self.pattern = pattern
        self.max_length = max_length

    def on_enter(self, node, tag: NodeType) -> None:
        if not is_top_level(node):
            return
        if tag == NodeType.CREATE_TABLE:
            target = create_table_target(node)
            if target is not None:
                self._check_name(target.name, node)
        elif tag == NodeType.ALTER_TABLE:
            for action, item in alter_table_items(node):
                if action == AlterAction.RENAME_TABLE and item is not None:
                    self._check_name(unquote(node_name(item.this)), node)
        elif tag == NodeType.RENAME_TABLE:
            for _, new_name in rename_table_pairs(node):
                self._check_name(new_name, node)

    def _check_name(self, table_name: str, node) -> None:
        line = self.line_of(node)
        if not self.pattern.search(table_name):
            self.add_advice(
                AdviceCode.NAMING_TABLE_CONVENTION,
                f'`{table_name}` mismatches table naming convention, naming format should be "{self.pattern.pattern}"',
                line,
            )
        if self.max_length > 0 and len(table_name) > self.max_length:
            self.add_advice(
                AdviceCode.NAMING_TABLE_CONVENTION,
                f"`{table_name}` mismatches table naming convention, its length should be within "
                f"{self.max_length} characters",
                line,
            )


class NamingTableAdvisor(Advisor):
    rule_type = "naming.table"

    def build_rules(
        self, status: AdviceStatus, rule: ReviewRule, context: CheckContext, statements: List[Statement]
    ) -> List[Rule]:
        payload = unmarshal_naming_payload(rule.payload)
        pattern = payload.compile()
        max_length = payload.max_length or DEFAULT_MAX_LENGTH
        return [NamingTableRule(status, rule.type, pattern, max_length)]
