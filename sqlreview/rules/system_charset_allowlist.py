"""Rule for restricting the character sets schema changes may use."""

from typing import List, Set

from ..base import Advisor, CheckContext
from ..models import AdviceCode, AdviceStatus, ReviewRule
from ..parser import Statement
from ..payload import unmarshal_string_list_payload
from ..sql_utils import charsets_in
from .base import Rule, is_top_level
from .node_types import NodeType

_CHECKED_TAGS = (NodeType.CREATE_DATABASE, NodeType.CREATE_TABLE, NodeType.ALTER_DATABASE, NodeType.ALTER_TABLE)


class CharsetAllowlistRule(Rule):
    """Reports charsets outside the allow list.

    Names are compared lower-cased. A statement without an explicit
    charset is never reported.
    """

    name = "CharsetAllowlistRule"

    def __init__(self, level: AdviceStatus, title: str, allow_list: Set[str]) -> None:
        super().__init__(level, title)
        self.allow_list = allow_list
        self.text = ""

    def on_enter(self, node, tag: NodeType) -> None:
        if tag == NodeType.QUERY:
            self.text = node.text
            return
        if tag not in _CHECKED_TAGS or not is_top_level(node):
            return
        for charset in charsets_in(node):
            self._check_charset(charset, self.line_of(node))

    def _check_charset(self, charset: str, line: int) -> None:
        if charset and charset not in self.allow_list:
            self.add_advice(AdviceCode.DISABLED_CHARSET, f"\"{self.text}\" used disabled charset '{charset}'", line)


class SystemCharsetAllowlistAdvisor(Advisor):
    rule_type = "system.charset.allowlist"

    def build_rules(
        self, status: AdviceStatus, rule: ReviewRule, context: CheckContext, statements: List[Statement]
    ) -> List[Rule]:
        payload = unmarshal_string_list_payload(rule.payload)
        allow_list = {charset.lower() for charset in payload.list}
        return [CharsetAllowlistRule(status, rule.type, allow_list)]
