"""Rule for warning about DDL on large tables."""

from typing import Dict, List, Optional

from ..base import Advisor, CheckContext
from ..catalog import Finder
from ..models import AdviceCode, AdviceStatus, ReviewRule
from ..parser import Statement
from ..payload import unmarshal_number_payload
from ..sql_utils import alter_table_name, drop_targets, truncate_targets
from .base import AggregatingRule, Rule, is_top_level
from .node_types import NodeType


class TableLimitSizeRule(AggregatingRule):
    """Reports ALTER, TRUNCATE and DROP of tables holding too many rows.

    Row counts come from the catalog's origin state: the size of a table
    before the batch runs is what decides how long it stays locked.
    """

    name = "TableLimitSizeRule"

    def __init__(self, level: AdviceStatus, title: str, max_rows: int, finder: Optional[Finder]) -> None:
        super().__init__(level, title)
        self.max_rows = max_rows
        self.finder = finder
        self.line_for_table: Dict[str, int] = {}

    def on_enter(self, node, tag: NodeType) -> None:
        if not is_top_level(node):
            return
        if tag == NodeType.ALTER_TABLE:
            names = [alter_table_name(node)]
        elif tag == NodeType.TRUNCATE_TABLE:
            names = truncate_targets(node)
        elif tag == NodeType.DROP_TABLE:
            names = [target.name for target in drop_targets(node)]
        else:
            return
        line = self.line_of(node)
        for table_name in names:
            if table_name:
                self.line_for_table[table_name] = line

    def generate_advice(self) -> None:
        if self.finder is None:
            return
        for table_name, line in sorted(self.line_for_table.items(), key=lambda item: item[1]):
            table = self.finder.origin.find_table(table_name)
            rows = table.row_count if table is not None else 0
            if rows >= self.max_rows:
                self.add_advice(
                    AdviceCode.TABLE_EXCEED_LIMIT_SIZE,
                    f"Apply DDL on large table '{table_name}' ( {rows} rows ) will lock table for a long time, "
                    f"the limit is {self.max_rows} rows",
                    line,
                )


class TableLimitSizeAdvisor(Advisor):
    rule_type = "table.limit-size"

    def build_rules(
        self, status: AdviceStatus, rule: ReviewRule, context: CheckContext, statements: List[Statement]
    ) -> List[Rule]:
        payload = unmarshal_number_payload(rule.payload)
        finder = context.get_finder()
        if finder is None:
            return []
        return [TableLimitSizeRule(status, rule.type, payload.number, finder)]
