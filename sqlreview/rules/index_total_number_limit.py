"""Rule for limiting the number of indexes per table."""

import logging
from typing import Dict, List, Optional

from sqlglot import exp

from ..base import Advisor, CheckContext
from ..catalog import Finder, WalkThroughError
from ..models import AdviceCode, AdviceStatus, ReviewRule
from ..parser import Statement
from ..payload import unmarshal_number_payload
from ..sql_utils import (
    AlterAction,
    added_column_definitions,
    alter_table_items,
    alter_table_name,
    create_index_parts,
    create_table_target,
    index_definitions,
    raw_alter_items,
)
from .base import AggregatingRule, Rule, is_top_level
from .node_types import NodeType

logger = logging.getLogger(__name__)

_KEY_ACTIONS = (AlterAction.ADD_PRIMARY_KEY, AlterAction.ADD_UNIQUE_KEY, AlterAction.ADD_INDEX)


class IndexTotalNumberLimitRule(AggregatingRule):
    """Reports tables that end up with more indexes than allowed.

    Every statement that may add an index records the table with the line
    of that statement; a later statement on the same table replaces the
    line. Counts are read from the catalog's final state once all
    statements were walked, so they include the effect of the whole batch.
    """

    name = "IndexTotalNumberLimitRule"

    def __init__(self, level: AdviceStatus, title: str, maximum: int, finder: Optional[Finder]) -> None:
        super().__init__(level, title)
        self.maximum = maximum
        self.finder = finder
        self.line_for_table: Dict[str, int] = {}

    def on_enter(self, node, tag: NodeType) -> None:
        if not is_top_level(node):
            return
        if tag == NodeType.CREATE_TABLE:
            target = create_table_target(node)
            if target is not None:
                self.line_for_table[target.name] = self.line_of(node)
        elif tag == NodeType.CREATE_INDEX:
            table, _ = create_index_parts(node)
            if table is not None:
                self.line_for_table[table.name] = self.line_of(node)
        elif tag == NodeType.ALTER_TABLE:
            self._check_alter_table(node)

    def _check_alter_table(self, node) -> None:
        table_name = alter_table_name(node)
        if not table_name:
            return
        for action, item in alter_table_items(node):
            if action in _KEY_ACTIONS:
                self.line_for_table[table_name] = self.line_of(item if item is not None else node)
            elif action in (AlterAction.ADD_COLUMN, AlterAction.MODIFY_COLUMN) and item is not None:
                # Inline PRIMARY KEY / UNIQUE attributes on a column also create an index
                if index_definitions(item):
                    self.line_for_table[table_name] = self.line_of(item)
        if isinstance(node, exp.Command):
            for text in raw_alter_items(node):
                if any(index_definitions(column_def) for column_def in added_column_definitions(text) or []):
                    self.line_for_table[table_name] = self.line_of(node)

    def generate_advice(self) -> None:
        if self.finder is None:
            return
        for table_name, line in sorted(self.line_for_table.items(), key=lambda item: item[1]):
            table = self.finder.final.find_table(table_name)
            if table is None:
                continue
            count = table.count_index()
            if count > self.maximum:
                self.add_advice(
                    AdviceCode.INDEX_COUNT_EXCEEDS_LIMIT,
                    f"The count of index in table `{table_name}` should be no more than {self.maximum}, "
                    f"but found {count}",
                    line,
                )


class IndexTotalNumberLimitAdvisor(Advisor):
    rule_type = "index.total-number-limit"

    def build_rules(
        self, status: AdviceStatus, rule: ReviewRule, context: CheckContext, statements: List[Statement]
    ) -> List[Rule]:
        payload = unmarshal_number_payload(rule.payload)
        finder = context.get_finder()
        if finder is None:
            return []
        try:
            finder.walk_through(statements)
        except WalkThroughError as e:
            logger.warning(f"Catalog walk-through failed for {rule.type}: {e}")
        return [IndexTotalNumberLimitRule(status, rule.type, payload.number, finder)]
