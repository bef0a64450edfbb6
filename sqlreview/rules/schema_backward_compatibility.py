"""Rule for detecting schema changes that break existing data or code."""

from typing import List

from ..base import Advisor, CheckContext
from ..models import AdviceCode, AdviceStatus, ReviewRule
from ..parser import Statement
from ..sql_utils import (
    AlterAction,
    alter_table_items,
    alter_table_name,
    create_index_parts,
    create_table_target,
    table_elements,
)
from .base import Rule, StatementScopedRule, is_top_level
from .node_types import NodeType

# Incompatible alter actions and the code each one reports
_ALTER_ACTION_CODES = {
    AlterAction.RENAME_COLUMN: AdviceCode.COMPATIBILITY_RENAME_COLUMN,
    AlterAction.DROP_COLUMN: AdviceCode.COMPATIBILITY_DROP_COLUMN,
    AlterAction.RENAME_TABLE: AdviceCode.COMPATIBILITY_RENAME_TABLE,
    AlterAction.ADD_PRIMARY_KEY: AdviceCode.COMPATIBILITY_ADD_PRIMARY_KEY,
    AlterAction.ADD_UNIQUE_KEY: AdviceCode.COMPATIBILITY_ADD_UNIQUE_KEY,
    AlterAction.ADD_FOREIGN_KEY: AdviceCode.COMPATIBILITY_ADD_FOREIGN_KEY,
    AlterAction.ADD_CHECK: AdviceCode.COMPATIBILITY_ADD_CHECK,
    AlterAction.ALTER_CHECK: AdviceCode.COMPATIBILITY_ALTER_CHECK,
    AlterAction.MODIFY_COLUMN: AdviceCode.COMPATIBILITY_ALTER_COLUMN,
}


class SchemaBackwardCompatibilityRule(StatementScopedRule):
    """Classifies each statement as compatible or as one kind of breaking change.

    At most one advice is produced per statement. The first incompatible
    pattern met during the walk decides the code; later ones in the same
    statement are ignored. Tables created earlier in the same batch are
    exempt from ALTER TABLE and CREATE UNIQUE INDEX checks.
    """

    name = "SchemaBackwardCompatibilityRule"

    def __init__(self, level: AdviceStatus, title: str) -> None:
        super().__init__(level, title)
        self.text = ""
        self.code = 0
        self.last_create_table = ""

    def reset_for_statement(self) -> None:
        self.code = 0

    def on_enter(self, node, tag: NodeType) -> None:
        if tag == NodeType.QUERY:
            self.text = node.text
            self.code = 0
            return
        if not is_top_level(node):
            return

        if tag == NodeType.CREATE_TABLE:
            self._check_create_table(node)
        elif tag == NodeType.DROP_DATABASE:
            self._set_code(AdviceCode.COMPATIBILITY_DROP_DATABASE)
        elif tag == NodeType.RENAME_TABLE:
            self._set_code(AdviceCode.COMPATIBILITY_RENAME_TABLE)
        elif tag == NodeType.DROP_TABLE:
            self._set_code(AdviceCode.COMPATIBILITY_DROP_TABLE)
        elif tag == NodeType.ALTER_TABLE:
            self._check_alter_table(node)
        elif tag == NodeType.CREATE_INDEX:
            self._check_create_index(node)

    def on_exit(self, node, tag: NodeType) -> None:
        if tag == NodeType.QUERY and self.code != 0:
            self.add_advice(
                self.code,
                f'"{self.text}" may cause incompatibility with the existing data and code',
                self.line_of(node),
            )

    def _set_code(self, code: AdviceCode) -> bool:
        if self.code != 0:
            return False
        self.code = int(code)
        return True

    def _created_in_batch(self, table_name: str) -> bool:
        return bool(table_name) and table_name.lower() == self.last_create_table.lower()

    def _check_create_table(self, node) -> None:
        target = create_table_target(node)
        if target is None or not table_elements(node):
            return
        self.last_create_table = target.name

    def _check_alter_table(self, node) -> None:
        if self._created_in_batch(alter_table_name(node)):
            return
        for action, _ in alter_table_items(node):
            code = _ALTER_ACTION_CODES.get(action)
            if code is not None:
                self._set_code(code)
                return

    def _check_create_index(self, node) -> None:
        table, definition = create_index_parts(node)
        if table is None or definition is None or not definition.unique:
            return
        if not self._created_in_batch(table.name):
            self._set_code(AdviceCode.COMPATIBILITY_ADD_UNIQUE_KEY)


class SchemaBackwardCompatibilityAdvisor(Advisor):
    rule_type = "schema.backward-compatibility"

    def build_rules(
        self, status: AdviceStatus, rule: ReviewRule, context: CheckContext, statements: List[Statement]
    ) -> List[Rule]:
        return [SchemaBackwardCompatibilityRule(status, rule.type)]
