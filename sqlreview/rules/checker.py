"""Single-walk dispatch of syntax tree nodes to many rules."""

import logging
from typing import Any, List, Optional, Tuple

from sqlglot import exp

from ..models import Advice
from ..parser import Statement
from .base import Rule
from .node_types import NodeType, resolve

logger = logging.getLogger(__name__)


def _children(node) -> List[Any]:
    if isinstance(node, Statement):
        return [node.tree]
    if isinstance(node, exp.Expression):
        return list(node.iter_expressions())
    return []


class GenericChecker:
    """Walks a tree once and fans every node out to all registered rules.

    Rules see nodes in pre-order on enter and post-order on exit, always in
    registration order. A rule raising from a hook is logged and skipped for
    that node; the walk and the other rules carry on.

    Example:
        >>> checker = GenericChecker([rule_a, rule_b])
        >>> for statement in statements:
        ...     checker.set_base_line(statement.base_line)
        ...     checker.walk(statement)
        >>> advice = checker.get_advice_list()
    """

    def __init__(self, rules: List[Rule]) -> None:
        self._rules: List[Rule] = list(rules)
        self.base_line = 0

    @property
    def rules(self) -> List[Rule]:
        return list(self._rules)

    def set_base_line(self, base_line: int) -> None:
        """Set the line offset of the next statement for the checker and its rules."""
        self.base_line = base_line
        for rule in self._rules:
            rule.set_base_line(base_line)

    def walk(self, tree) -> None:
        """
        Walk a statement (or any subtree) depth-first.

        A Statement root is reported as NodeType.QUERY around its syntax tree.
        The walk keeps an explicit stack, so deeply nested expressions do not
        hit the interpreter recursion limit.
        """
        stack: List[Tuple[Any, Optional[NodeType]]] = [(tree, None)]
        while stack:
            node, tag = stack.pop()
            if tag is not None:
                self._exit(node, tag)
                continue
            tag = resolve(node)
            self._enter(node, tag)
            stack.append((node, tag))
            stack.extend((child, None) for child in reversed(_children(node)))

    def _enter(self, node, tag: NodeType) -> None:
        for rule in self._rules:
            try:
                rule.on_enter(node, tag)
            except Exception as e:
                logger.debug(f"Rule {rule.name} failed entering {tag.value}: {e}", exc_info=True)

    def _exit(self, node, tag: NodeType) -> None:
        for rule in self._rules:
            try:
                rule.on_exit(node, tag)
            except Exception as e:
                logger.debug(f"Rule {rule.name} failed exiting {tag.value}: {e}", exc_info=True)

    def get_advice_list(self) -> List[Advice]:
        """Collect the advice of every rule, in registration order."""
        advice: List[Advice] = []
        for rule in self._rules:
            advice.extend(rule.get_advice_list())
        return advice
