"""Review rules and the machinery that runs them."""

from .base import AggregatingRule, Rule, StatementScopedRule
from .checker import GenericChecker
from .node_types import NodeType, resolve

__all__ = [
    "Rule",
    "StatementScopedRule",
    "AggregatingRule",
    "GenericChecker",
    "NodeType",
    "resolve",
]
