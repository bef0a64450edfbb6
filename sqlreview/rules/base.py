"""Base classes for review rules."""

from abc import ABC, abstractmethod
from typing import List, Optional

from sqlglot import exp

from ..models import Advice, AdviceStatus, convert_line_to_position
from ..parser import node_line
from .node_types import NodeType


class Rule(ABC):
    """Abstract class for review rules.

    A rule observes the single depth-first walk of every statement through
    on_enter()/on_exit(), keyed by the node's NodeType, and accumulates
    Advice. Rules hold mutable state and are built fresh for every check.

    Example:
        class NoSelectAllRule(Rule):
            name = "StatementSelectNoSelectAllRule"

            def on_enter(self, node, tag: NodeType) -> None:
                if tag == NodeType.STAR:
                    self.add_advice(AdviceCode.STATEMENT_SELECT_ALL, "...", self.line_of(node))
    """

    name: str

    def __init_subclass__(cls, abstract: bool = False, **kwargs):
        """Validates that concrete subclasses define the 'name' attribute."""
        super().__init_subclass__(**kwargs)
        if abstract:
            return
        if not getattr(cls, "name", None):
            raise TypeError(f"{cls.__name__} must define 'name' attribute")

    def __init__(self, level: AdviceStatus, title: str) -> None:
        self.level = level
        self.title = title
        self.base_line = 0
        self._advice_list: List[Advice] = []

    def set_base_line(self, base_line: int) -> None:
        """Set the line offset of the statement being walked."""
        self.base_line = base_line

    @abstractmethod
    def on_enter(self, node, tag: NodeType) -> None:
        """
        Called when the walk enters a node.

        Args:
            node: Statement or syntax tree node
            tag: Grammar category of the node
        """
        pass

    def on_exit(self, node, tag: NodeType) -> None:
        """Called when the walk leaves a node, after all of its children."""
        return None

    def get_advice_list(self) -> List[Advice]:
        """Return the advice accumulated so far."""
        return list(self._advice_list)

    def line_of(self, node) -> int:
        """Absolute 1-based line of a node in the statement being walked."""
        return self.base_line + node_line(node)

    def add_advice(self, code: int, content: str, line: Optional[int]) -> None:
        """
        Record a finding of this rule.

        Args:
            code: Advice code
            content: Message with the offending values
            line: Absolute 1-based line, None when the position is unknown
        """
        position = convert_line_to_position(line) if line is not None else None
        self._advice_list.append(
            Advice(
                status=self.level,
                code=int(code),
                title=self.title,
                content=content,
                start_position=position,
            )
        )


class StatementScopedRule(Rule, abstract=True):
    """Rule whose state is only valid within one statement.

    The statement loop calls reset_for_statement() right before a statement
    is walked and finalize_statement() right after, for findings that are
    only known once the whole statement has been seen.
    """

    @abstractmethod
    def reset_for_statement(self) -> None:
        """Clear the per-statement state."""
        pass

    def finalize_statement(self) -> None:
        """Emit findings that need the whole statement."""
        return None


class AggregatingRule(Rule, abstract=True):
    """Rule that accumulates state across every statement of a check.

    Findings are derived in generate_advice(), which runs lazily on the first
    call to get_advice_list() after all statements were walked. The result
    is computed once: later calls return the same list and repeat none of
    the catalog queries.
    """

    def __init__(self, level: AdviceStatus, title: str) -> None:
        super().__init__(level, title)
        self._collected = False

    @abstractmethod
    def generate_advice(self) -> None:
        """Turn the accumulated state into advice via add_advice()."""
        pass

    def get_advice_list(self) -> List[Advice]:
        if not self._collected:
            self._collected = True
            self.generate_advice()
        return list(self._advice_list)


def is_top_level(node) -> bool:
    """Whether a node is the root of its statement tree."""
    return isinstance(node, exp.Expression) and node.parent is None
