"""Base classes for rule advisors and review results.

An advisor is the entry point for one configured rule type: it parses the
SQL text, builds fresh rule instances for the check, walks every statement
once and returns the advice the rules produced.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .catalog import Catalog, Finder
from .models import Advice, AdviceStatus, ChangeType, ReviewRule, status_from_rule_level
from .parser import SQLSyntaxError, Statement, parse_statements
from .rules.base import Rule, StatementScopedRule
from .rules.checker import GenericChecker

logger = logging.getLogger(__name__)


class CheckContext(BaseModel):
    """Collaborators and settings shared by every advisor of one review.

    Attributes:
        catalog: Schema catalog, None when no schema metadata is available.
        driver: Live database handle. Carried for callers, never used here.
        change_type: Kind of change the statements belong to.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    catalog: Optional[Catalog] = None
    driver: Any = None
    change_type: ChangeType = ChangeType.UNSPECIFIED

    def get_finder(self) -> Optional[Finder]:
        """Return the catalog finder, None without a catalog."""
        if self.catalog is None:
            return None
        return self.catalog.get_finder()


class Advisor(ABC):
    """Abstract class for rule advisors.

    Subclasses declare the rule type they handle and build the rule
    instances for one check. Parsing, level conversion and the statement
    loop are shared.

    Example:
        class SelectAllAdvisor(Advisor):
            rule_type = "statement.select.no-select-all"

            def build_rules(self, status, rule, context, statements):
                return [SelectAllRule(status, rule.type)]
    """

    rule_type: str
    # Change types the advisor runs for; None runs for every change type
    change_types: Optional[Tuple[ChangeType, ...]] = None

    def __init_subclass__(cls, **kwargs):
        """Validates that subclasses define the 'rule_type' attribute."""
        super().__init_subclass__(**kwargs)
        if not getattr(cls, "rule_type", None):
            raise TypeError(f"{cls.__name__} must define 'rule_type' attribute")

    @abstractmethod
    def build_rules(
        self,
        status: AdviceStatus,
        rule: ReviewRule,
        context: CheckContext,
        statements: List[Statement],
    ) -> List[Rule]:
        """
        Build fresh rule instances for one check.

        Args:
            status: Advice status the rules report with
            rule: Configured rule, including its payload
            context: Check context
            statements: Parsed statements about to be walked

        Returns:
            Rules to run, empty to skip the check

        Raises:
            ValueError: If the payload is invalid
        """
        pass

    def check(self, statement_text: str, rule: ReviewRule, context: Optional[CheckContext] = None) -> List[Advice]:
        """
        Check SQL text against one configured rule.

        Args:
            statement_text: Raw SQL, possibly several statements
            rule: Configured rule
            context: Check context, defaults to an empty one

        Returns:
            Advice found, or a single syntax error advice if the text does not parse

        Raises:
            ValueError: If the rule level or payload is invalid
        """
        context = context or CheckContext()
        if self.change_types is not None and context.change_type not in self.change_types:
            return []

        try:
            statements = parse_statements(statement_text)
        except SQLSyntaxError as e:
            logger.debug(f"{self.rule_type}: {e.message}")
            return [e.to_advice()]

        status = status_from_rule_level(rule.level)
        rules = self.build_rules(status, rule, context, statements)
        if not rules:
            return []

        checker = GenericChecker(rules)
        scoped = [r for r in rules if isinstance(r, StatementScopedRule)]
        for statement in statements:
            checker.set_base_line(statement.base_line)
            for scoped_rule in scoped:
                scoped_rule.reset_for_statement()
            checker.walk(statement)
            for scoped_rule in scoped:
                scoped_rule.finalize_statement()
        return checker.get_advice_list()


class Summary(BaseModel):
    """Advice counts of a review."""

    total: int = 0
    errors: int = 0
    warnings: int = 0
    infos: int = 0


class ReviewResult(BaseModel):
    """Review result.

    Attributes:
        advices: Advice of every rule, sorted by position then content.
        summary: Counts per status.

    Example:
        >>> result = reviewer.review("DELETE FROM orders")
        >>> result.has_warnings()
        True
        >>> str(result)
        'Review Results: 1 total (0 errors, 1 warnings, 0 info)'
    """

    advices: List[Advice] = Field(default_factory=list)
    summary: Summary = Field(default_factory=Summary)

    def has_errors(self) -> bool:
        return self.summary.errors > 0

    def has_warnings(self) -> bool:
        return self.summary.warnings > 0

    def is_clean(self) -> bool:
        """Whether the review found nothing."""
        return self.summary.total == 0

    def filter_by_status(self, status: AdviceStatus) -> List[Advice]:
        return [advice for advice in self.advices if advice.status == status]

    def filter_by_code(self, code: int) -> List[Advice]:
        return [advice for advice in self.advices if advice.code == int(code)]

    def __str__(self) -> str:
        s = self.summary
        return f"Review Results: {s.total} total ({s.errors} errors, {s.warnings} warnings, {s.infos} info)"
