"""High level review of SQL text against a rule configuration."""

import logging
from typing import Any, List, Optional

from .base import CheckContext, ReviewResult, Summary
from .catalog import Catalog, DatabaseSchemaMetadata
from .config import Config, default_config
from .models import Advice, AdviceCode, AdviceStatus, ChangeType
from .rules.registry import AdvisorRegistry

logger = logging.getLogger(__name__)

_PARSE_ERROR_CODES = (AdviceCode.INTERNAL, AdviceCode.STATEMENT_SYNTAX_ERROR)


def dedupe_parse_errors(advices: List[Advice]) -> List[Advice]:
    """Keep one copy of each parse error; every advisor reports the same one."""
    seen = set()
    result = []
    for advice in advices:
        if advice.code in _PARSE_ERROR_CODES:
            key = (advice.code, advice.content)
            if key in seen:
                continue
            seen.add(key)
        result.append(advice)
    return result


def sort_advices(advices: List[Advice]) -> List[Advice]:
    """Sort advice by line then content; advice without a position comes first."""

    def key(advice: Advice):
        if advice.start_position is None:
            return (0, 0, advice.content)
        return (1, advice.start_position.line, advice.content)

    return sorted(advices, key=key)


def summarize(advices: List[Advice]) -> Summary:
    return Summary(
        total=len(advices),
        errors=sum(1 for a in advices if a.status == AdviceStatus.ERROR),
        warnings=sum(1 for a in advices if a.status == AdviceStatus.WARNING),
        infos=sum(1 for a in advices if a.status == AdviceStatus.INFO),
    )


class Reviewer:
    """Runs every enabled rule of a configuration over SQL text.

    Example:
        >>> reviewer = Reviewer(load_config(Path("sqlreview.toml")))
        >>> result = reviewer.review("DELETE FROM orders")
        >>> print(result)
        Review Results: 1 total (0 errors, 1 warnings, 0 info)
    """

    def __init__(self, config: Optional[Config] = None, registry: Optional[AdvisorRegistry] = None) -> None:
        self.config = config or default_config()
        self.registry = registry or AdvisorRegistry.with_default_rules()

    def review(
        self,
        sql: str,
        *,
        catalog: Optional[Catalog] = None,
        schema: Optional[DatabaseSchemaMetadata] = None,
        change_type: ChangeType = ChangeType.UNSPECIFIED,
        driver: Any = None,
    ) -> ReviewResult:
        """
        Review SQL text.

        Args:
            sql: Raw SQL, possibly several statements
            catalog: Catalog to check against; built from schema when omitted
            schema: Metadata of the existing database
            change_type: Kind of change the SQL belongs to
            driver: Live database handle passed through to the rules

        Returns:
            ReviewResult with sorted advice and summary
        """
        if catalog is None and schema is not None:
            catalog = Catalog(schema)
        context = CheckContext(catalog=catalog, driver=driver, change_type=change_type)

        advices: List[Advice] = []
        for rule in self.config.enabled_rules():
            advisor = self.registry.get(rule.type)
            if advisor is None:
                logger.warning(f"Unknown rule type '{rule.type}', skipping")
                continue
            try:
                advices.extend(advisor.check(sql, rule, context))
            except Exception as e:
                logger.warning(f"Rule {rule.type} failed: {e}", exc_info=True)

        advices = sort_advices(dedupe_parse_errors(advices))
        return ReviewResult(advices=advices, summary=summarize(advices))
