"""Registry of rule advisors keyed by rule type."""

import logging
from typing import Dict, List, Optional, Type

from ..base import Advisor

logger = logging.getLogger(__name__)


class AdvisorRegistry:
    """Registry mapping rule types to advisor classes.

    The registry holds classes, never rule instances: every check builds
    its own rules, so one registry can serve any number of reviews.

    Example:
        >>> registry = AdvisorRegistry.with_default_rules()
        >>> advisor = registry.get("naming.table")
        >>> advice = advisor.check("CREATE TABLE UserInfo (id INT)", rule)
    """

    def __init__(self) -> None:
        self._advisors: Dict[str, Type[Advisor]] = {}

    def register(self, advisor_cls: Type[Advisor]) -> None:
        """
        Register an advisor class under its rule type.

        Args:
            advisor_cls: Advisor subclass

        Raises:
            ValueError: If advisor_cls is None or its rule type is already registered
            TypeError: If advisor_cls is not an Advisor subclass
        """
        if advisor_cls is None:
            raise ValueError("Advisor cannot be None")
        if not isinstance(advisor_cls, type) or not issubclass(advisor_cls, Advisor):
            raise TypeError(f"Advisor must be a subclass of Advisor, got {advisor_cls!r}")
        rule_type = advisor_cls.rule_type
        if rule_type in self._advisors:
            raise ValueError(f"Advisor for rule type '{rule_type}' is already registered")
        self._advisors[rule_type] = advisor_cls
        logger.debug(f"Registered advisor: {rule_type}")

    def get(self, rule_type: str) -> Optional[Advisor]:
        """
        Return a new advisor for a rule type.

        Args:
            rule_type: Rule type identifier

        Returns:
            Advisor instance or None if the rule type is unknown
        """
        advisor_cls = self._advisors.get(rule_type)
        return advisor_cls() if advisor_cls is not None else None

    def is_registered(self, rule_type: str) -> bool:
        return rule_type in self._advisors

    def list_rule_types(self) -> List[str]:
        """Registered rule types in registration order."""
        return list(self._advisors)

    @classmethod
    def with_default_rules(cls) -> "AdvisorRegistry":
        """
        Creates registry with all built-in advisors.

        Returns:
            AdvisorRegistry with registered advisors
        """
        registry = cls()
        # Import here to avoid circular dependencies
        from .database_drop_empty_database import DatabaseDropEmptyDatabaseAdvisor
        from .index_total_number_limit import IndexTotalNumberLimitAdvisor
        from .naming_table import NamingTableAdvisor
        from .schema_backward_compatibility import SchemaBackwardCompatibilityAdvisor
        from .statement_disallow_commit import StatementDisallowCommitAdvisor
        from .statement_disallow_mix import StatementDisallowMixInDDLAdvisor, StatementDisallowMixInDMLAdvisor
        from .statement_insert_must_specify_column import StatementInsertMustSpecifyColumnAdvisor
        from .statement_select_no_select_all import StatementSelectNoSelectAllAdvisor
        from .statement_where_maximum_logical_operator_count import StatementWhereMaximumLogicalOperatorCountAdvisor
        from .statement_where_no_leading_wildcard_like import StatementWhereNoLeadingWildcardLikeAdvisor
        from .statement_where_require import StatementWhereRequireSelectAdvisor, StatementWhereRequireUpdateDeleteAdvisor
        from .system_charset_allowlist import SystemCharsetAllowlistAdvisor
        from .table_limit_size import TableLimitSizeAdvisor
        from .table_no_foreign_key import TableNoForeignKeyAdvisor
        from .table_require_pk import TableRequirePKAdvisor

        registry.register(SchemaBackwardCompatibilityAdvisor)
        registry.register(IndexTotalNumberLimitAdvisor)
        registry.register(TableLimitSizeAdvisor)
        registry.register(SystemCharsetAllowlistAdvisor)
        registry.register(DatabaseDropEmptyDatabaseAdvisor)
        registry.register(StatementWhereMaximumLogicalOperatorCountAdvisor)
        registry.register(StatementSelectNoSelectAllAdvisor)
        registry.register(StatementWhereRequireSelectAdvisor)
        registry.register(StatementWhereRequireUpdateDeleteAdvisor)
        registry.register(StatementWhereNoLeadingWildcardLikeAdvisor)
        registry.register(StatementDisallowCommitAdvisor)
        registry.register(StatementInsertMustSpecifyColumnAdvisor)
        registry.register(StatementDisallowMixInDDLAdvisor)
        registry.register(StatementDisallowMixInDMLAdvisor)
        registry.register(TableRequirePKAdvisor)
        registry.register(TableNoForeignKeyAdvisor)
        registry.register(NamingTableAdvisor)

        return registry
