"""sqlreview - static review of MySQL statements with pluggable rules."""

__version__ = "0.1.0"

from .base import Advisor, CheckContext, ReviewResult, Summary
from .catalog import Catalog, DatabaseSchemaMetadata
from .config import Config, default_config, load_config, load_schema_metadata
from .models import Advice, AdviceCode, AdviceStatus, ChangeType, Position, ReviewRule, RuleLevel
from .reviewer import Reviewer
from .rules.registry import AdvisorRegistry


__all__ = [
    "Advice",
    "AdviceCode",
    "AdviceStatus",
    "Advisor",
    "AdvisorRegistry",
    "Catalog",
    "ChangeType",
    "CheckContext",
    "Config",
    "DatabaseSchemaMetadata",
    "Position",
    "ReviewResult",
    "ReviewRule",
    "Reviewer",
    "RuleLevel",
    "Summary",
    "default_config",
    "load_config",
    "load_schema_metadata",
    "__version__",
]
