"""Base interface for output formatters."""

from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from ..base import ReviewResult
from ..models import Advice, AdviceStatus

_STATUS_ORDER = {AdviceStatus.INFO: 0, AdviceStatus.WARNING: 1, AdviceStatus.ERROR: 2}


class Formatter(ABC):
    """Abstract class for formatting review results."""

    def __init__(self, min_status: Optional[AdviceStatus] = None, no_color: bool = False) -> None:
        """
        Initialize formatter.

        Args:
            min_status: Minimum advice status for output
            no_color: Disable colored output
        """
        self.min_status = min_status
        self.no_color = no_color

    def filter_advices(self, advices: List[Advice]) -> List[Advice]:
        """
        Filter advice by minimum status.

        Args:
            advices: Advice to filter

        Returns:
            Advice at or above the minimum status
        """
        if self.min_status is None:
            return list(advices)
        min_level = _STATUS_ORDER[self.min_status]
        return [advice for advice in advices if _STATUS_ORDER[advice.status] >= min_level]

    @abstractmethod
    def format(self, results: List[Tuple[str, ReviewResult]]) -> str:
        """
        Format review results.

        Args:
            results: List of tuples (source name, review result)

        Returns:
            Formatted string
        """
        pass
