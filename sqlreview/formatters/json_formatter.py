"""JSON formatter for review results output."""

import json
from typing import Any, Dict, List, Tuple

from .. import __version__
from ..base import ReviewResult
from .base import Formatter


class JsonFormatter(Formatter):
    """JSON formatter for machine-readable output."""

    def format(self, results: List[Tuple[str, ReviewResult]]) -> str:
        output: Dict[str, Any] = {
            "version": __version__,
            "summary": {"total": 0, "errors": 0, "warnings": 0, "infos": 0},
            "sources": [],
        }
        for source, result in results:
            if not isinstance(result, ReviewResult):
                raise TypeError(f"result must be ReviewResult, got {type(result)}")
            advices = self.filter_advices(result.advices)
            summary = result.summary.model_dump()
            for key in output["summary"]:
                output["summary"][key] += summary[key]
            output["sources"].append(
                {
                    "source": source,
                    "summary": summary,
                    "advices": [advice.model_dump(mode="json") for advice in advices],
                }
            )
        return json.dumps(output, ensure_ascii=False, indent=2)
