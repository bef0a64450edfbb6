"""Text formatter for review results output."""

from typing import List, Tuple

from ..base import ReviewResult
from ..models import Advice, AdviceStatus
from .base import Formatter
from .colors import COLOR_CYAN, COLOR_GREEN, COLOR_RED, COLOR_RESET, COLOR_YELLOW


class TextFormatter(Formatter):
    """Text formatter with color and emoji support."""

    EMOJI = {
        AdviceStatus.ERROR: "🔴",
        AdviceStatus.WARNING: "🟡",
        AdviceStatus.INFO: "🟢",
    }
    COLORS = {
        AdviceStatus.ERROR: COLOR_RED,
        AdviceStatus.WARNING: COLOR_YELLOW,
        AdviceStatus.INFO: COLOR_GREEN,
    }

    def _colorize(self, text: str, color: str) -> str:
        """Add color to text if colors are not disabled."""
        if self.no_color:
            return text
        return f"{color}{text}{COLOR_RESET}"

    def format(self, results: List[Tuple[str, ReviewResult]]) -> str:
        output_lines = []
        for source, result in results:
            output_lines.append(self.format_single(source, result))
            output_lines.append("")
        return "\n".join(output_lines)

    def format_single(self, source: str, result: ReviewResult) -> str:
        """Format the review result of one SQL source."""
        if not isinstance(result, ReviewResult):
            raise TypeError(f"result must be ReviewResult, got {type(result)}")

        lines = [self._colorize(f"📄 {source}", COLOR_CYAN)]
        advices = self.filter_advices(result.advices)
        if not advices:
            lines.append(self._colorize("✅ No issues found.", COLOR_GREEN))
            return "\n".join(lines)

        lines.append(str(result))
        for advice in advices:
            lines.append("")
            lines.extend(self._format_advice(advice))
        return "\n".join(lines)

    def _format_advice(self, advice: Advice) -> List[str]:
        status = self._colorize(advice.status.value, self.COLORS.get(advice.status, ""))
        location = f"line {advice.start_position.line + 1}" if advice.start_position is not None else "unknown line"
        return [
            f"   {self.EMOJI.get(advice.status, '⚪')} [{status}] {advice.title} (code {advice.code}, {location})",
            f"      {advice.content}",
        ]
