"""Output formatters for review results."""

from .base import Formatter
from .json_formatter import JsonFormatter
from .text_formatter import TextFormatter

__all__ = ["Formatter", "TextFormatter", "JsonFormatter"]
