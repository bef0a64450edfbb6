"""Rule payload unmarshalling.

Payloads come from configuration files as plain dictionaries. Each helper
validates the shape one family of rules expects and raises ValueError when
it does not match.
"""

import re
from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class NumberPayload(BaseModel):
    number: int


class StringListPayload(BaseModel):
    list: List[str]


class NamingPayload(BaseModel):
    """Naming convention payload.

    Attributes:
        format: Regular expression a name must match.
        max_length: Maximum name length, 0 for no limit.
    """

    format: str
    max_length: int = 0

    def compile(self) -> "re.Pattern[str]":
        """
        Compile the naming format.

        Raises:
            ValueError: If the format is not a valid regular expression
        """
        try:
            return re.compile(self.format)
        except re.error as e:
            raise ValueError(f"failed to compile regular expression {self.format!r}: {e}") from e


def _require(payload: Optional[Dict[str, Any]], key: str) -> Any:
    if payload is None:
        raise ValueError("payload is nil")
    if key not in payload:
        raise ValueError(f"missing '{key}' field in payload")
    return payload[key]


def unmarshal_number_payload(payload: Optional[Dict[str, Any]]) -> NumberPayload:
    """
    Read a {"number": N} payload.

    Floats are truncated, booleans and strings are rejected.

    Raises:
        ValueError: If the payload is missing or malformed
    """
    value = _require(payload, "number")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError("invalid number type in payload")
    return NumberPayload(number=int(value))


def unmarshal_string_list_payload(payload: Optional[Dict[str, Any]]) -> StringListPayload:
    """
    Read a {"list": [...]} payload. A null list is an empty list.

    Raises:
        ValueError: If the payload is missing, not a list, or holds non-strings
    """
    value = _require(payload, "list")
    if value is None:
        return StringListPayload(list=[])
    if not isinstance(value, (list, tuple)):
        raise ValueError("'list' field is not an array")
    for item in value:
        if not isinstance(item, str):
            raise ValueError("non-string item in list")
    return StringListPayload(list=list(value))


def unmarshal_naming_payload(payload: Optional[Dict[str, Any]]) -> NamingPayload:
    """
    Read a {"format": regex, "maxLength": N} payload; maxLength is optional.

    Raises:
        ValueError: If the payload is missing or malformed
    """
    value = _require(payload, "format")
    if not isinstance(value, str):
        raise ValueError("'format' field is not a string")
    max_length = payload.get("maxLength", 0)
    if isinstance(max_length, bool) or not isinstance(max_length, (int, float)):
        raise ValueError("'maxLength' field is not a number")
    return NamingPayload(format=value, max_length=int(max_length))
