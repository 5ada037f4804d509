"""
RegexValidator - whole-value pattern matching for text fields.
"""

import re
from datetime import datetime
from typing import Any

from .base_validator import BaseValidator


class RegexValidator(BaseValidator):
    """
    Validates that the whole value matches a pattern (``re.fullmatch``).

    Parameters:
    - pattern: Pattern text or a compiled ``re.Pattern``
    - flags: re flags for a text pattern
    - case_insensitive: Shorthand for adding re.IGNORECASE

    Non-string values are matched against their ``str()`` form.
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)
        self.pattern = self._compile(
            self.parameters.get("pattern"),
            self.parameters.get("flags", 0) | (re.IGNORECASE if self.parameters.get("case_insensitive") else 0),
        )

    @staticmethod
    def _compile(pattern: Any, flags: int) -> re.Pattern:
        if isinstance(pattern, re.Pattern):
            return pattern
        if not pattern:
            raise ValueError("RegexValidator requires a 'pattern' parameter")
        if not isinstance(pattern, str):
            raise ValueError(f"Pattern must be text or a compiled pattern, got {type(pattern).__name__}")

        try:
            return re.compile(pattern, flags)
        except re.error as e:
            raise ValueError(f"Invalid regex pattern {pattern!r}: {e}") from e

    def validate(self, value: Any, record: dict[str, Any], now: datetime | None = None) -> None:
        if value is None:
            return

        text = str(value)
        if self.pattern.fullmatch(text) is None:
            self.fail(f"{self.label} '{text}' does not match pattern '{self.pattern.pattern}'")

    @property
    def rule_type(self) -> str:
        return "regex"
