"""
MinLengthValidator - validates the trimmed length of text fields.
"""

from datetime import datetime
from typing import Any

from .base_validator import BaseValidator


class MinLengthValidator(BaseValidator):
    """
    Validates that a text field has at least ``min_length`` characters after trimming.

    Non-text values are left to type_check.
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        self.min_length = self.parameters.get("min_length")
        if not isinstance(self.min_length, int) or isinstance(self.min_length, bool) or self.min_length < 0:
            raise ValueError("MinLengthValidator requires a non-negative integer 'min_length' parameter")

    def validate(self, value: Any, record: dict[str, Any], now: datetime | None = None) -> None:
        if not isinstance(value, str):
            return
        if len(value.strip()) < self.min_length:
            self.fail(f"{self.label} must be at least {self.min_length} characters")

    @property
    def rule_type(self) -> str:
        return "min_length"
