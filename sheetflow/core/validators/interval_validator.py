"""
IntervalValidator - validates that a start value precedes an end value.
"""

from datetime import datetime
from typing import Any

from .base_validator import BaseValidator


class IntervalValidator(BaseValidator):
    """
    Validates ordering between the rule's field (the start) and another field (the end).

    Parameters:
    - end_field: Field holding the end of the interval
    - allow_equal: Accept start == end (default False)

    Either bound being absent is left to required_field.
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        self.end_field = self.parameters.get("end_field")
        if not self.end_field:
            raise ValueError("IntervalValidator requires 'end_field' parameter")
        self.allow_equal = bool(self.parameters.get("allow_equal", False))
        self.end_label = self.parameters.get("end_label") or self.end_field.replace("_", " ")

    @property
    def referenced_fields(self) -> tuple[str, ...]:
        return (self.end_field,)

    def validate(self, value: Any, record: dict[str, Any], now: datetime | None = None) -> None:
        end = record.get(self.end_field)
        if value is None or end is None:
            return

        try:
            inverted = value > end or (value == end and not self.allow_equal)
        except TypeError:
            self.fail(f"{self.label} and {self.end_label} cannot be compared")

        if inverted:
            if self.allow_equal:
                self.fail(f"{self.label} cannot be after {self.end_label}")
            self.fail(f"{self.label} must be before {self.end_label}")

    @property
    def rule_type(self) -> str:
        return "interval"
