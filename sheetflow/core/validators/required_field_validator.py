"""
RequiredFieldValidator - a field must carry a value.
"""

from datetime import datetime
from typing import Any

from .base_validator import BaseValidator


def is_blank(value: Any) -> bool:
    return isinstance(value, str) and not value.strip()


class RequiredFieldValidator(BaseValidator):
    """
    Fails when the field is absent from the record, None, or (unless
    ``allow_empty_string`` is set) a whitespace-only string.

    Usually the first rule declared for a field, so that later rules of the
    same field can assume a value.
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)
        self.allow_empty_string = bool(self.parameters.get("allow_empty_string", False))

    def validate(self, value: Any, record: dict[str, Any], now: datetime | None = None) -> None:
        if self.field_name not in record:
            self.fail(f"{self.label} is missing from record")

        if value is None or (is_blank(value) and not self.allow_empty_string):
            self.fail(f"{self.label} is required")

    @property
    def rule_type(self) -> str:
        return "required_field"
