"""
OneOfValidator - validates membership in a closed set of values.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from ..models import status as status_models
from .base_validator import BaseValidator


class OneOfValidator(BaseValidator):
    """
    Validates that a field holds a member of a closed set.

    Parameters:
    - enum: Enum class, or the name of one of the status enums (e.g. "ReservationStatus")
    - choices: Explicit list of accepted values (alternative to enum)
    - excluded: Members that are recognised but not accepted
    - excluded_message: Message used when an excluded member is found
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        enum_cls = self.parameters.get("enum")
        choices = self.parameters.get("choices")
        if enum_cls is None and choices is None:
            raise ValueError("OneOfValidator requires 'enum' or 'choices' parameter")

        if isinstance(enum_cls, str):
            resolved = getattr(status_models, enum_cls, None)
            if not (isinstance(resolved, type) and issubclass(resolved, Enum)):
                raise ValueError(f"Unknown status enum: {enum_cls}")
            enum_cls = resolved

        self.enum_cls: type[Enum] | None = enum_cls
        if enum_cls is not None:
            self.choices = list(enum_cls)
        else:
            self.choices = list(choices)

        self.excluded = [self._resolve(item) for item in self.parameters.get("excluded", [])]
        if any(item not in self.choices for item in self.excluded):
            raise ValueError(f"Excluded values must be among the accepted choices: {self.excluded}")
        self.excluded_message = self.parameters.get("excluded_message")

    def _resolve(self, value: Any) -> Any:
        if self.enum_cls is not None:
            return status_models.parse_status(self.enum_cls, value)
        return value

    def validate(self, value: Any, record: dict[str, Any], now: datetime | None = None) -> None:
        """
        Validate that the value is an accepted member.

        Raises:
            ValidationError: If the value is unrecognised or excluded
        """
        # None is handled by required_field
        if value is None:
            return

        member = self._resolve(value)
        if member not in self.choices:
            self.fail(f"{self.label} '{value}' is not a recognised value")

        if member in self.excluded:
            text = self.excluded_message or f"{self.label} '{_display(member)}' is not accepted"
            self.fail(text)

    @property
    def rule_type(self) -> str:
        return "one_of"


def _display(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value
