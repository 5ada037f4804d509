"""
Validator interface shared by every rule type.

A validator checks one field of one record. It receives the field value, a
read-only snapshot of the whole record for cross-field rules, and the
validation instant for date rules. Failure is signalled by raising
ValidationError; the rule engine turns it into a Violation.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, NoReturn


class ValidationError(Exception):
    """A single rule failed for a single field."""

    def __init__(self, rule_name: str, field_name: str, message: str):
        self.rule_name = rule_name
        self.field_name = field_name
        self.message = message
        super().__init__(f"[{rule_name}] {field_name}: {message}")


class BaseValidator(ABC):
    """
    Base class for rule types.

    Parameters understood by every rule type:
    - label: Field name as shown in messages (default: "price_per_hour" -> "Price per hour")
    - message: Fixed failure message replacing the rule's own

    Subclasses raise ValueError from __init__ when their parameters are
    unusable; the engine reports that as a contract error.
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        self.field_name = field_name
        self.parameters = parameters or {}
        self.label = self.parameters.get("label") or field_name.replace("_", " ").capitalize()
        self.message = self.parameters.get("message")

    @abstractmethod
    def validate(self, value: Any, record: dict[str, Any], now: datetime | None = None) -> None:
        """
        Check one value.

        Args:
            value: Value of ``field_name`` in the record
            record: Field snapshot of the whole record
            now: Validation instant shared by all rules of one validate call

        Raises:
            ValidationError: If the value breaks the rule
        """

    @property
    @abstractmethod
    def rule_type(self) -> str:
        """Identifier under which the engine registers this rule type."""

    @property
    def referenced_fields(self) -> tuple[str, ...]:
        """Record fields read besides ``field_name``."""
        return ()

    def fail(self, default_message: str) -> NoReturn:
        raise ValidationError(
            rule_name=self.rule_type,
            field_name=self.field_name,
            message=self.message or default_message,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.field_name!r}, {self.parameters!r})"
