"""
EmailValidator - standard email address syntax.
"""

from datetime import datetime
from typing import Any

from email_validator import EmailNotValidError, validate_email

from .base_validator import BaseValidator


class EmailValidator(BaseValidator):
    """
    Validates that a value is a syntactically valid email address.

    Syntax only: the domain is not looked up.

    Parameters:
    - allow_smtputf8: Accept internationalized local parts (default: True)
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)
        self.allow_smtputf8 = bool(self.parameters.get("allow_smtputf8", True))

    def validate(self, value: Any, record: dict[str, Any], now: datetime | None = None) -> None:
        if value is None:
            return

        text = str(value)
        try:
            validate_email(text, check_deliverability=False, allow_smtputf8=self.allow_smtputf8)
        except EmailNotValidError:
            self.fail(f"{self.label} '{text}' is not a valid email address")

    @property
    def rule_type(self) -> str:
        return "email"
