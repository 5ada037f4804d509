"""
Validation rule implementations.

Provides validators for required fields, type checking, ranges, lengths, regex
patterns, email addresses, closed value sets, date rules, intervals and custom
validation logic.
"""

from .base_validator import BaseValidator, ValidationError
from .custom_validator import CustomValidator
from .date_validators import (
    AgeWindowValidator,
    MinGapAfterValidator,
    NotInFutureValidator,
    NotInPastValidator,
)
from .email_address_validator import EmailValidator
from .interval_validator import IntervalValidator
from .min_length_validator import MinLengthValidator
from .one_of_validator import OneOfValidator
from .range_validator import RangeValidator
from .regex_validator import RegexValidator
from .required_field_validator import RequiredFieldValidator
from .type_validator import TypeValidator

__all__ = [
    "BaseValidator",
    "ValidationError",
    "RequiredFieldValidator",
    "TypeValidator",
    "RangeValidator",
    "MinLengthValidator",
    "RegexValidator",
    "EmailValidator",
    "OneOfValidator",
    "NotInPastValidator",
    "NotInFutureValidator",
    "AgeWindowValidator",
    "IntervalValidator",
    "MinGapAfterValidator",
    "CustomValidator",
]
