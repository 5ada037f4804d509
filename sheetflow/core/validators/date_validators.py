"""
Date and time validators.

All of them compare against the validation instant supplied by the rule engine,
so a record is judged against one clock reading no matter how many date rules
it carries.
"""

from datetime import date, datetime
from typing import Any

from ...utils.dates import as_date, comparable, shift_years
from .base_validator import BaseValidator


def _is_temporal(value: Any) -> bool:
    return isinstance(value, date)


class NotInPastValidator(BaseValidator):
    """Validates that a forward-looking date or timestamp is not before the validation instant."""

    def validate(self, value: Any, record: dict[str, Any], now: datetime | None = None) -> None:
        if not _is_temporal(value):
            return
        value, reference = comparable(value, now or datetime.now())
        if value < reference:
            self.fail(f"{self.label} cannot be in the past")

    @property
    def rule_type(self) -> str:
        return "not_in_past"


class NotInFutureValidator(BaseValidator):
    """Validates that a date or timestamp is not after the validation instant."""

    def validate(self, value: Any, record: dict[str, Any], now: datetime | None = None) -> None:
        if not _is_temporal(value):
            return
        value, reference = comparable(value, now or datetime.now())
        if value > reference:
            self.fail(f"{self.label} cannot be in the future")

    @property
    def rule_type(self) -> str:
        return "not_in_future"


class AgeWindowValidator(BaseValidator):
    """
    Validates that a date lies between ``max_years`` and ``min_years`` years before today.

    Parameters:
    - min_years: The date must be at least this many years ago
    - max_years: The date cannot be more than this many years ago
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        self.min_years = self.parameters.get("min_years")
        self.max_years = self.parameters.get("max_years")
        if self.min_years is None and self.max_years is None:
            raise ValueError("AgeWindowValidator requires 'min_years' or 'max_years' parameter")
        for bound in (self.min_years, self.max_years):
            if bound is not None and (not isinstance(bound, int) or bound < 0):
                raise ValueError("AgeWindowValidator bounds must be non-negative integers")
        if self.min_years is not None and self.max_years is not None and self.min_years > self.max_years:
            raise ValueError("min_years cannot exceed max_years")

    def validate(self, value: Any, record: dict[str, Any], now: datetime | None = None) -> None:
        if not _is_temporal(value):
            return
        value = as_date(value)
        today = (now or datetime.now()).date()

        if self.max_years is not None and value < shift_years(today, -self.max_years):
            self.fail(f"{self.label} cannot be more than {self.max_years} years ago")

        if self.min_years is not None and value > shift_years(today, -self.min_years):
            self.fail(f"{self.label} must be at least {self.min_years} years ago")

    @property
    def rule_type(self) -> str:
        return "age_window"


class MinGapAfterValidator(BaseValidator):
    """
    Validates that a date falls at least ``years`` years after another date field.

    Parameters:
    - anchor_field: Field holding the earlier date
    - years: Minimum gap in whole years
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        self.anchor_field = self.parameters.get("anchor_field")
        if not self.anchor_field:
            raise ValueError("MinGapAfterValidator requires 'anchor_field' parameter")
        self.years = self.parameters.get("years")
        if not isinstance(self.years, int) or self.years < 0:
            raise ValueError("MinGapAfterValidator requires a non-negative integer 'years' parameter")
        self.anchor_label = self.parameters.get("anchor_label") or self.anchor_field.replace("_", " ")

    @property
    def referenced_fields(self) -> tuple[str, ...]:
        return (self.anchor_field,)

    def validate(self, value: Any, record: dict[str, Any], now: datetime | None = None) -> None:
        anchor = record.get(self.anchor_field)
        if not _is_temporal(value) or not _is_temporal(anchor):
            return
        if as_date(value) < shift_years(as_date(anchor), self.years):
            self.fail(f"{self.label} must be at least {self.years} years after {self.anchor_label}")

    @property
    def rule_type(self) -> str:
        return "min_gap_after"
