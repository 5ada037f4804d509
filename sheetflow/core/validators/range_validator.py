"""
RangeValidator - numeric bounds.
"""

import operator
from datetime import datetime
from typing import Any

from .base_validator import BaseValidator

# parameter name -> (comparison that signals a violation, message fragment)
BOUND_CHECKS = {
    "min": (operator.lt, "must be at least"),
    "min_exclusive": (operator.le, "must be greater than"),
    "max": (operator.gt, "cannot exceed"),
    "max_exclusive": (operator.ge, "must be less than"),
}


def is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


class RangeValidator(BaseValidator):
    """
    Validates that a number lies within the configured bounds.

    Any combination of ``min``, ``max`` (inclusive) and ``min_exclusive``,
    ``max_exclusive`` may be given; at least one is required. Lower bounds
    are checked before upper bounds and the first broken bound is reported.
    Booleans are not numbers here.
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        self.bounds = {
            name: self.parameters[name]
            for name in BOUND_CHECKS
            if self.parameters.get(name) is not None
        }
        if not self.bounds:
            raise ValueError(f"RangeValidator requires at least one of: {', '.join(BOUND_CHECKS)}")
        for name, bound in self.bounds.items():
            if not is_number(bound):
                raise ValueError(f"RangeValidator bound '{name}' must be numeric, got {bound!r}")

    def validate(self, value: Any, record: dict[str, Any], now: datetime | None = None) -> None:
        if value is None:
            return

        if not is_number(value):
            self.fail(f"{self.label} must be numeric, got {type(value).__name__}")

        for name, bound in self.bounds.items():
            violated, fragment = BOUND_CHECKS[name]
            if violated(value, bound):
                self.fail(f"{self.label} {fragment} {bound}")

    @property
    def rule_type(self) -> str:
        return "range"
