"""
TypeValidator - checks the Python type of a field value.
"""

from datetime import date, datetime
from typing import Any

from dateutil.parser import isoparse, isoparser

from .base_validator import BaseValidator

TRUE_WORDS = frozenset({"true", "1", "yes"})
FALSE_WORDS = frozenset({"false", "0", "no"})


def parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    word = str(value).strip().lower()
    if word in TRUE_WORDS:
        return True
    if word in FALSE_WORDS:
        return False
    raise ValueError(f"Cannot parse {value!r} as boolean")


def parse_date(value: Any) -> date:
    # date-only: a trailing time component is rejected
    return isoparser().parse_isodate(str(value).strip())


def parse_datetime(value: Any) -> datetime:
    return isoparse(str(value).strip())


def parse_int(value: Any) -> int:
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"{value!r} has a fractional part")
    return int(value)


# type name -> (python type, parser used when coercion is enabled)
# Names cover the logical column types of entity profiles plus common aliases.
TYPE_MAPPING = {
    "int": (int, parse_int),
    "integer": (int, parse_int),
    "float": (float, float),
    "double": (float, float),
    "decimal": (float, float),
    "string": (str, str),
    "str": (str, str),
    "bool": (bool, parse_bool),
    "boolean": (bool, parse_bool),
    "date": (date, parse_date),
    "datetime": (datetime, parse_datetime),
    "timestamp": (datetime, parse_datetime),
}


class TypeValidator(BaseValidator):
    """
    Validates that a value has the expected type.

    Parameters:
    - expected_type: A name from TYPE_MAPPING or one of its Python types
    - coerce: Also accept values the type's parser converts cleanly
      (e.g. "99.99" for float); default False

    Booleans never satisfy a numeric type, integers satisfy float, and a
    datetime does not satisfy date.
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        expected = self.parameters.get("expected_type")
        if not expected:
            raise ValueError("TypeValidator requires 'expected_type' parameter")

        if isinstance(expected, str):
            if expected.lower() not in TYPE_MAPPING:
                raise ValueError(f"Unsupported type: {expected}")
            self.expected_type, self.parser = TYPE_MAPPING[expected.lower()]
        else:
            self.expected_type = expected
            self.parser = next(
                (parser for python_type, parser in TYPE_MAPPING.values() if python_type is expected),
                expected,
            )

        self.coerce = bool(self.parameters.get("coerce", False))

    def matches(self, value: Any) -> bool:
        if isinstance(value, bool):
            return self.expected_type is bool
        if self.expected_type is float:
            return isinstance(value, int | float)
        if self.expected_type is date:
            return isinstance(value, date) and not isinstance(value, datetime)
        return isinstance(value, self.expected_type)

    def validate(self, value: Any, record: dict[str, Any], now: datetime | None = None) -> None:
        if value is None or self.matches(value):
            return

        if self.coerce:
            try:
                self.parser(value)
                return
            except (ValueError, TypeError):
                pass

        self.fail(f"{self.label} must be of type {self.expected_type.__name__}")

    @property
    def rule_type(self) -> str:
        return "type_check"
