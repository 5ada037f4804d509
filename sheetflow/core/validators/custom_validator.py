"""
CustomValidator - delegates to a user-supplied function.
"""

import importlib
from collections.abc import Callable
from datetime import datetime
from typing import Any

from .base_validator import BaseValidator

CheckFunction = Callable[[Any, dict[str, Any]], None]


def resolve_check(target: CheckFunction | str) -> CheckFunction:
    """
    Return the check function itself, or import it from a "package.module:function" path.

    Raises:
        ValueError: If the path cannot be resolved to a callable
    """
    if not isinstance(target, str):
        if not callable(target):
            raise ValueError(f"validator_func must be callable, got {type(target).__name__}")
        return target

    module_name, _, attribute = target.partition(":")
    if not module_name or not attribute:
        raise ValueError(f"validator_func path must look like 'module:function', got '{target}'")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ValueError(f"Cannot import validator module '{module_name}': {e}") from e

    func = getattr(module, attribute, None)
    if not callable(func):
        raise ValueError(f"'{target}' is not a callable")
    return func


class CustomValidator(BaseValidator):
    """
    Runs ``validator_func(value, record)``; any exception it raises is a violation.

    Parameters:
    - validator_func: The function, or its "module:function" path in rule files
    - error_message: Prefix of the failure message (the exception text follows)
    - reads: Other record fields the function looks at

    Example:
        def not_negative(value, record):
            if value < 0:
                raise ValueError("negative")
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        target = self.parameters.get("validator_func")
        if not target:
            raise ValueError("CustomValidator requires 'validator_func' parameter")
        self.validator_func = resolve_check(target)
        self.error_message = self.parameters.get("error_message", "Custom validation failed")
        self.reads = tuple(self.parameters.get("reads") or ())

    @property
    def referenced_fields(self) -> tuple[str, ...]:
        return self.reads

    def validate(self, value: Any, record: dict[str, Any], now: datetime | None = None) -> None:
        try:
            self.validator_func(value, record)
        except Exception as e:
            self.fail(f"{self.error_message}: {e}")

    @property
    def rule_type(self) -> str:
        return "custom"
