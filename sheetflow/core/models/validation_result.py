"""
Violation and ValidationResult models describing the outcome of validating a record (ephemeral).
"""

from typing import Any, List, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Violation(BaseModel):
    """
    A failed rule on one field (or cross-field relationship) of a record.

    Attributes:
        field_name: Field the rule is attached to
        rule_name: Name of the failing rule
        rule_type: Type of the failing rule (range, regex, ...)
        message: Human-readable explanation
        severity: "error", or "soft" for sanity ceilings (both reject the record)
    """

    model_config = ConfigDict(frozen=True)

    field_name: str
    rule_name: str
    rule_type: str
    message: str
    severity: Literal["error", "soft"] = "error"

    def __str__(self) -> str:
        return self.message


class ValidationResult(BaseModel):
    """
    Outcome of validating a record (ephemeral, used during processing).

    Attributes:
        record_id: Identifier of the validated record (None if it has none)
        passed: Overall validation status
        violations: Violations in declared rule order
    """

    record_id: Any = None
    passed: bool
    violations: List[Violation] = Field(default_factory=list)

    @field_validator('violations')
    @classmethod
    def check_passed_consistency(cls, v, info):
        """Validate that passed=True implies no violations."""
        if info.data.get('passed') and len(v) > 0:
            raise ValueError("passed=True but violations is not empty")
        return v

    @property
    def failed_rules(self) -> List[str]:
        return [violation.rule_name for violation in self.violations]

    @property
    def messages(self) -> List[str]:
        return [violation.message for violation in self.violations]
