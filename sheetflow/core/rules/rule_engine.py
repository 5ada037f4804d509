"""
Rule engine for orchestrating validation rules on records.

The rule engine builds validators from rule configurations, checks them against
the entity model, applies them to records in declared order, and produces
violations.
"""

from collections import Counter
from datetime import datetime
from typing import Any, Callable, Iterable, NamedTuple

from sheetflow.core.errors import ContractError
from sheetflow.core.models import Record, ValidationResult, Violation
from sheetflow.core.validators import (
    AgeWindowValidator,
    BaseValidator,
    CustomValidator,
    EmailValidator,
    IntervalValidator,
    MinGapAfterValidator,
    MinLengthValidator,
    NotInFutureValidator,
    NotInPastValidator,
    OneOfValidator,
    RangeValidator,
    RegexValidator,
    RequiredFieldValidator,
    TypeValidator,
    ValidationError,
)

SEVERITIES = ("error", "soft")


class CompiledRule(NamedTuple):
    rule_name: str
    severity: str
    short_circuit: bool
    validator: BaseValidator


class RuleEngine:
    """
    Orchestrates validation rules on records.

    Rules run in declared order and all violations are collected. Within one
    field, a failure skips the field's later rules unless a rule is declared
    with ``short_circuit: False``. Any violation, soft or not, rejects the record.
    """

    VALIDATOR_REGISTRY = {
        "required_field": RequiredFieldValidator,
        "type_check": TypeValidator,
        "range": RangeValidator,
        "min_length": MinLengthValidator,
        "regex": RegexValidator,
        "email": EmailValidator,
        "one_of": OneOfValidator,
        "not_in_past": NotInPastValidator,
        "not_in_future": NotInFutureValidator,
        "age_window": AgeWindowValidator,
        "interval": IntervalValidator,
        "min_gap_after": MinGapAfterValidator,
        "custom": CustomValidator,
    }

    def __init__(
        self,
        rules: list[dict[str, Any]],
        model: type[Record] | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Compile rule configurations into validators.

        Args:
            rules: List of rule configurations, each containing:
                   - rule_name: str
                   - rule_type: str (see VALIDATOR_REGISTRY)
                   - field_name: str
                   - parameters: dict of rule-type parameters (optional)
                   - severity: str (error or soft)
                   - enabled: bool (default True)
                   - short_circuit: bool (default True)
            model: Entity model the rules must match (field names are checked when given)
            clock: Returns the validation instant; read once per validated record

        Raises:
            ContractError: If a rule has an unknown type, unusable parameters,
                or references a field the model does not declare
        """
        self.rules = rules
        self.model = model
        self.clock = clock
        self.validators: list[CompiledRule] = []
        self._build_validators()

    @property
    def entity_label(self) -> str:
        return self.model.__name__ if self.model is not None else "Record"

    def _build_validators(self) -> None:
        """Build validator instances from rule configurations."""
        for rule in self.rules:
            if not rule.get("enabled", True):
                continue

            try:
                rule_name = rule["rule_name"]
                rule_type = rule["rule_type"]
                field_name = rule["field_name"]
            except KeyError as e:
                raise ContractError(f"Rule {rule!r} is missing key {e}") from e
            parameters = rule.get("parameters") or {}
            severity = rule.get("severity", "error")
            short_circuit = rule.get("short_circuit", True)

            if severity not in SEVERITIES:
                raise ContractError(f"Invalid severity '{severity}' for rule '{rule_name}'")

            validator_class = self.VALIDATOR_REGISTRY.get(rule_type)
            if not validator_class:
                raise ContractError(f"Unknown rule type: {rule_type}")

            try:
                validator = validator_class(field_name, parameters)
            except (ValueError, TypeError) as e:
                raise ContractError(f"Failed to create validator for rule '{rule_name}': {e}") from e

            self._check_fields(rule_name, (field_name, *validator.referenced_fields))
            self.validators.append(CompiledRule(rule_name, severity, bool(short_circuit), validator))

    def _check_fields(self, rule_name: str, field_names: Iterable[str]) -> None:
        if self.model is None:
            return
        for field_name in field_names:
            if field_name not in self.model.model_fields:
                raise ContractError(
                    f"Rule '{rule_name}' references field '{field_name}' "
                    f"not declared by {self.entity_label}"
                )

    def validate(self, record: Record | dict[str, Any] | None) -> list[Violation]:
        """
        Validate a record against all rules.

        Args:
            record: Record (or plain field mapping) to validate

        Returns:
            Violations in declared rule order; empty when the record is valid
        """
        if record is None:
            return [
                Violation(
                    field_name="record",
                    rule_name="record_not_null",
                    rule_type="required_field",
                    message=f"{self.entity_label} cannot be null",
                )
            ]

        payload = record.snapshot() if isinstance(record, Record) else dict(record)
        now = self.clock()
        failed_fields: set[str] = set()
        violations: list[Violation] = []

        for rule in self.validators:
            field_name = rule.validator.field_name
            if rule.short_circuit and field_name in failed_fields:
                continue

            try:
                rule.validator.validate(payload.get(field_name), payload, now)
            except ValidationError as e:
                failed_fields.add(field_name)
                violations.append(
                    Violation(
                        field_name=field_name,
                        rule_name=rule.rule_name,
                        rule_type=rule.validator.rule_type,
                        message=e.message,
                        severity=rule.severity,
                    )
                )

        return violations

    def is_valid(self, record: Record | dict[str, Any] | None) -> bool:
        return not self.validate(record)

    def validate_record(self, record: Record | None) -> ValidationResult:
        """
        Validate a record and wrap the outcome.

        Args:
            record: The record to validate

        Returns:
            ValidationResult containing pass/fail status and the violations
        """
        violations = self.validate(record)
        return ValidationResult(
            record_id=record.record_id if isinstance(record, Record) else None,
            passed=not violations,
            violations=violations,
        )

    def validate_batch(self, records: list[Record]) -> list[ValidationResult]:
        """
        Validate a batch of records.

        Args:
            records: List of records

        Returns:
            List of ValidationResult objects, one per record
        """
        return [self.validate_record(record) for record in records]

    def describe_rules(self) -> list[dict[str, Any]]:
        """Active rules in evaluation order, for listing."""
        return [
            {
                "rule_name": rule.rule_name,
                "rule_type": rule.validator.rule_type,
                "field_name": rule.validator.field_name,
                "severity": rule.severity,
                "short_circuit": rule.short_circuit,
            }
            for rule in self.validators
        ]

    def get_rule_summary(self) -> dict[str, Any]:
        """Counts of active rules, overall and per rule type and severity."""
        return {
            "entity": self.entity_label,
            "total_rules": len(self.validators),
            "rules_by_type": dict(Counter(rule.validator.rule_type for rule in self.validators)),
            "rules_by_severity": dict(Counter(rule.severity for rule in self.validators)),
        }
