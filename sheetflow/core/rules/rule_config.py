"""
Rule configuration: YAML rule files and a fluent builder for rule sets in code.

Both produce the same plain rule dictionaries consumed by RuleEngine:
rule_name, rule_type, field_name, parameters, severity, enabled, short_circuit.
"""

from enum import Enum
from pathlib import Path
from typing import Any, Callable, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from sheetflow.core.errors import ContractError


class RuleDefinition(BaseModel):
    """One rule entry under a field in a rule file."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    type: str
    name: str | None = None
    severity: Literal["error", "soft"] = "error"
    enabled: bool = True
    short_circuit: bool = True
    params: dict[str, Any] = Field(default_factory=dict, alias="parameters")

    @field_validator("params", mode="before")
    @classmethod
    def empty_params(cls, value: Any) -> Any:
        return {} if value is None else value

    def to_rule(self, field_name: str, position: int) -> dict[str, Any]:
        return {
            "rule_name": self.name or f"{field_name}_{self.type}_{position}",
            "rule_type": self.type,
            "field_name": field_name,
            "parameters": dict(self.params),
            "severity": self.severity,
            "enabled": self.enabled,
            "short_circuit": self.short_circuit,
        }


class RuleConfigLoader:
    """
    Loads a replacement rule set from a YAML file.

    Expected YAML format:
    ```yaml
    entity: event
    rules:
      title:
        - type: required_field
        - type: min_length
          params:
            min_length: 5

      capacity:
        - type: required_field
        - type: range
          name: capacity_positive
          params:
            min_exclusive: 0
        - type: range
          name: capacity_ceiling
          severity: soft
          params:
            max: 1000
    ```

    Rules run in file order. Unnamed rules are called
    ``<field>_<type>_<position>``. ``short_circuit: false`` keeps a rule
    running after an earlier failure on the same field.
    """

    def __init__(self, config_path: str | Path):
        """
        Args:
            config_path: Path to the YAML rule file

        Raises:
            FileNotFoundError: If the file does not exist
        """
        self.config_path = Path(config_path)
        if not self.config_path.is_file():
            raise FileNotFoundError(f"Rule configuration file not found: {config_path}")
        # Entity named by the file, known after load_rules()
        self.entity: str | None = None

    def load_rules(self) -> list[dict[str, Any]]:
        """
        Parse the file into rule dictionaries for RuleEngine.

        Raises:
            ContractError: If the YAML is malformed or a rule entry is invalid
        """
        try:
            document = yaml.safe_load(self.config_path.read_text())
        except yaml.YAMLError as e:
            raise ContractError(f"Invalid YAML in {self.config_path}: {e}") from e

        if not isinstance(document, dict) or "rules" not in document:
            raise ContractError(f"{self.config_path}: configuration file must contain 'rules' section")
        if not isinstance(document["rules"], dict):
            raise ContractError(f"{self.config_path}: 'rules' section must map field names to rule lists")

        self.entity = document.get("entity")
        rules = []
        for field_name, entries in document["rules"].items():
            if not isinstance(entries, list):
                raise ContractError(f"Rules for field '{field_name}' must be a list")
            rules.extend(self._parse_rule(field_name, entry, position) for position, entry in enumerate(entries))
        return rules

    def _parse_rule(self, field_name: str, entry: Any, position: int) -> dict[str, Any]:
        if not isinstance(entry, dict) or "type" not in entry:
            raise ContractError(f"Rule {position} for field '{field_name}' is missing 'type'")
        try:
            definition = RuleDefinition.model_validate(entry)
        except ValidationError as e:
            problem = e.errors()[0]
            location = ".".join(str(part) for part in problem["loc"])
            if location == "severity":
                raise ContractError(
                    f"Invalid severity {entry.get('severity')!r} for rule {position} of field "
                    f"'{field_name}'. Must be 'error' or 'soft'"
                ) from e
            raise ContractError(
                f"Invalid rule {position} for field '{field_name}': {location}: {problem['msg']}"
            ) from e
        return definition.to_rule(field_name, position)


class RuleConfigBuilder:
    """
    Fluent builder for rule sets declared in code.

    Every ``add_*`` method accepts the keyword options ``rule_name``,
    ``severity``, ``short_circuit``, ``message`` and ``label``. Generated
    names are ``<field>_<suffix>``, e.g. ``title_required``, ``capacity_ceiling``.
    """

    def __init__(self):
        self.rules: list[dict[str, Any]] = []

    def _add(
        self,
        rule_type: str,
        field_name: str,
        parameters: dict[str, Any],
        suffix: str | None = None,
        rule_name: str | None = None,
        severity: str = "error",
        short_circuit: bool = True,
        message: str | None = None,
        label: str | None = None,
    ) -> "RuleConfigBuilder":
        if message is not None:
            parameters["message"] = message
        if label is not None:
            parameters["label"] = label
        self.rules.append({
            "rule_name": rule_name or f"{field_name}_{suffix or rule_type}",
            "rule_type": rule_type,
            "field_name": field_name,
            "parameters": parameters,
            "severity": severity,
            "enabled": True,
            "short_circuit": short_circuit,
        })
        return self

    def add_required_field(self, field_name: str, allow_empty_string: bool = False, **options: Any) -> "RuleConfigBuilder":
        """Add a required field rule."""
        return self._add(
            "required_field", field_name, {"allow_empty_string": allow_empty_string}, "required", **options
        )

    def add_type_check(
        self,
        field_name: str,
        expected_type: str,
        coerce: bool = False,
        **options: Any,
    ) -> "RuleConfigBuilder":
        """Add a type check rule."""
        return self._add("type_check", field_name, {"expected_type": expected_type, "coerce": coerce}, **options)

    def add_range(
        self,
        field_name: str,
        min_value: float | None = None,
        max_value: float | None = None,
        min_exclusive: float | None = None,
        max_exclusive: float | None = None,
        **options: Any,
    ) -> "RuleConfigBuilder":
        """Add a numeric bounds rule; ``min_value``/``max_value`` are inclusive."""
        bounds = {"min": min_value, "max": max_value, "min_exclusive": min_exclusive, "max_exclusive": max_exclusive}
        params = {name: bound for name, bound in bounds.items() if bound is not None}
        return self._add("range", field_name, params, **options)

    def add_positive(self, field_name: str, **options: Any) -> "RuleConfigBuilder":
        """Add a strictly-positive range rule."""
        options.setdefault("message", f"{options.get('label') or _label(field_name)} must be greater than 0")
        return self._add("range", field_name, {"min_exclusive": 0}, "positive", **options)

    def add_ceiling(self, field_name: str, maximum: float, **options: Any) -> "RuleConfigBuilder":
        """Add a soft sanity ceiling: exceeding it still rejects the record."""
        options.setdefault("severity", "soft")
        return self._add("range", field_name, {"max": maximum}, "ceiling", **options)

    def add_min_length(self, field_name: str, min_length: int, **options: Any) -> "RuleConfigBuilder":
        """Add a minimum trimmed length rule."""
        return self._add("min_length", field_name, {"min_length": min_length}, **options)

    def add_regex(self, field_name: str, pattern: str, **options: Any) -> "RuleConfigBuilder":
        """Add a regex validation rule."""
        return self._add("regex", field_name, {"pattern": pattern}, **options)

    def add_email(self, field_name: str, **options: Any) -> "RuleConfigBuilder":
        """Add an email address syntax rule."""
        return self._add("email", field_name, {}, **options)

    def add_one_of(
        self,
        field_name: str,
        enum: type[Enum] | str | None = None,
        choices: list[Any] | None = None,
        excluded: list[Any] | None = None,
        excluded_message: str | None = None,
        **options: Any,
    ) -> "RuleConfigBuilder":
        """Add a closed-set membership rule."""
        params: dict[str, Any] = {}
        if enum is not None:
            params["enum"] = enum
        if choices is not None:
            params["choices"] = choices
        if excluded:
            params["excluded"] = excluded
        if excluded_message:
            params["excluded_message"] = excluded_message
        return self._add("one_of", field_name, params, **options)

    def add_not_in_past(self, field_name: str, **options: Any) -> "RuleConfigBuilder":
        return self._add("not_in_past", field_name, {}, **options)

    def add_not_in_future(self, field_name: str, **options: Any) -> "RuleConfigBuilder":
        return self._add("not_in_future", field_name, {}, **options)

    def add_age_window(
        self,
        field_name: str,
        min_years: int | None = None,
        max_years: int | None = None,
        **options: Any,
    ) -> "RuleConfigBuilder":
        """Add a rule bounding how many years ago a date lies."""
        params = {}
        if min_years is not None:
            params["min_years"] = min_years
        if max_years is not None:
            params["max_years"] = max_years
        return self._add("age_window", field_name, params, **options)

    def add_interval(
        self,
        start_field: str,
        end_field: str,
        allow_equal: bool = False,
        **options: Any,
    ) -> "RuleConfigBuilder":
        """Add a start-before-end rule attached to the start field."""
        return self._add(
            "interval", start_field, {"end_field": end_field, "allow_equal": allow_equal}, **options
        )

    def add_min_gap_after(self, field_name: str, anchor_field: str, years: int, **options: Any) -> "RuleConfigBuilder":
        """Add a rule requiring a date to fall ``years`` after another date field."""
        return self._add(
            "min_gap_after", field_name, {"anchor_field": anchor_field, "years": years}, **options
        )

    def add_custom(
        self,
        field_name: str,
        validator_func: Callable[[Any, dict[str, Any]], None] | str,
        error_message: str | None = None,
        reads: list[str] | None = None,
        **options: Any,
    ) -> "RuleConfigBuilder":
        """Add a rule backed by a custom function."""
        params: dict[str, Any] = {"validator_func": validator_func}
        if error_message is not None:
            params["error_message"] = error_message
        if reads:
            params["reads"] = list(reads)
        return self._add("custom", field_name, params, **options)

    def build(self) -> list[dict[str, Any]]:
        """Return the declared rules in declaration order."""
        return list(self.rules)


def _label(field_name: str) -> str:
    return field_name.replace("_", " ").capitalize()
