"""
Unit tests for rule engine and rule configuration.
"""

from datetime import date, datetime

import pytest

from sheetflow.core.errors import ContractError
from sheetflow.core.models import Employee, Event
from sheetflow.core.rules import RuleConfigBuilder, RuleConfigLoader, RuleEngine

NOW = datetime(2026, 3, 2, 10, 0, 0)

RULES_YAML = """
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
  status:
    - type: one_of
      params:
        enum: EventStatus
"""


def title_rules():
    return (
        RuleConfigBuilder()
        .add_required_field("title")
        .add_min_length("title", 5)
        .build()
    )


class TestRuleEngine:
    """Tests for RuleEngine"""

    def test_valid_record(self):
        """Test validation passes when all rules pass"""
        engine = RuleEngine(title_rules(), model=Event)

        assert engine.validate(Event(id=1, title="Spring conference")) == []
        assert engine.is_valid(Event(id=1, title="Spring conference"))

    def test_blank_title_reported_once(self):
        """Test a failing rule skips the field's later rules"""
        engine = RuleEngine(title_rules(), model=Event)

        violations = engine.validate(Event(id=1, title="   "))

        assert len(violations) == 1
        assert violations[0].rule_name == "title_required"
        assert violations[0].message == "Title is required"

    def test_short_circuit_disabled(self):
        """Test short_circuit=False keeps a rule running after an earlier failure"""
        rules = (
            RuleConfigBuilder()
            .add_required_field("title")
            .add_min_length("title", 5, short_circuit=False)
            .build()
        )
        engine = RuleEngine(rules, model=Event)

        violations = engine.validate({"title": ""})

        assert [v.rule_name for v in violations] == ["title_required", "title_min_length"]

    def test_violations_follow_declared_order(self):
        """Test all fields are checked and violations keep rule order"""
        rules = (
            RuleConfigBuilder()
            .add_required_field("title")
            .add_required_field("capacity")
            .add_positive("capacity")
            .add_required_field("location")
            .build()
        )
        engine = RuleEngine(rules, model=Event)

        violations = engine.validate(Event(id=1, capacity=-3))

        assert [v.field_name for v in violations] == ["title", "capacity", "location"]
        assert violations[1].message == "Capacity must be greater than 0"

    def test_null_record(self):
        """Test a null record yields exactly one violation"""
        engine = RuleEngine(title_rules(), model=Event)

        violations = engine.validate(None)

        assert len(violations) == 1
        assert violations[0].field_name == "record"
        assert violations[0].message == "Event cannot be null"

    def test_soft_violation_still_rejects(self):
        """Test exceeding a sanity ceiling is a soft violation that rejects"""
        rules = RuleConfigBuilder().add_ceiling("capacity", 1000).build()
        engine = RuleEngine(rules, model=Event)

        violations = engine.validate(Event(id=1, capacity=1001))

        assert len(violations) == 1
        assert violations[0].severity == "soft"
        assert violations[0].rule_name == "capacity_ceiling"
        assert not engine.is_valid(Event(id=1, capacity=1001))

    def test_clock_read_once_per_record(self):
        """Test the clock is read once per validate call"""
        calls = []

        def clock():
            calls.append(1)
            return NOW

        rules = (
            RuleConfigBuilder()
            .add_not_in_future("hire_date")
            .add_age_window("birth_date", min_years=16)
            .build()
        )
        engine = RuleEngine(rules, model=Employee, clock=clock)

        engine.validate(Employee(id=1, hire_date=date(2020, 1, 1), birth_date=date(1990, 1, 1)))

        assert len(calls) == 1

    def test_injected_clock_drives_date_rules(self):
        """Test date rules judge against the injected clock"""
        rules = RuleConfigBuilder().add_not_in_past("date").build()
        engine = RuleEngine(rules, model=Event, clock=lambda: NOW)

        assert engine.is_valid(Event(id=1, date=date(2026, 3, 2)))
        assert not engine.is_valid(Event(id=1, date=date(2026, 3, 1)))

    def test_disabled_rules_skipped(self):
        """Test rules with enabled=False are not built"""
        rules = title_rules()
        rules[0]["enabled"] = False
        engine = RuleEngine(rules, model=Event)

        assert engine.get_rule_summary()["total_rules"] == 1

    def test_validate_record_and_batch(self):
        """Test ValidationResult wrapping"""
        engine = RuleEngine(title_rules(), model=Event)

        results = engine.validate_batch([Event(id=1, title="Spring conference"), Event(id=2)])

        assert results[0].passed is True
        assert results[0].record_id == 1
        assert results[1].passed is False
        assert results[1].failed_rules == ["title_required"]

    def test_rule_summary(self):
        """Test rule counts by type and severity"""
        rules = (
            RuleConfigBuilder()
            .add_required_field("capacity")
            .add_positive("capacity")
            .add_ceiling("capacity", 1000)
            .build()
        )
        engine = RuleEngine(rules, model=Event)

        summary = engine.get_rule_summary()

        assert summary["entity"] == "Event"
        assert summary["total_rules"] == 3
        assert summary["rules_by_type"] == {"required_field": 1, "range": 2}
        assert summary["rules_by_severity"] == {"error": 2, "soft": 1}

    def test_describe_rules(self):
        """Test rule listing in evaluation order"""
        engine = RuleEngine(title_rules(), model=Event)

        described = engine.describe_rules()

        assert [rule["rule_name"] for rule in described] == ["title_required", "title_min_length"]
        assert described[0]["short_circuit"] is True


class TestRuleEngineContract:
    """Tests for contract checks at engine construction"""

    def test_unknown_field(self):
        """Test a rule on an undeclared field is a contract error"""
        rules = RuleConfigBuilder().add_required_field("venue").build()

        with pytest.raises(ContractError, match="venue"):
            RuleEngine(rules, model=Event)

    def test_unknown_referenced_field(self):
        """Test cross-field rules check their referenced field too"""
        rules = RuleConfigBuilder().add_interval("date", "end_date").build()

        with pytest.raises(ContractError, match="end_date"):
            RuleEngine(rules, model=Event)

    def test_custom_rule_reads_checked(self):
        """Test fields read by a custom rule must exist on the model"""
        rules = RuleConfigBuilder().add_custom("capacity", lambda value, record: None, reads=["seats"]).build()

        with pytest.raises(ContractError, match="seats"):
            RuleEngine(rules, model=Event)

    def test_unknown_rule_type(self):
        """Test unknown rule types are contract errors"""
        rules = [{"rule_name": "x", "rule_type": "telepathy", "field_name": "title"}]

        with pytest.raises(ContractError, match="Unknown rule type"):
            RuleEngine(rules)

    def test_bad_parameters(self):
        """Test unusable parameters are contract errors"""
        rules = [{"rule_name": "x", "rule_type": "range", "field_name": "capacity", "parameters": {}}]

        with pytest.raises(ContractError, match="Failed to create validator"):
            RuleEngine(rules)

    def test_missing_key(self):
        """Test rules without a field name are contract errors"""
        with pytest.raises(ContractError, match="missing key"):
            RuleEngine([{"rule_name": "x", "rule_type": "range"}])

    def test_bad_severity(self):
        """Test unknown severities are contract errors"""
        rules = RuleConfigBuilder().add_required_field("title", severity="fatal").build()

        with pytest.raises(ContractError, match="Invalid severity"):
            RuleEngine(rules)

    def test_without_model_fields_unchecked(self):
        """Test plain mappings can be validated without a model"""
        engine = RuleEngine(RuleConfigBuilder().add_required_field("anything").build())

        assert engine.is_valid({"anything": 1})
        assert engine.validate(None)[0].message == "Record cannot be null"


class TestRuleConfigLoader:
    """Tests for RuleConfigLoader"""

    def test_load_rules(self, tmp_path):
        """Test loading rules from YAML in file order"""
        path = tmp_path / "rules.yaml"
        path.write_text(RULES_YAML)

        loader = RuleConfigLoader(path)
        rules = loader.load_rules()

        assert loader.entity == "event"
        assert [rule["rule_name"] for rule in rules] == [
            "title_required_field_0",
            "title_min_length_1",
            "capacity_required_field_0",
            "capacity_positive",
            "capacity_ceiling",
            "status_one_of_0",
        ]
        assert rules[4]["severity"] == "soft"

    def test_loaded_rules_drive_engine(self, tmp_path):
        """Test YAML rules build a working engine"""
        path = tmp_path / "rules.yaml"
        path.write_text(RULES_YAML)
        engine = RuleEngine(RuleConfigLoader(path).load_rules(), model=Event)

        violations = engine.validate(Event(id=1, title="Gala", capacity=2000, status="sold out"))

        assert [v.rule_name for v in violations] == ["title_min_length_1", "capacity_ceiling", "status_one_of_0"]

    def test_missing_file(self, tmp_path):
        """Test a missing file raises FileNotFoundError"""
        with pytest.raises(FileNotFoundError):
            RuleConfigLoader(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        """Test malformed YAML is a contract error"""
        path = tmp_path / "rules.yaml"
        path.write_text("rules: [unclosed")

        with pytest.raises(ContractError, match="Invalid YAML"):
            RuleConfigLoader(path).load_rules()

    def test_missing_rules_section(self, tmp_path):
        """Test a file without a rules section is a contract error"""
        path = tmp_path / "rules.yaml"
        path.write_text("entity: event\n")

        with pytest.raises(ContractError, match="'rules' section"):
            RuleConfigLoader(path).load_rules()

    def test_rule_without_type(self, tmp_path):
        """Test each rule needs a type"""
        path = tmp_path / "rules.yaml"
        path.write_text("rules:\n  title:\n    - params: {}\n")

        with pytest.raises(ContractError, match="missing 'type'"):
            RuleConfigLoader(path).load_rules()

    def test_invalid_severity(self, tmp_path):
        """Test severities other than error/soft are rejected"""
        path = tmp_path / "rules.yaml"
        path.write_text("rules:\n  title:\n    - type: required_field\n      severity: warning\n")

        with pytest.raises(ContractError, match="Invalid severity"):
            RuleConfigLoader(path).load_rules()

    def test_unknown_rule_key(self, tmp_path):
        """Test misspelled rule keys are rejected instead of ignored"""
        path = tmp_path / "rules.yaml"
        path.write_text("rules:\n  title:\n    - type: required_field\n      severty: soft\n")

        with pytest.raises(ContractError, match="severty"):
            RuleConfigLoader(path).load_rules()

    def test_parameters_alias_and_empty_params(self, tmp_path):
        """Test 'parameters' is accepted for 'params' and empty params become {}"""
        path = tmp_path / "rules.yaml"
        path.write_text(
            "rules:\n  title:\n    - type: required_field\n      params:\n"
            "    - type: min_length\n      parameters:\n        min_length: 5\n"
        )

        rules = RuleConfigLoader(path).load_rules()

        assert rules[0]["parameters"] == {}
        assert rules[1]["parameters"] == {"min_length": 5}

    def test_short_circuit_option(self, tmp_path):
        """Test short_circuit is read from YAML"""
        path = tmp_path / "rules.yaml"
        path.write_text(
            "rules:\n  title:\n    - type: required_field\n"
            "    - type: min_length\n      short_circuit: false\n      params:\n        min_length: 5\n"
        )

        rules = RuleConfigLoader(path).load_rules()

        assert rules[0]["short_circuit"] is True
        assert rules[1]["short_circuit"] is False


class TestRuleConfigBuilder:
    """Tests for RuleConfigBuilder"""

    def test_rule_names(self):
        """Test generated rule names"""
        rules = (
            RuleConfigBuilder()
            .add_required_field("title")
            .add_positive("capacity")
            .add_ceiling("capacity", 1000)
            .add_range("capacity", min_value=1, rule_name="capacity_floor")
            .build()
        )

        assert [rule["rule_name"] for rule in rules] == [
            "title_required",
            "capacity_positive",
            "capacity_ceiling",
            "capacity_floor",
        ]

    def test_ceiling_is_soft(self):
        """Test sanity ceilings default to soft severity"""
        rules = RuleConfigBuilder().add_ceiling("salary", 1_000_000).build()

        assert rules[0]["severity"] == "soft"
        assert rules[0]["parameters"] == {"max": 1_000_000}

    def test_label_and_message(self):
        """Test label and message options land in the parameters"""
        rules = RuleConfigBuilder().add_required_field("date", label="Event date", message="When?").build()

        assert rules[0]["parameters"]["label"] == "Event date"
        assert rules[0]["parameters"]["message"] == "When?"

    def test_email_rule_drives_engine(self):
        """Test the email rule type from the builder reaches the engine"""
        rules = RuleConfigBuilder().add_email("email").build()
        engine = RuleEngine(rules, model=Employee)

        assert rules[0]["rule_name"] == "email_email"
        assert engine.is_valid(Employee(id=1, email="ada@example.com"))
        assert [v.rule_type for v in engine.validate(Employee(id=1, email="a..b@example.com"))] == ["email"]

    def test_build_returns_copy(self):
        """Test build returns a new list each time"""
        builder = RuleConfigBuilder().add_required_field("title")

        first = builder.build()
        first.append({})

        assert len(builder.build()) == 1
