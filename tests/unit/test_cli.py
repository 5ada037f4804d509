"""
Unit tests for the batch command-line interface.
"""

from pathlib import Path

import pytest
from pyspark.errors import PySparkException

from sheetflow.cli import batch_cli
from sheetflow.cli.batch_cli import build_parser, main, print_report
from sheetflow.core.models import PipelineState, RunError, RunReport

RULES_FILE = Path(__file__).resolve().parents[2] / "config" / "event_rules.yaml"


@pytest.fixture(autouse=True)
def isolated_cwd(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)


class TestParser:
    """Tests for argument parsing"""

    def test_process_defaults(self):
        """Test process options and their defaults"""
        args = build_parser().parse_args(["process", "--entity", "event", "--input", "events.csv"])

        assert args.command == "process"
        assert args.format == "csv"
        assert args.output is None
        assert args.output_format == "csv"
        assert args.top_n is None

    def test_unknown_entity(self):
        """Test entity names are restricted to known profiles"""
        with pytest.raises(SystemExit):
            build_parser().parse_args(["process", "--entity", "invoice", "--input", "x.csv"])


class TestCommands:
    """Tests for CLI commands"""

    def test_no_command(self, capsys):
        """Test running without a command prints help"""
        assert main([]) == 1
        assert "process" in capsys.readouterr().out

    def test_rules_command(self, capsys):
        """Test listing the built-in reservation rules"""
        exit_code = main(["--log-level", "ERROR", "rules", "--entity", "reservation"])

        out = capsys.readouterr().out
        assert exit_code == 0
        assert "RULES FOR RESERVATION" in out
        assert "amount_ceiling" in out
        assert "start_time_not_in_past" in out

    def test_rules_command_with_yaml(self, capsys):
        """Test listing a replacement rule set"""
        exit_code = main(["--log-level", "ERROR", "rules", "--entity", "event", "--rules", str(RULES_FILE)])

        out = capsys.readouterr().out
        assert exit_code == 0
        assert "capacity_ceiling" in out
        assert "status_one_of" in out

    def test_rules_for_other_entity(self):
        """Test a rule file for another entity is a configuration error"""
        assert main(["--log-level", "ERROR", "rules", "--entity", "employee", "--rules", str(RULES_FILE)]) == 2

    def test_missing_rules_file(self, tmp_path):
        """Test a missing rule file is a configuration error"""
        missing = tmp_path / "missing.yaml"

        assert main(["--log-level", "ERROR", "rules", "--entity", "event", "--rules", str(missing)]) == 2

    def test_process_missing_input(self, tmp_path):
        """Test a missing input file fails before Spark starts"""
        missing = tmp_path / "missing.csv"

        assert main(["--log-level", "ERROR", "process", "--entity", "event", "--input", str(missing)]) == 1

    def test_process_spark_start_failure(self, monkeypatch, tmp_path):
        """Test a Spark session that cannot start is reported with exit code 1"""
        input_file = tmp_path / "events.csv"
        input_file.write_text("id,title\n1,Spring conference\n")

        def failing_session(app_name, master):
            raise PySparkException("Java gateway process exited before sending its port number")

        monkeypatch.setattr(batch_cli, "create_spark_session", failing_session)

        assert main(["--log-level", "ERROR", "process", "--entity", "event", "--input", str(input_file)]) == 1

    @pytest.mark.parametrize(
        "variable, value", [("LOG_LEVEL", "LOUD"), ("LOG_FORMAT", "xml"), ("METRICS_PORT", "70000")]
    )
    def test_invalid_settings(self, monkeypatch, variable, value):
        """Test invalid environment settings are a configuration error"""
        monkeypatch.setenv(variable, value)

        assert main(["rules", "--entity", "event"]) == 2


class TestPrintReport:
    """Tests for report rendering"""

    def test_failed_report(self, capsys):
        """Test a failed run shows its error"""
        report = RunReport(
            entity="event",
            state=PipelineState.FAILED,
            error=RunError(stage=PipelineState.READING, error_type="SourceError", message="unreachable"),
            elapsed_per_stage={"reading": 0.01},
        )

        print_report(report)

        out = capsys.readouterr().out
        assert "EVENT PIPELINE: FAILED" in out
        assert "reading: SourceError: unreachable" in out

    def test_violation_counts(self, capsys):
        """Test violations are listed per field"""
        report = RunReport(
            entity="employee",
            state=PipelineState.DONE,
            read=3,
            valid=1,
            rejected=2,
            violations_by_field={"email": 2, "salary": 1},
        )

        print_report(report)

        out = capsys.readouterr().out
        assert "Rejected records:" in out
        assert out.index("email") < out.index("salary")
