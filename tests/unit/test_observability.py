"""
Unit tests for structured logging and metrics.
"""

import json
import logging
from datetime import datetime
from io import StringIO

import pytest

from sheetflow.batch import InMemorySink, InMemorySource, RecordPipeline
from sheetflow.core.models import Event, PipelineState, RunReport, Violation
from sheetflow.core.profiles import EVENT_PROFILE
from sheetflow.observability import metrics
from sheetflow.observability.logger import get_logger, log_operation, setup_logger

NOW = datetime(2026, 3, 2, 10, 0, 0)


@pytest.fixture
def log_stream():
    """Route the sheetflow logger to an in-memory stream for the test"""
    stream = StringIO()
    setup_logger(level="DEBUG", format_type="json", stream=stream)
    yield stream
    setup_logger()


def log_lines(stream):
    return [json.loads(line) for line in stream.getvalue().splitlines() if line.strip()]


class TestLogger:
    """Tests for setup_logger and log_operation"""

    def test_json_output(self, log_stream):
        """Test JSON log lines carry the standard fields"""
        get_logger("sheetflow.tests").info("hello", extra={"entity": "event"})

        line = log_lines(log_stream)[-1]
        assert line["message"] == "hello"
        assert line["level"] == "INFO"
        assert line["logger"] == "sheetflow.tests"
        assert line["entity"] == "event"
        assert "timestamp" in line

    def test_text_output(self):
        """Test the plain text format"""
        stream = StringIO()
        logger = setup_logger("sheetflow.text_test", level="INFO", format_type="text", stream=stream)

        logger.warning("plain message")

        assert "WARNING" in stream.getvalue()
        assert "plain message" in stream.getvalue()

    def test_level_filtering(self):
        """Test records below the configured level are dropped"""
        stream = StringIO()
        logger = setup_logger("sheetflow.level_test", level="WARNING", stream=stream)

        logger.info("hidden")

        assert stream.getvalue() == ""

    def test_no_duplicate_handlers(self):
        """Test repeated setup keeps a single handler"""
        setup_logger("sheetflow.dup_test")
        logger = setup_logger("sheetflow.dup_test")

        assert len(logger.handlers) == 1
        assert logger.propagate is False

    def test_log_operation_success(self, log_stream):
        """Test start and completion lines with a measured duration"""
        with log_operation("read records", get_logger("sheetflow.tests"), entity="event") as op:
            pass

        lines = log_lines(log_stream)
        assert lines[-2]["message"] == "Starting: read records"
        assert lines[-1]["message"] == "Completed: read records"
        assert lines[-1]["status"] == "success"
        assert op.duration >= 0

    def test_log_operation_failure(self, log_stream):
        """Test failures are logged and re-raised"""
        with pytest.raises(ValueError):
            with log_operation("write records", get_logger("sheetflow.tests")) as op:
                raise ValueError("disk full")

        line = log_lines(log_stream)[-1]
        assert line["message"] == "Failed: write records"
        assert line["error_type"] == "ValueError"
        assert op.duration >= 0

    def test_rejections_logged_at_warning(self, log_stream):
        """Test rejected records and soft violations appear as warnings"""
        pipeline = RecordPipeline(EVENT_PROFILE, clock=lambda: NOW)
        rows = [{"id": 9, "title": "Huge expo", "capacity": 5000, "price_per_hour": 100,
                 "location": "North", "date": "2026-05-01", "status": "available"}]

        pipeline.run(InMemorySource(Event, rows), InMemorySink())

        warnings = [line for line in log_lines(log_stream) if line["level"] == "WARNING"]
        assert any(line["message"].startswith("Soft limit exceeded for event 9") for line in warnings)
        rejected = [line for line in warnings if line["message"].startswith("Rejected event")]
        assert len(rejected) == 1
        assert rejected[0]["violations"] == ["Capacity cannot exceed 1000"]

    def test_skipped_rows_logged_at_error(self, log_stream):
        """Test rows that cannot become records are logged as errors"""
        InMemorySource(Event, [{"id": "x"}]).read_all()

        errors = [line for line in log_lines(log_stream) if line["level"] == "ERROR"]
        assert errors[-1]["row_number"] == 1
        assert errors[-1]["message"].startswith("Skipping row: row 1:")


class TestMetrics:
    """Tests for Prometheus metrics"""

    def sample(self, name, **labels):
        return metrics.REGISTRY.get_sample_value(name, labels) or 0.0

    def test_record_run(self):
        """Test a finished run updates counters and gauges"""
        before = self.sample("sheetflow_records_processed_total", entity="metrics_test", status="valid")
        runs_before = self.sample("sheetflow_runs_total", entity="metrics_test", state="done")
        report = RunReport(
            entity="metrics_test",
            state=PipelineState.DONE,
            read=5,
            skipped_rows=1,
            valid=3,
            rejected=2,
            elapsed_per_stage={"reading": 0.2},
        )

        metrics.record_run(report)

        assert self.sample("sheetflow_records_processed_total", entity="metrics_test", status="valid") == before + 3
        assert self.sample("sheetflow_runs_total", entity="metrics_test", state="done") == runs_before + 1
        assert self.sample("sheetflow_last_run_records", entity="metrics_test", status="rejected") == 2
        assert self.sample("sheetflow_stage_duration_seconds_count", entity="metrics_test", stage="reading") >= 1

    def test_record_validation_failure(self):
        """Test violations are counted by rule type and field, soft ones separately"""
        violation = Violation(
            field_name="salary", rule_name="salary_ceiling", rule_type="range",
            message="Salary cannot exceed 1000000", severity="soft",
        )
        before = self.sample(
            "sheetflow_soft_limit_violations_total", entity="metrics_test", rule_name="salary_ceiling"
        )

        metrics.record_validation_failure("metrics_test", violation)

        assert self.sample(
            "sheetflow_validation_failures_total", entity="metrics_test", rule_type="range", field_name="salary"
        ) >= 1
        assert self.sample(
            "sheetflow_soft_limit_violations_total", entity="metrics_test", rule_name="salary_ceiling"
        ) == before + 1

    def test_generate_metrics(self):
        """Test the exposition text contains the pipeline metrics"""
        metrics.record_run(RunReport(entity="metrics_test", state=PipelineState.FAILED))

        output = metrics.generate_metrics().decode("utf-8")

        assert "sheetflow_runs_total" in output
        assert metrics.get_content_type().startswith("text/plain")


def test_module_loggers_share_root_handler():
    """Test module loggers propagate to the sheetflow logger"""
    logger = get_logger("sheetflow.batch.pipeline")

    assert logger.propagate is True
    assert logging.getLogger("sheetflow").handlers
