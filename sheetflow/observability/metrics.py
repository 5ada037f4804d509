"""
Prometheus metrics for sheetflow runs

Counters and histograms are labelled by entity type so that event, employee,
reservation and promotion runs can share one process. All metrics live in a
private registry; nothing is exposed until start_metrics_server() is called.
"""
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

from sheetflow.core.models import RunReport, Violation

REGISTRY = CollectorRegistry()

RECORD_OUTCOMES = ("valid", "rejected", "skipped")


# =======================
# RUN METRICS
# =======================

records_processed_total = Counter(
    name="sheetflow_records_processed_total",
    documentation="Records seen by the pipeline, by outcome",
    labelnames=["entity", "status"],  # status: valid, rejected, skipped
    registry=REGISTRY,
)

stage_duration_seconds = Histogram(
    name="sheetflow_stage_duration_seconds",
    documentation="Seconds spent in each pipeline stage",
    labelnames=["entity", "stage"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0],
    registry=REGISTRY,
)

runs_total = Counter(
    name="sheetflow_runs_total",
    documentation="Finished pipeline runs by terminal state",
    labelnames=["entity", "state"],
    registry=REGISTRY,
)

last_run_records = Gauge(
    name="sheetflow_last_run_records",
    documentation="Record counts of the most recent run, by outcome",
    labelnames=["entity", "status"],
    registry=REGISTRY,
)


# =======================
# DATA QUALITY METRICS
# =======================

validation_failures_total = Counter(
    name="sheetflow_validation_failures_total",
    documentation="Rule violations by rule type and field",
    labelnames=["entity", "rule_type", "field_name"],
    registry=REGISTRY,
)

soft_limit_violations_total = Counter(
    name="sheetflow_soft_limit_violations_total",
    documentation="Violations of soft sanity ceilings",
    labelnames=["entity", "rule_name"],
    registry=REGISTRY,
)


# =======================
# EXPOSITION
# =======================

def generate_metrics() -> bytes:
    """Render the registry in Prometheus text format"""
    return generate_latest(REGISTRY)


def get_content_type() -> str:
    return CONTENT_TYPE_LATEST


def start_metrics_server(port: int) -> None:
    """
    Serve the registry over HTTP on the given port.

    Args:
        port: Port to listen on
    """
    # Imported here so that importing this module never binds a port
    from prometheus_client import start_http_server

    start_http_server(port, registry=REGISTRY)


# =======================
# RECORDING
# =======================

def record_validation_failure(entity: str, violation: Violation) -> None:
    """
    Count one violation raised by the rule engine.

    Soft violations are additionally counted per rule name.
    """
    validation_failures_total.labels(
        entity=entity, rule_type=violation.rule_type, field_name=violation.field_name
    ).inc()
    if violation.severity == "soft":
        soft_limit_violations_total.labels(entity=entity, rule_name=violation.rule_name).inc()


def record_run(report: RunReport) -> None:
    """
    Publish the counts and stage timings of a finished run.

    Args:
        report: RunReport of the run, in any terminal state
    """
    entity = report.entity
    counts = dict(zip(RECORD_OUTCOMES, (report.valid, report.rejected, report.skipped_rows)))

    for status, count in counts.items():
        if count:
            records_processed_total.labels(entity=entity, status=status).inc(count)
        last_run_records.labels(entity=entity, status=status).set(count)

    for stage, seconds in report.elapsed_per_stage.items():
        stage_duration_seconds.labels(entity=entity, stage=stage).observe(seconds)

    runs_total.labels(entity=entity, state=report.state.value).inc()
