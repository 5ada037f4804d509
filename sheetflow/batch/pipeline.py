"""
Record pipeline orchestration.

Coordinates the flow: read → normalize → validate → aggregate → write
"""

import threading
from datetime import datetime
from typing import Any, Callable

from sheetflow.batch.readers import RecordSource
from sheetflow.batch.writers import RecordSink
from sheetflow.core.errors import ContractError, SinkError, SourceError
from sheetflow.core.models import PipelineState, Record, RunError, RunReport, Summary
from sheetflow.core.profiles import EntityProfile
from sheetflow.core.stats import summarize
from sheetflow.observability import metrics
from sheetflow.observability.logger import get_logger, log_operation

logger = get_logger(__name__)


class RecordPipeline:
    """
    Runs one entity type through the pipeline.

    Flow:
    1. Read records from the source
    2. Normalize text fields, then validate (rejected records are logged and counted)
    3. Summarize the accepted records
    4. Write the accepted records to the sink

    Each stage finishes before the next begins. An I/O failure of the source
    or sink ends the run in FAILED; a set cancel event ends it in CANCELLED
    before the next stage starts. Contract errors propagate to the caller.
    """

    def __init__(
        self,
        profile: EntityProfile,
        rules: list[dict[str, Any]] | None = None,
        clock: Callable[[], datetime] = datetime.now,
        top_n: int = 5,
        cancel_event: threading.Event | None = None,
    ):
        """
        Initialize record pipeline.

        Args:
            profile: Entity profile to process
            rules: Replacement rule set (built-in rules when None)
            clock: Validation clock
            top_n: Number of top-ranked records kept in the summary
            cancel_event: Cooperative cancellation flag checked between stages

        Raises:
            ContractError: If the rules or normalization do not match the entity
        """
        self.profile = profile
        self.rule_engine = profile.rule_engine(rules, clock=clock)
        self.normalizer = profile.normalizer()
        self.top_n = top_n
        self.cancel_event = cancel_event or threading.Event()
        self.state = PipelineState.IDLE

    def _enter(self, state: PipelineState) -> None:
        logger.debug(f"{self.profile.name} pipeline: {self.state.value} -> {state.value}")
        self.state = state

    def _cancelled(self) -> bool:
        return self.cancel_event.is_set()

    def run(self, source: RecordSource, sink: RecordSink) -> RunReport:
        """
        Process every record of the source and write the accepted ones.

        Args:
            source: Record source
            sink: Record sink

        Returns:
            RunReport describing the terminal state, counts and timings

        Raises:
            ContractError: On a programming error (never converted to FAILED reports)
        """
        entity = self.profile.name
        self.state = PipelineState.IDLE
        timings: dict[str, float] = {}
        violations_by_field: dict[str, int] = {}
        records: list[Record] = []
        accepted: list[Record] = []
        summary: Summary | None = None
        rejected = 0

        def finish(state: PipelineState, error: RunError | None = None, written: int = 0) -> RunReport:
            self.state = state
            report = RunReport(
                entity=entity,
                state=state,
                read=len(records),
                skipped_rows=getattr(source, "skipped_rows", 0),
                valid=len(accepted),
                rejected=rejected,
                violations_by_field=violations_by_field,
                summary=summary,
                elapsed_per_stage=timings,
                written=written,
                error=error,
            )
            metrics.record_run(report)
            logger.info(
                f"{entity} pipeline finished in state {state.value}: "
                f"read={report.read} valid={report.valid} rejected={report.rejected} "
                f"skipped={report.skipped_rows} written={report.written}",
                extra={"entity": entity, "state": state.value},
            )
            return report

        logger.info(f"Starting {entity} pipeline")
        try:
            # Step 1: Read
            if self._cancelled():
                return finish(PipelineState.CANCELLED)
            self._enter(PipelineState.READING)
            try:
                with log_operation("read records", logger, entity=entity) as op:
                    records = source.read_all()
            except (SourceError, OSError) as e:
                timings[PipelineState.READING.value] = op.duration
                return finish(PipelineState.FAILED, self._run_error(e))
            timings[PipelineState.READING.value] = op.duration

            # Step 2: Normalize and validate
            if self._cancelled():
                return finish(PipelineState.CANCELLED)
            self._enter(PipelineState.VALIDATING)
            with log_operation("validate records", logger, entity=entity) as op:
                accepted = self._validate(records, violations_by_field)
            timings[PipelineState.VALIDATING.value] = op.duration
            rejected = len(records) - len(accepted)
            logger.info(f"Validation complete: {len(accepted)} valid, {rejected} rejected")

            # Step 3: Aggregate
            if self._cancelled():
                return finish(PipelineState.CANCELLED)
            self._enter(PipelineState.AGGREGATING)
            with log_operation("aggregate records", logger, entity=entity) as op:
                summary = summarize(accepted, self.profile, self.top_n)
            timings[PipelineState.AGGREGATING.value] = op.duration

            # Step 4: Write
            if self._cancelled():
                return finish(PipelineState.CANCELLED)
            self._enter(PipelineState.WRITING)
            try:
                with log_operation("write records", logger, entity=entity) as op:
                    written = sink.write_all(accepted)
            except (SinkError, OSError) as e:
                timings[PipelineState.WRITING.value] = op.duration
                return finish(PipelineState.FAILED, self._run_error(e))
            timings[PipelineState.WRITING.value] = op.duration

            return finish(PipelineState.DONE, written=written)
        except ContractError:
            self.state = PipelineState.FAILED
            raise

    def _run_error(self, error: Exception) -> RunError:
        return RunError(stage=self.state, error_type=type(error).__name__, message=str(error))

    def _validate(self, records: list[Record], violations_by_field: dict[str, int]) -> list[Record]:
        """
        Normalize and validate records, keeping the valid ones.

        Args:
            records: Records from the source
            violations_by_field: Updated with violation counts per field

        Returns:
            Accepted (normalized) records in source order
        """
        entity = self.profile.name
        accepted = []
        for record in records:
            normalized = self.normalizer.normalize(record)
            violations = self.rule_engine.validate(normalized)
            if not violations:
                accepted.append(normalized)
                continue

            for violation in violations:
                violations_by_field[violation.field_name] = violations_by_field.get(violation.field_name, 0) + 1
                metrics.record_validation_failure(entity, violation)

            rendered = normalized.format() if normalized is not None else "null"
            record_id = str(normalized.record_id) if normalized is not None else None
            for violation in violations:
                if violation.severity == "soft":
                    logger.warning(
                        f"Soft limit exceeded for {entity} {record_id}: {violation.message}",
                        extra={"entity": entity, "record_id": record_id, "rule_name": violation.rule_name},
                    )
            logger.warning(
                f"Rejected {entity} {rendered}: {'; '.join(v.message for v in violations)}",
                extra={
                    "entity": entity,
                    "record_id": record_id,
                    "violations": [v.message for v in violations],
                },
            )
        return accepted
