"""
RunReport model: the caller-facing outcome of one pipeline run.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from .summary import Summary


class PipelineState(str, Enum):
    IDLE = "idle"
    READING = "reading"
    VALIDATING = "validating"
    AGGREGATING = "aggregating"
    WRITING = "writing"
    DONE = "done"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (PipelineState.DONE, PipelineState.FAILED, PipelineState.CANCELLED)


class RunError(BaseModel):
    """
    Run-level failure with stage context.

    Attributes:
        stage: Stage the run was in when it failed
        error_type: Exception class name (SourceError, SinkError, ...)
        message: Exception message
    """

    model_config = ConfigDict(frozen=True)

    stage: PipelineState
    error_type: str
    message: str

    def __str__(self) -> str:
        return f"{self.stage.value}: {self.error_type}: {self.message}"


class RunReport(BaseModel):
    """
    Outcome of one pipeline run. Per-record failures surface only as counts.

    Attributes:
        entity: Entity type processed
        state: Terminal state of the run
        read: Records produced by the source
        skipped_rows: Raw rows the source could not turn into records
        valid: Records accepted by validation
        rejected: Records rejected by validation
        violations_by_field: Field name -> number of violations
        summary: Statistics over the accepted records (None if not reached)
        elapsed_per_stage: Stage name -> elapsed seconds
        written: Records persisted by the sink
        error: Run-level failure, if any
    """

    model_config = ConfigDict(frozen=True)

    entity: str
    state: PipelineState = PipelineState.IDLE
    read: int = 0
    skipped_rows: int = 0
    valid: int = 0
    rejected: int = 0
    violations_by_field: dict[str, int] = Field(default_factory=dict)
    summary: Summary | None = None
    elapsed_per_stage: dict[str, float] = Field(default_factory=dict)
    written: int = 0
    error: RunError | None = None

    @property
    def succeeded(self) -> bool:
        return self.state == PipelineState.DONE
