"""
Error taxonomy for the record pipeline.

Per-record problems (ExtractionError) are absorbed by the stage that raises them.
Run-level problems (SourceError, SinkError) abort the current run and are
reported to the caller. ContractError signals a programming error and is never
swallowed.
"""


class SheetflowError(Exception):
    """Base exception for all pipeline failures."""


class ExtractionError(SheetflowError):
    """Raised when a single raw row cannot be turned into a record."""

    def __init__(self, message: str, row_number: int | None = None):
        self.row_number = row_number
        self.message = message
        prefix = f"row {row_number}: " if row_number is not None else ""
        super().__init__(f"{prefix}{message}")


class SourceError(SheetflowError):
    """Raised when the record source is unreachable or unreadable."""


class SinkError(SheetflowError):
    """Raised when accepted records cannot be written to the sink."""


class ContractError(SheetflowError):
    """Raised when a rule set, profile or grouping key breaks the entity contract."""


class PipelineBusyError(SheetflowError):
    """Raised when a run is requested while another run is still active."""
