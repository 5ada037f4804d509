"""
Core data models for the record pipeline.

All models use Pydantic for runtime validation and type safety.
"""

from .employee import Employee
from .event import Event
from .promotion import Promotion
from .record import Record, UUIDRecord
from .reservation import Reservation
from .run_report import PipelineState, RunError, RunReport
from .status import (
    STATUS_METADATA,
    EmployeeStatus,
    EventStatus,
    PromotionStatus,
    ReservationStatus,
    StatusInfo,
    parse_status,
    status_info,
)
from .summary import GroupStats, Summary
from .validation_result import ValidationResult, Violation

__all__ = [
    "Record",
    "UUIDRecord",
    "Event",
    "Employee",
    "Reservation",
    "Promotion",
    "EventStatus",
    "EmployeeStatus",
    "ReservationStatus",
    "PromotionStatus",
    "StatusInfo",
    "STATUS_METADATA",
    "status_info",
    "parse_status",
    "Violation",
    "ValidationResult",
    "GroupStats",
    "Summary",
    "PipelineState",
    "RunError",
    "RunReport",
]
