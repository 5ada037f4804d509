"""
Closed status sets for every entity type.

Each enum member is a plain tagged value. Display metadata (label, colour,
description) lives in STATUS_METADATA as static data.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class EventStatus(str, Enum):
    AVAILABLE = "available"
    RESERVED = "reserved"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class EmployeeStatus(str, Enum):
    ACTIVE = "active"
    ON_LEAVE = "on_leave"
    TERMINATED = "terminated"


class ReservationStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class PromotionStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


@dataclass(frozen=True)
class StatusInfo:
    """Display metadata attached to a status value."""

    label: str
    color: str | None = None
    description: str | None = None


# Keyed by enum class first: str-valued members of different enums compare equal.
STATUS_METADATA: dict[type[Enum], dict[Enum, StatusInfo]] = {
    EventStatus: {
        EventStatus.AVAILABLE: StatusInfo("Available", "#4CAF50"),
        EventStatus.RESERVED: StatusInfo("Reserved", "#2196F3"),
        EventStatus.CANCELLED: StatusInfo("Cancelled", "#F44336"),
        EventStatus.COMPLETED: StatusInfo("Completed", "#9E9E9E"),
    },
    EmployeeStatus: {
        EmployeeStatus.ACTIVE: StatusInfo("Active", "#4CAF50"),
        EmployeeStatus.ON_LEAVE: StatusInfo("On leave", "#FF9800"),
        EmployeeStatus.TERMINATED: StatusInfo("Terminated", "#9E9E9E"),
    },
    ReservationStatus: {
        ReservationStatus.PENDING: StatusInfo("Pending", description="Reservation awaiting confirmation"),
        ReservationStatus.CONFIRMED: StatusInfo("Confirmed", description="Reservation confirmed"),
        ReservationStatus.CANCELLED: StatusInfo("Cancelled", description="Reservation cancelled"),
    },
    PromotionStatus: {
        PromotionStatus.ACTIVE: StatusInfo("Active", "#4CAF50"),
        PromotionStatus.INACTIVE: StatusInfo("Inactive", "#9E9E9E"),
    },
}


def status_info(status: Enum) -> StatusInfo:
    """
    Look up display metadata for a status value.

    Args:
        status: Any member of the status enums above

    Returns:
        StatusInfo for the member

    Raises:
        KeyError: If the member has no registered metadata
    """
    return STATUS_METADATA[type(status)][status]


def parse_status(enum_cls: type[Enum], value: Any) -> Any:
    """
    Resolve a raw status cell into an enum member.

    Matching is case-insensitive on the member value, name, or display label.
    Blank values become None. Unrecognised text is returned unchanged so that
    validation can report it instead of extraction failing.

    Args:
        enum_cls: Status enum to resolve against
        value: Raw value (member, string, or None)

    Returns:
        Enum member, None, or the original unrecognised value
    """
    if value is None or isinstance(value, enum_cls):
        return value
    if not isinstance(value, str):
        return value

    text = value.strip()
    if not text:
        return None

    key = text.casefold()
    metadata = STATUS_METADATA.get(enum_cls, {})
    for member in enum_cls:
        candidates = {str(member.value).casefold(), member.name.casefold()}
        info = metadata.get(member)
        if info is not None:
            candidates.add(info.label.casefold())
        if key in candidates:
            return member
    return value
