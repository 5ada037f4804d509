"""
Event model: a bookable venue slot.
"""

import datetime as dt
from typing import ClassVar

from pydantic import ConfigDict

from .record import Record
from .status import EventStatus


class Event(Record):
    """
    A bookable event.

    Attributes:
        id: Source-assigned identifier (optional)
        title: Event title
        description: Free-text description
        capacity: Number of seats
        price_per_hour: Hourly price
        location: Venue location (grouping key)
        date: Day the event takes place
        status: EventStatus member, or the raw text when unrecognised
    """

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "title": "Spring conference",
                "description": "Annual product conference",
                "capacity": 300,
                "price_per_hour": 250.0,
                "location": "North hall",
                "date": "2026-04-12",
                "status": "available",
            }
        },
    )

    entity_name: ClassVar[str] = "event"
    status_enum: ClassVar[type[EventStatus]] = EventStatus
    format_fields: ClassVar[tuple[str, ...]] = (
        "id", "title", "location", "date", "capacity", "price_per_hour", "status"
    )

    id: int | None = None
    title: str | None = None
    description: str | None = None
    capacity: int | None = None
    price_per_hour: float | None = None
    location: str | None = None
    date: dt.date | None = None
    status: EventStatus | str | None = None

    @property
    def is_available(self) -> bool:
        return self.status == EventStatus.AVAILABLE

    @property
    def is_upcoming(self) -> bool:
        """True when the event date lies strictly after today."""
        return self.date is not None and self.date > dt.date.today()

    @property
    def days_until(self) -> int:
        """Days from today until the event (negative once past, 0 without a date)."""
        if self.date is None:
            return 0
        return (self.date - dt.date.today()).days
