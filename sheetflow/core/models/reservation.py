"""
Reservation model: a user's booking of a venue over a time interval.
"""

from datetime import datetime
from typing import ClassVar

from .record import UUIDRecord
from .status import ReservationStatus


class Reservation(UUIDRecord):
    """
    A venue booking.

    Attributes:
        id: UUID, generated when the source has none
        user_id: Booking user
        venue_id: Booked venue
        start_time: Start of the booked interval
        end_time: End of the booked interval
        amount: Amount charged
        status: ReservationStatus member (PENDING when absent)
    """

    entity_name: ClassVar[str] = "reservation"
    status_enum: ClassVar[type[ReservationStatus]] = ReservationStatus
    default_status: ClassVar[ReservationStatus] = ReservationStatus.PENDING
    format_fields: ClassVar[tuple[str, ...]] = (
        "id", "user_id", "venue_id", "start_time", "end_time", "amount", "status"
    )

    user_id: int | None = None
    venue_id: int | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    amount: float | None = None
    status: ReservationStatus | str | None = ReservationStatus.PENDING

    @property
    def duration_hours(self) -> int:
        """Whole hours between start and end, 0 if either bound is absent."""
        if self.start_time is None or self.end_time is None:
            return 0
        return int((self.end_time - self.start_time).total_seconds() / 3600)

    def confirm(self) -> "Reservation":
        """Confirm a pending reservation; any other status is left unchanged."""
        if self.status != ReservationStatus.PENDING:
            return self
        return self.with_status(ReservationStatus.CONFIRMED)

    def cancel(self) -> "Reservation":
        return self.with_status(ReservationStatus.CANCELLED)
