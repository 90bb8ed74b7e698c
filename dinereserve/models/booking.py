"""Data models for table bookings."""

import datetime as dt
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from dinereserve.models.restaurant import TIME_PATTERN


class BookingStatus(str, Enum):
    """Lifecycle status of a booking."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


# Legal status changes; cancelled and completed are terminal.
ALLOWED_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset(
        {BookingStatus.CANCELLED, BookingStatus.COMPLETED}
    ),
    BookingStatus.CANCELLED: frozenset(),
    BookingStatus.COMPLETED: frozenset(),
}


class BookingCreate(BaseModel):
    """A customer's booking request."""

    model_config = ConfigDict(frozen=True)

    restaurant_id: str = Field(..., min_length=1, description="Restaurant id")
    user_id: str = Field(..., min_length=1, description="Booking customer's id")
    date: dt.date = Field(..., description="Calendar date (YYYY-MM-DD)")
    time: str = Field(..., description="Slot time (HH:MM)")
    party_size: int = Field(..., gt=0, description="Number of people")
    special_requests: str | None = Field(None, description="Special requests or notes")

    @field_validator("time")
    @classmethod
    def _check_time(cls, value: str) -> str:
        if not TIME_PATTERN.match(value):
            raise ValueError(f"'{value}' is not a HH:MM time")
        return value


class Booking(BookingCreate):
    """A booking as recorded in the ledger."""

    id: str = Field(..., description="Booking id")
    status: BookingStatus = Field(..., description="Booking status")
    created_at: dt.datetime = Field(default_factory=dt.datetime.now)
    updated_at: dt.datetime = Field(default_factory=dt.datetime.now)

    @property
    def sort_key(self) -> tuple[dt.date, str]:
        return (self.date, self.time)


class StatusUpdate(BaseModel):
    """Request body for a status change."""

    status: BookingStatus


class TimeSlot(BaseModel):
    """One bookable time on a given day. Derived per query, never stored."""

    model_config = ConfigDict(frozen=True)

    time: str
    available: bool
