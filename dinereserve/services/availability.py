"""Bookable time-slot generation from a restaurant's weekly hours."""

import logging
import random
from collections.abc import Callable, Iterable
from datetime import date, datetime, timedelta
from typing import Protocol

from dinereserve.models import WEEKDAYS, Booking, BookingStatus, Restaurant, TimeSlot

logger = logging.getLogger(__name__)

DEFAULT_GRANULARITY_MINUTES = 30


def weekday_name(day: date) -> str:
    """English lowercase weekday, independent of the process locale."""
    return WEEKDAYS[day.weekday()]


def slot_times(
    restaurant: Restaurant,
    day: date,
    granularity_minutes: int = DEFAULT_GRANULARITY_MINUTES,
) -> list[str]:
    """List HH:MM slot times for a day, from opening through closing time.

    A slot exactly at closing time is included. A day without an hours entry
    has no slots.
    """
    hours = restaurant.hours.get(weekday_name(day))
    if hours is None:
        return []

    # Any common date works; only the time of day matters.
    open_time = datetime.strptime(hours.open, "%H:%M")
    close_time = datetime.strptime(hours.close, "%H:%M")
    step = timedelta(minutes=granularity_minutes)

    times = []
    current = open_time
    while current <= close_time:
        times.append(current.strftime("%H:%M"))
        current += step
    return times


class OccupancyPolicy(Protocol):
    """Decides whether a slot can take another party."""

    def is_available(
        self, restaurant: Restaurant, day: date, time: str, party_size: int
    ) -> bool: ...


class RandomOccupancy:
    """Demo availability: each slot is free with a fixed probability.

    party_size is ignored.
    """

    def __init__(self, probability: float = 0.7, rng: random.Random | None = None) -> None:
        self.probability = probability
        self.rng = rng or random.Random()

    def is_available(
        self, restaurant: Restaurant, day: date, time: str, party_size: int
    ) -> bool:
        return self.rng.random() < self.probability


class LedgerOccupancy:
    """Capacity check against bookings already recorded for the slot.

    Each slot takes up to ``tables_per_slot`` non-cancelled bookings,
    regardless of party size.
    """

    def __init__(
        self, bookings: Callable[[], Iterable[Booking]], tables_per_slot: int
    ) -> None:
        self.bookings = bookings
        self.tables_per_slot = tables_per_slot

    def taken(self, restaurant_id: str, day: date, time: str) -> int:
        return sum(
            1
            for b in self.bookings()
            if b.restaurant_id == restaurant_id
            and b.date == day
            and b.time == time
            and b.status != BookingStatus.CANCELLED
        )

    def is_available(
        self, restaurant: Restaurant, day: date, time: str, party_size: int
    ) -> bool:
        return self.taken(restaurant.id, day, time) < self.tables_per_slot


class AvailabilityGenerator:
    """Produces the bookable time grid for a restaurant and date."""

    def __init__(
        self,
        policy: OccupancyPolicy,
        granularity_minutes: int = DEFAULT_GRANULARITY_MINUTES,
    ) -> None:
        self.policy = policy
        self.granularity_minutes = granularity_minutes

    def generate(
        self, restaurant: Restaurant, day: date, party_size: int = 2
    ) -> list[TimeSlot]:
        """Build the day's slots, earliest first.

        Args:
            restaurant: Restaurant whose hours define the grid
            day: Calendar date
            party_size: Passed to the occupancy policy

        Returns:
            TimeSlot list; empty when the restaurant has no hours for that day
        """
        times = slot_times(restaurant, day, self.granularity_minutes)
        if not times:
            logger.debug(f"No hours for {restaurant.id} on {weekday_name(day)}")
            return []

        return [
            TimeSlot(
                time=t,
                available=self.policy.is_available(restaurant, day, t, party_size),
            )
            for t in times
        ]

    def is_slot(self, restaurant: Restaurant, day: date, time: str) -> bool:
        """Whether time is one of the generated slot times for that day."""
        return time in slot_times(restaurant, day, self.granularity_minutes)
