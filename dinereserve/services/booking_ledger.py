"""Booking ledger: creation, lookup and status lifecycle of table bookings."""

import asyncio
import logging
import threading
import uuid
from collections import defaultdict
from collections.abc import Callable
from datetime import date, datetime

from dinereserve.errors import (
    InvalidRequestError,
    InvalidTransitionError,
    NotFoundError,
    SlotUnavailableError,
)
from dinereserve.models import (
    ALLOWED_TRANSITIONS,
    Booking,
    BookingCreate,
    BookingStatus,
)
from dinereserve.repositories import BookingRepository
from dinereserve.services.availability import AvailabilityGenerator, OccupancyPolicy
from dinereserve.services.catalog import CatalogService

logger = logging.getLogger(__name__)


def _counts_toward_today(status: BookingStatus | None) -> bool:
    return status is not None and status != BookingStatus.CANCELLED


class BookingLedger:
    """Create/read/update operations over bookings.

    In simulation mode a booking is confirmed straight away without looking
    at other bookings, so the same slot can be booked twice. Otherwise the
    booking starts out pending, a hold on its (restaurant, date, time) slot is
    taken and checked against the occupancy policy, and only then is it
    committed as confirmed.

    The restaurant's bookings-today counter is adjusted incrementally as
    bookings are created and cancelled. It can drift from the ledger (missed
    cancellations, restarts); ``recompute_bookings_today`` repairs it.
    """

    def __init__(
        self,
        repository: BookingRepository,
        catalog: CatalogService,
        availability: AvailabilityGenerator | None = None,
        occupancy: OccupancyPolicy | None = None,
        simulation_mode: bool = True,
        enforce_transitions: bool = True,
        simulated_latency_seconds: float = 0.0,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """Initialize the ledger.

        Args:
            repository: Booking storage
            catalog: Restaurant catalog, for existence checks and counters
            availability: Slot grid, used to reject times outside the grid
            occupancy: Capacity check for slot holds outside simulation mode
            simulation_mode: Auto-confirm without any capacity check
            enforce_transitions: Reject status changes not in ALLOWED_TRANSITIONS
            simulated_latency_seconds: Delay before ``create_async`` commits
            clock: Source of "now" and "today"
        """
        if not simulation_mode and occupancy is None:
            raise ValueError("An occupancy policy is required outside simulation mode")

        self.repository = repository
        self.catalog = catalog
        self.availability = availability
        self.occupancy = occupancy
        self.simulation_mode = simulation_mode
        self.enforce_transitions = enforce_transitions
        self.simulated_latency_seconds = simulated_latency_seconds
        self.clock = clock

        self._lock = threading.Lock()
        self._slot_locks: defaultdict[tuple[str, date, str], threading.Lock] = (
            defaultdict(threading.Lock)
        )
        self._idempotency_keys: dict[str, str] = {}
        self._key_locks: defaultdict[str, threading.Lock] = defaultdict(threading.Lock)

    @staticmethod
    def generate_booking_id() -> str:
        return f"booking-{uuid.uuid4().hex[:12]}"

    def today(self) -> date:
        return self.clock().date()

    def create(self, data: BookingCreate, idempotency_key: str | None = None) -> Booking:
        """Record a new booking.

        Args:
            data: Booking request
            idempotency_key: Client-chosen key; repeating it returns the
                booking created the first time

        Returns:
            The committed booking (confirmed)

        Raises:
            NotFoundError: If the restaurant does not exist
            InvalidRequestError: If the restaurant is not bookable or the time
                is not one of its slots (outside simulation mode)
            SlotUnavailableError: If the slot is full (outside simulation mode)
        """
        if idempotency_key is None:
            return self._create(data, None)

        # Concurrent retries with one key wait here, so only the first commits.
        with self._key_lock(idempotency_key):
            existing = self._replay(idempotency_key)
            if existing is not None:
                logger.info(
                    f"Idempotent replay of booking {existing.id} (key {idempotency_key})"
                )
                return existing
            return self._create(data, idempotency_key)

    def _create(self, data: BookingCreate, idempotency_key: str | None) -> Booking:
        restaurant = self.catalog.get_by_id(data.restaurant_id)

        if self.simulation_mode:
            booking = self._commit(data, BookingStatus.CONFIRMED, idempotency_key)
        else:
            if not restaurant.is_bookable:
                raise InvalidRequestError(
                    f"Restaurant '{restaurant.id}' is not accepting bookings"
                )
            if self.availability and not self.availability.is_slot(
                restaurant, data.date, data.time
            ):
                raise InvalidRequestError(
                    f"{data.time} is not a bookable time at {restaurant.name} on {data.date}"
                )

            with self._slot_lock(data.restaurant_id, data.date, data.time):
                if not self.occupancy.is_available(
                    restaurant, data.date, data.time, data.party_size
                ):
                    logger.info(
                        f"Slot {data.time} on {data.date} at {restaurant.id} is full"
                    )
                    raise SlotUnavailableError(
                        f"No tables left at {data.time} on {data.date}"
                    )
                pending = self._commit(data, BookingStatus.PENDING, idempotency_key)
                booking = self.update_status(pending.id, BookingStatus.CONFIRMED)

        logger.info(
            f"Created booking {booking.id} at {booking.restaurant_id} for "
            f"{booking.party_size} on {booking.date} {booking.time} ({booking.status.value})"
        )
        return booking

    async def create_async(
        self, data: BookingCreate, idempotency_key: str | None = None
    ) -> Booking:
        """Create a booking after the simulated network latency.

        Cancelling the awaiting task before the delay has passed leaves the
        ledger and counters untouched.
        """
        if self.simulated_latency_seconds:
            await asyncio.sleep(self.simulated_latency_seconds)
        return self.create(data, idempotency_key)

    def get_by_id(self, booking_id: str) -> Booking:
        """Look up a booking.

        Raises:
            NotFoundError: If no booking has this id
        """
        booking = self.repository.get(booking_id)
        if booking is None:
            raise NotFoundError("Booking", booking_id)
        return booking

    def list_all(self) -> list[Booking]:
        return self._most_recent_first(self.repository.list())

    def list_by_user(self, user_id: str) -> list[Booking]:
        return self._most_recent_first(
            b for b in self.repository.list() if b.user_id == user_id
        )

    def list_by_restaurant(self, restaurant_id: str) -> list[Booking]:
        return self._most_recent_first(
            b for b in self.repository.list() if b.restaurant_id == restaurant_id
        )

    def update_status(self, booking_id: str, status: BookingStatus) -> Booking:
        """Move a booking to a new status.

        Args:
            booking_id: Booking to change
            status: Requested status

        Raises:
            NotFoundError: If no booking has this id
            InvalidTransitionError: If the move is not allowed from the
                current status and transitions are enforced
        """
        with self._lock:
            booking = self.get_by_id(booking_id)
            previous = booking.status

            if (
                self.enforce_transitions
                and status not in ALLOWED_TRANSITIONS[previous]
            ):
                logger.warning(
                    f"Rejected status change for {booking_id}: "
                    f"{previous.value} -> {status.value}"
                )
                raise InvalidTransitionError(booking_id, previous.value, status.value)

            updated = booking.model_copy(
                update={"status": status, "updated_at": self.clock()}
            )
            self.repository.save(updated)

        logger.info(f"Booking {booking_id} status: {previous.value} -> {status.value}")
        self._apply_booking_effect(updated, previous)
        return updated

    def cancel(self, booking_id: str) -> Booking:
        return self.update_status(booking_id, BookingStatus.CANCELLED)

    def recompute_bookings_today(self) -> dict[str, int]:
        """Re-derive every restaurant's bookings-today counter from the ledger.

        Returns:
            Restaurant id to corrected count, for counters that had drifted
        """
        today = self.today()
        counts: dict[str, int] = defaultdict(int)
        for booking in self.repository.list():
            if booking.date == today and _counts_toward_today(booking.status):
                counts[booking.restaurant_id] += 1

        corrected = {}
        for restaurant in self.catalog.list_restaurants():
            actual = counts.get(restaurant.id, 0)
            if restaurant.bookings_today != actual:
                logger.warning(
                    f"bookings_today drift at {restaurant.id}: "
                    f"{restaurant.bookings_today} -> {actual}"
                )
                self.catalog.set_bookings_today(restaurant.id, actual)
                corrected[restaurant.id] = actual
        return corrected

    def _commit(
        self,
        data: BookingCreate,
        status: BookingStatus,
        idempotency_key: str | None,
    ) -> Booking:
        now = self.clock()
        booking = Booking(
            **data.model_dump(),
            id=self.generate_booking_id(),
            status=status,
            created_at=now,
            updated_at=now,
        )
        with self._lock:
            self.repository.add(booking)
            if idempotency_key is not None:
                self._idempotency_keys[idempotency_key] = booking.id
        self._apply_booking_effect(booking, None)
        return booking

    def _replay(self, idempotency_key: str) -> Booking | None:
        with self._lock:
            booking_id = self._idempotency_keys.get(idempotency_key)
        if booking_id is None:
            return None
        return self.repository.get(booking_id)

    def _apply_booking_effect(
        self, booking: Booking, previous: BookingStatus | None
    ) -> None:
        """Reflect a booking change on its restaurant's bookings-today counter."""
        if booking.date != self.today():
            return
        delta = int(_counts_toward_today(booking.status)) - int(
            _counts_toward_today(previous)
        )
        if delta:
            self.catalog.apply_booking_effect(booking.restaurant_id, delta)

    def _slot_lock(self, restaurant_id: str, day: date, time: str) -> threading.Lock:
        with self._lock:
            return self._slot_locks[(restaurant_id, day, time)]

    def _key_lock(self, idempotency_key: str) -> threading.Lock:
        with self._lock:
            return self._key_locks[idempotency_key]

    @staticmethod
    def _most_recent_first(bookings) -> list[Booking]:
        return sorted(bookings, key=lambda b: b.sort_key, reverse=True)
