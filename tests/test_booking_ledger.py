"""Tests for the booking ledger."""

import asyncio
import threading
from datetime import timedelta

import pytest

from dinereserve.errors import (
    InvalidRequestError,
    InvalidTransitionError,
    NotFoundError,
    SlotUnavailableError,
)
from dinereserve.models import BookingCreate, BookingStatus
from dinereserve.repositories import InMemoryBookingRepository
from dinereserve.services import (
    AvailabilityGenerator,
    BookingLedger,
    LedgerOccupancy,
)

from .conftest import NOW, TODAY


def _request(**overrides) -> BookingCreate:
    data = {
        "restaurant_id": "4",
        "user_id": "1",
        "date": TODAY,
        "time": "19:00",
        "party_size": 4,
    }
    data.update(overrides)
    return BookingCreate(**data)


@pytest.fixture
def production_ledger(catalog, clock):
    """Ledger that checks capacity, with one table per slot."""
    repository = InMemoryBookingRepository()
    occupancy = LedgerOccupancy(repository.list, tables_per_slot=1)
    return BookingLedger(
        repository,
        catalog,
        availability=AvailabilityGenerator(occupancy),
        occupancy=occupancy,
        simulation_mode=False,
        clock=clock,
    )


class TestCreateBooking:
    """Tests for booking creation in simulation mode."""

    def test_create_today_confirms_and_counts(self, ledger, catalog):
        """Test that a same-day booking is confirmed and bumps the counter."""
        before = catalog.get_by_id("4").bookings_today

        booking = ledger.create(_request())

        assert booking.status == BookingStatus.CONFIRMED
        assert booking.id.startswith("booking-")
        assert booking.created_at == NOW
        assert catalog.get_by_id("4").bookings_today == before + 1

    def test_create_future_leaves_counter(self, ledger, catalog):
        """Test that only bookings for today touch the counter."""
        before = catalog.get_by_id("4").bookings_today

        ledger.create(_request(date=TODAY + timedelta(days=3)))

        assert catalog.get_by_id("4").bookings_today == before

    def test_unknown_restaurant(self, ledger):
        """Test that bookings need an existing restaurant."""
        with pytest.raises(NotFoundError):
            ledger.create(_request(restaurant_id="missing"))
        assert ledger.list_all() == []

    def test_simulation_allows_double_booking(self, ledger):
        """Test that simulation mode never checks existing bookings."""
        first = ledger.create(_request())
        second = ledger.create(_request())

        assert first.id != second.id
        assert len(ledger.list_by_restaurant("4")) == 2

    def test_idempotency_key_replays(self, ledger, catalog):
        """Test that a repeated key returns the first booking only once."""
        before = catalog.get_by_id("4").bookings_today

        first = ledger.create(_request(), idempotency_key="abc")
        again = ledger.create(_request(party_size=8), idempotency_key="abc")

        assert again == first
        assert len(ledger.list_all()) == 1
        assert catalog.get_by_id("4").bookings_today == before + 1

    def test_concurrent_retries_with_one_key(self, ledger, catalog):
        """Test that parallel retries of one key commit a single booking."""
        before = catalog.get_by_id("4").bookings_today
        barrier = threading.Barrier(8)
        results = []

        def retry():
            barrier.wait()
            results.append(ledger.create(_request(), idempotency_key="retry-1"))

        threads = [threading.Thread(target=retry) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(results) == 8
        assert len({booking.id for booking in results}) == 1
        assert len(ledger.list_all()) == 1
        assert catalog.get_by_id("4").bookings_today == before + 1

    def test_concurrent_creates_without_key_all_count(self, ledger, catalog):
        """Test that the counter keeps up with parallel same-day bookings."""
        before = catalog.get_by_id("4").bookings_today
        barrier = threading.Barrier(8)

        def book():
            barrier.wait()
            ledger.create(_request())

        threads = [threading.Thread(target=book) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(ledger.list_all()) == 8
        assert catalog.get_by_id("4").bookings_today == before + 8


class TestProductionCreate:
    """Tests for capacity-checked creation."""

    def test_slot_fills_up(self, production_ledger):
        """Test that a full slot rejects the next booking."""
        booking = production_ledger.create(_request())

        assert booking.status == BookingStatus.CONFIRMED
        with pytest.raises(SlotUnavailableError):
            production_ledger.create(_request(user_id="2"))

    def test_cancelled_booking_frees_slot(self, production_ledger):
        first = production_ledger.create(_request())
        production_ledger.cancel(first.id)

        assert production_ledger.create(_request(user_id="2")).status == (
            BookingStatus.CONFIRMED
        )

    def test_time_off_grid(self, production_ledger):
        """Test that times outside the slot grid are rejected."""
        with pytest.raises(InvalidRequestError):
            production_ledger.create(_request(time="23:30"))

    def test_suspended_restaurant(self, production_ledger, catalog):
        catalog.toggle_suspension("4")

        with pytest.raises(InvalidRequestError, match="not accepting"):
            production_ledger.create(_request())

    def test_requires_occupancy_policy(self, catalog):
        with pytest.raises(ValueError):
            BookingLedger(InMemoryBookingRepository(), catalog, simulation_mode=False)


class TestQueries:
    """Tests for lookups and listings."""

    def test_get_by_id(self, ledger):
        """Test that lookups are repeatable and side-effect free."""
        booking = ledger.create(_request())

        first = ledger.get_by_id(booking.id)
        second = ledger.get_by_id(booking.id)

        assert first == second == booking

    def test_get_missing(self, ledger):
        with pytest.raises(NotFoundError):
            ledger.get_by_id("nope")

    def test_lists_sorted_most_recent_first(self, ledger):
        """Test (date, time) descending order."""
        ledger.create(_request(time="18:00"))
        ledger.create(_request(date=TODAY + timedelta(days=1), time="12:00"))
        ledger.create(_request(time="20:30", user_id="2"))

        assert [(b.date, b.time) for b in ledger.list_all()] == [
            (TODAY + timedelta(days=1), "12:00"),
            (TODAY, "20:30"),
            (TODAY, "18:00"),
        ]
        assert [b.time for b in ledger.list_by_user("2")] == ["20:30"]


class TestStatusTransitions:
    """Tests for the booking lifecycle."""

    def test_cancel_today_decrements(self, ledger, catalog):
        """Test that cancelling a same-day booking gives the table back."""
        before = catalog.get_by_id("4").bookings_today
        booking = ledger.create(_request())

        cancelled = ledger.cancel(booking.id)

        assert cancelled.status == BookingStatus.CANCELLED
        assert cancelled.updated_at == NOW
        assert catalog.get_by_id("4").bookings_today == before

    def test_cancel_floors_counter_at_zero(self, ledger, catalog):
        """Test the counter cannot go negative after drift."""
        booking = ledger.create(_request())
        catalog.set_bookings_today("4", 0)

        ledger.cancel(booking.id)

        assert catalog.get_by_id("4").bookings_today == 0

    def test_complete_confirmed(self, ledger, catalog):
        """Test that completion keeps the booking counted."""
        booking = ledger.create(_request())
        count = catalog.get_by_id("4").bookings_today

        completed = ledger.update_status(booking.id, BookingStatus.COMPLETED)

        assert completed.status == BookingStatus.COMPLETED
        assert catalog.get_by_id("4").bookings_today == count

    @pytest.mark.parametrize(
        "terminal", [BookingStatus.CANCELLED, BookingStatus.COMPLETED]
    )
    def test_terminal_states_reject_changes(self, ledger, terminal):
        """Test that cancelled/completed bookings stay put."""
        booking = ledger.create(_request())
        ledger.update_status(booking.id, terminal)

        with pytest.raises(InvalidTransitionError):
            ledger.update_status(booking.id, BookingStatus.CONFIRMED)

        assert ledger.get_by_id(booking.id).status == terminal

    def test_double_cancel_rejected(self, ledger, catalog):
        """Test that a second cancel cannot decrement twice."""
        booking = ledger.create(_request())
        ledger.cancel(booking.id)
        count = catalog.get_by_id("4").bookings_today

        with pytest.raises(InvalidTransitionError):
            ledger.cancel(booking.id)
        assert catalog.get_by_id("4").bookings_today == count

    def test_unenforced_transitions(self, catalog, clock):
        """Test the unconditional overwrite when enforcement is off."""
        ledger = BookingLedger(
            InMemoryBookingRepository(), catalog, enforce_transitions=False, clock=clock
        )
        booking = ledger.create(_request())
        ledger.cancel(booking.id)

        reopened = ledger.update_status(booking.id, BookingStatus.CONFIRMED)

        assert reopened.status == BookingStatus.CONFIRMED

    def test_update_missing(self, ledger):
        with pytest.raises(NotFoundError):
            ledger.update_status("nope", BookingStatus.CANCELLED)


class TestRecompute:
    def test_recompute_repairs_drift(self, ledger, catalog):
        """Test that counters are re-derived from the ledger."""
        ledger.create(_request())
        ledger.create(_request(restaurant_id="2", time="19:30"))
        cancelled = ledger.create(_request(restaurant_id="2", time="20:00"))
        ledger.cancel(cancelled.id)

        corrected = ledger.recompute_bookings_today()

        assert corrected["4"] == 1
        assert corrected["2"] == 1
        assert corrected["1"] == 0
        assert catalog.get_by_id("4").bookings_today == 1
        assert ledger.recompute_bookings_today() == {}


class TestCreateAsync:
    """Tests for creation with simulated latency."""

    @pytest.mark.asyncio
    async def test_create_async_commits(self, ledger):
        booking = await ledger.create_async(_request())
        assert ledger.get_by_id(booking.id) == booking

    @pytest.mark.asyncio
    async def test_cancelled_before_commit_leaves_no_trace(self, catalog, clock):
        """Test that cancelling the pending task writes nothing."""
        ledger = BookingLedger(
            InMemoryBookingRepository(),
            catalog,
            simulated_latency_seconds=10,
            clock=clock,
        )
        before = catalog.get_by_id("4").bookings_today

        task = asyncio.create_task(ledger.create_async(_request()))
        await asyncio.sleep(0)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert ledger.list_all() == []
        assert catalog.get_by_id("4").bookings_today == before
