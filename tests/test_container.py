"""Tests for service wiring and demo data."""

import random
from datetime import timedelta

import pytest

from dinereserve.container import Container
from dinereserve.models import BookingStatus
from dinereserve.seed import demo_restaurants, demo_reviews, generate_bookings
from dinereserve.services import (
    InMemoryImageStorage,
    LedgerOccupancy,
    RandomOccupancy,
    SimulatedAuthService,
    SupabaseAuthService,
    SupabaseImageStorage,
)

from .conftest import TODAY


class TestDemoData:
    """Tests for the seed catalog."""

    def test_demo_restaurants(self):
        restaurants = demo_restaurants()

        assert len(restaurants) == 8
        tacolicious = restaurants[3]
        assert tacolicious.id == "4"
        assert tacolicious.cuisine == "Mexican"
        assert tacolicious.address.zip_code == "94110"
        assert tacolicious.hours["friday"].close == "23:00"
        assert all(r.is_approved for r in restaurants)

    def test_demo_reviews_reference_restaurants(self):
        ids = {r.id for r in demo_restaurants()}
        assert all(review.restaurant_id in ids for review in demo_reviews())

    def test_generated_bookings(self):
        """Test statuses follow the date: past settled, future open."""
        bookings = generate_bookings(TODAY, random.Random(5))

        assert len({b.id for b in bookings}) == len(bookings)
        for booking in bookings:
            assert TODAY - timedelta(days=14) <= booking.date <= TODAY + timedelta(days=14)
            assert booking.restaurant_id in {"1", "2", "3", "4", "5", "6"}
            if booking.date < TODAY:
                assert booking.status in {BookingStatus.COMPLETED, BookingStatus.CANCELLED}
            else:
                assert booking.status in {BookingStatus.CONFIRMED, BookingStatus.PENDING}

    def test_generated_per_day(self):
        bookings = generate_bookings(TODAY, random.Random(5))
        today = [b for b in bookings if b.date == TODAY]
        assert 5 <= len(today) <= 14


class TestContainer:
    """Tests for simulation and production wiring."""

    def test_simulation_wiring(self, config, clock):
        container = Container(config, clock=clock)

        assert isinstance(container.availability.policy, RandomOccupancy)
        assert container.ledger.simulation_mode is True
        assert isinstance(container.auth, SimulatedAuthService)
        assert isinstance(container.storage, InMemoryImageStorage)
        assert container.catalog.list_restaurants() == []

    def test_production_wiring(self, config, clock):
        production = config.model_copy(
            update={
                "simulation_mode": False,
                "supabase_url": "https://project.supabase.test",
                "supabase_key": "anon-key",
                "tables_per_slot": 2,
            }
        )

        container = Container(production, clock=clock)

        assert isinstance(container.availability.policy, LedgerOccupancy)
        assert container.ledger.occupancy is container.availability.policy
        assert container.availability.policy.tables_per_slot == 2
        assert isinstance(container.auth, SupabaseAuthService)
        assert isinstance(container.storage, SupabaseImageStorage)

    def test_production_requires_supabase(self, config, clock):
        with pytest.raises(ValueError, match="Supabase"):
            Container(config.model_copy(update={"simulation_mode": False}), clock=clock)

    def test_seed_demo_data(self, config, clock):
        container = Container(config, clock=clock, rng=random.Random(11))

        container.seed_demo_data()

        assert len(container.catalog.list_restaurants()) == 8
        assert len(container.reviews.list_for_restaurant("1")) == 2
        assert container.ledger.list_all()

    def test_analytics_uses_configured_window(self, config, clock):
        container = Container(
            config.model_copy(update={"analytics_window_days": 7}), clock=clock
        )
        container.seed_demo_data()

        report = container.analytics()

        assert len(report.bookings_by_day) == 7
        assert report.window_end == TODAY
