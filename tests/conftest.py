"""Shared fixtures: a pinned clock, demo catalog and simulation config."""

from datetime import datetime

import pytest

from dinereserve.config import Config
from dinereserve.repositories import (
    InMemoryBookingRepository,
    InMemoryRestaurantRepository,
)
from dinereserve.seed import demo_restaurants
from dinereserve.services import BookingLedger, CatalogService

# A Monday.
NOW = datetime(2026, 10, 19, 12, 0)
TODAY = NOW.date()


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def config():
    """Simulation config that ignores the developer's .env."""
    return Config(
        _env_file=None,
        simulation_mode=True,
        seed_demo_data=False,
        llm_api_key=None,
        supabase_url=None,
        supabase_key=None,
        admin_email="admin@dinereserve.test",
        admin_password="Admin#2024",
        simulated_latency_seconds=0.0,
    )


@pytest.fixture
def catalog(clock):
    return CatalogService(InMemoryRestaurantRepository(demo_restaurants()), clock=clock)


@pytest.fixture
def ledger(catalog, clock):
    return BookingLedger(InMemoryBookingRepository(), catalog, clock=clock)
