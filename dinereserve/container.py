"""Composition root: builds repositories and services from the configuration."""

import logging
import random
from collections.abc import Callable
from datetime import datetime

from openai import AsyncOpenAI

from dinereserve.agents import AssistantAgent
from dinereserve.chat import ChatService
from dinereserve.config import Config
from dinereserve.guardrails import input_validation_guardrail
from dinereserve.models import AnalyticsReport
from dinereserve.repositories import (
    InMemoryBookingRepository,
    InMemoryRestaurantRepository,
    InMemoryReviewRepository,
)
from dinereserve.seed import demo_restaurants, demo_reviews, generate_bookings
from dinereserve.services import (
    AuthService,
    AvailabilityGenerator,
    BookingLedger,
    CatalogService,
    ImageStorage,
    InMemoryImageStorage,
    LedgerOccupancy,
    RandomOccupancy,
    ReviewService,
    SimulatedAuthService,
    SupabaseAuthService,
    SupabaseImageStorage,
    generate_analytics,
)

logger = logging.getLogger(__name__)


class Container:
    """Owns every repository and service for one running application.

    Simulation mode wires random availability, auto-confirming bookings and
    in-memory auth/storage. Otherwise availability is derived from the ledger
    and auth/storage go to Supabase.
    """

    def __init__(
        self,
        config: Config,
        clock: Callable[[], datetime] = datetime.now,
        rng: random.Random | None = None,
        auth: AuthService | None = None,
        storage: ImageStorage | None = None,
        model_client: AsyncOpenAI | None = None,
    ) -> None:
        """Wire the application.

        Args:
            config: Application configuration
            clock: Source of "now"; tests pin it
            rng: Randomness for simulated availability and demo bookings
            auth: Override for the auth boundary
            storage: Override for the image storage boundary
            model_client: Override for the upstream chat model client
        """
        self.config = config
        self.clock = clock
        self.rng = rng or random.Random()

        self.restaurant_repository = InMemoryRestaurantRepository()
        self.booking_repository = InMemoryBookingRepository()
        self.review_repository = InMemoryReviewRepository()

        self.catalog = CatalogService(self.restaurant_repository, clock=clock)

        if config.simulation_mode:
            policy = RandomOccupancy(config.mock_availability_probability, self.rng)
            ledger_occupancy = None
        else:
            policy = LedgerOccupancy(
                self.booking_repository.list, config.tables_per_slot
            )
            ledger_occupancy = policy

        self.availability = AvailabilityGenerator(
            policy, granularity_minutes=config.slot_granularity_minutes
        )
        self.ledger = BookingLedger(
            self.booking_repository,
            self.catalog,
            availability=self.availability,
            occupancy=ledger_occupancy,
            simulation_mode=config.simulation_mode,
            enforce_transitions=config.enforce_status_transitions,
            simulated_latency_seconds=config.simulated_latency_seconds,
            clock=clock,
        )
        self.reviews = ReviewService(self.review_repository, self.catalog, clock=clock)

        if auth is not None:
            self.auth = auth
        elif config.simulation_mode:
            self.auth = SimulatedAuthService(config)
        else:
            self.auth = SupabaseAuthService(config)

        if storage is not None:
            self.storage = storage
        elif config.simulation_mode:
            self.storage = InMemoryImageStorage(
                config.public_storage_url, config.max_upload_bytes
            )
        else:
            self.storage = SupabaseImageStorage(config)

        self.assistant = AssistantAgent(
            self.catalog, config, input_guardrails=[input_validation_guardrail]
        )
        self.chat = ChatService(
            self.catalog, self.assistant, config, model_client=model_client
        )

        mode = "simulation" if config.simulation_mode else "production"
        logger.info(f"Container wired in {mode} mode")

    def seed_demo_data(self) -> None:
        """Load the demo restaurants, reviews and a month of bookings."""
        for restaurant in demo_restaurants():
            self.restaurant_repository.add(restaurant)
        for review in demo_reviews():
            self.review_repository.add(review)
        bookings = generate_bookings(self.clock().date(), self.rng)
        for booking in bookings:
            self.booking_repository.add(booking)
        logger.info(
            f"Seeded {len(self.restaurant_repository)} restaurants, "
            f"{len(self.review_repository)} reviews and {len(bookings)} bookings"
        )

    def analytics(self) -> AnalyticsReport:
        return generate_analytics(
            self.ledger.list_all(),
            self.catalog.list_restaurants(),
            self.ledger.today(),
            window_days=self.config.analytics_window_days,
        )
