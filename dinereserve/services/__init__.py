"""Domain services for DineReserve."""

from dinereserve.services.analytics import generate_analytics
from dinereserve.services.auth import (
    AuthService,
    SimulatedAuthService,
    SupabaseAuthService,
    validate_password,
)
from dinereserve.services.availability import (
    AvailabilityGenerator,
    LedgerOccupancy,
    OccupancyPolicy,
    RandomOccupancy,
)
from dinereserve.services.booking_ledger import BookingLedger
from dinereserve.services.catalog import CatalogService
from dinereserve.services.reviews import ReviewService
from dinereserve.services.storage import (
    ImageStorage,
    InMemoryImageStorage,
    SupabaseImageStorage,
    validate_image,
)

__all__ = [
    "AuthService",
    "AvailabilityGenerator",
    "BookingLedger",
    "CatalogService",
    "ImageStorage",
    "InMemoryImageStorage",
    "LedgerOccupancy",
    "OccupancyPolicy",
    "RandomOccupancy",
    "ReviewService",
    "SimulatedAuthService",
    "SupabaseAuthService",
    "SupabaseImageStorage",
    "generate_analytics",
    "validate_image",
    "validate_password",
]
