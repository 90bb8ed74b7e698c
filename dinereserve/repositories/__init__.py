"""Storage for restaurants, bookings and reviews."""

from dinereserve.repositories.base import (
    BookingRepository,
    RestaurantRepository,
    ReviewRepository,
)
from dinereserve.repositories.memory import (
    InMemoryBookingRepository,
    InMemoryRepository,
    InMemoryRestaurantRepository,
    InMemoryReviewRepository,
)

__all__ = [
    "BookingRepository",
    "InMemoryBookingRepository",
    "InMemoryRepository",
    "InMemoryRestaurantRepository",
    "InMemoryReviewRepository",
    "RestaurantRepository",
    "ReviewRepository",
]
