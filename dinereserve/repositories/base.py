"""Repository interfaces, one per entity."""

from typing import Protocol

from dinereserve.models import Booking, Restaurant, Review


class RestaurantRepository(Protocol):
    def get(self, restaurant_id: str) -> Restaurant | None: ...

    def list(self) -> list[Restaurant]: ...

    def add(self, restaurant: Restaurant) -> None: ...

    def save(self, restaurant: Restaurant) -> None: ...

    def delete(self, restaurant_id: str) -> bool: ...


class BookingRepository(Protocol):
    def get(self, booking_id: str) -> Booking | None: ...

    def list(self) -> list[Booking]: ...

    def add(self, booking: Booking) -> None: ...

    def save(self, booking: Booking) -> None: ...

    def delete(self, booking_id: str) -> bool: ...


class ReviewRepository(Protocol):
    def get(self, review_id: str) -> Review | None: ...

    def list(self) -> list[Review]: ...

    def add(self, review: Review) -> None: ...

    def save(self, review: Review) -> None: ...

    def delete(self, review_id: str) -> bool: ...
