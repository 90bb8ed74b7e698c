"""Restaurant catalog: search, listing management, approval and suspension."""

import logging
import threading
import uuid
from collections.abc import Callable
from datetime import datetime

from dinereserve.errors import NotFoundError, VersionConflictError
from dinereserve.models import (
    Restaurant,
    RestaurantCreate,
    RestaurantUpdate,
    SearchFilter,
)
from dinereserve.repositories import RestaurantRepository

logger = logging.getLogger(__name__)


class CatalogService:
    """Holds the restaurant set and answers filtered queries.

    Validation of individual fields happens in the pydantic models; this layer
    only knows about ids, approval, suspension and the bookings-today counter.
    """

    def __init__(
        self,
        repository: RestaurantRepository,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """Initialize the catalog.

        Args:
            repository: Restaurant storage
            clock: Source of "now" for audit timestamps
        """
        self.repository = repository
        self.clock = clock
        # Every read-modify-write of a restaurant happens under this lock.
        self._lock = threading.RLock()

    @staticmethod
    def generate_restaurant_id() -> str:
        return f"restaurant-{uuid.uuid4().hex[:12]}"

    def list_restaurants(self, approved_only: bool = False) -> list[Restaurant]:
        """Return all restaurants, or only approved ones, in insertion order."""
        restaurants = self.repository.list()
        if approved_only:
            return [r for r in restaurants if r.is_approved]
        return restaurants

    def list_pending(self) -> list[Restaurant]:
        """Return restaurants waiting for admin approval."""
        return [r for r in self.repository.list() if not r.is_approved]

    def list_by_manager(self, manager_id: str) -> list[Restaurant]:
        return [r for r in self.repository.list() if r.manager_id == manager_id]

    def search(self, search_filter: SearchFilter) -> list[Restaurant]:
        """Filter approved, unsuspended restaurants by location and cuisine.

        Location matches city, state or zip code as a case-insensitive
        substring. Cuisine matches the cuisine string the same way. When both
        are given a restaurant must match both.

        Args:
            search_filter: Search criteria; empty values are ignored

        Returns:
            Matching restaurants in insertion order
        """
        logger.info(
            f"Searching restaurants: location={search_filter.location!r}, "
            f"cuisine={search_filter.cuisine!r}"
        )
        results = [r for r in self.repository.list() if r.is_bookable]

        if search_filter.location:
            needle = search_filter.location.lower()
            results = [
                r
                for r in results
                if needle in r.address.city.lower()
                or needle in r.address.state.lower()
                or needle in r.address.zip_code.lower()
            ]

        if search_filter.cuisine:
            needle = search_filter.cuisine.lower()
            results = [r for r in results if needle in r.cuisine.lower()]

        logger.debug(f"Search returned {len(results)} restaurants")
        return results

    def get_by_id(self, restaurant_id: str) -> Restaurant:
        """Look up a restaurant.

        Raises:
            NotFoundError: If no restaurant has this id
        """
        restaurant = self.repository.get(restaurant_id)
        if restaurant is None:
            raise NotFoundError("Restaurant", restaurant_id)
        return restaurant

    def create(self, data: RestaurantCreate, manager_id: str) -> Restaurant:
        """Add a new listing. New listings always start unapproved.

        Args:
            data: Listing details
            manager_id: Owner of the listing

        Returns:
            The stored restaurant
        """
        now = self.clock()
        restaurant = Restaurant(
            **data.model_dump(),
            id=self.generate_restaurant_id(),
            manager_id=manager_id,
            rating=0.0,
            review_count=0,
            bookings_today=0,
            is_approved=False,
            suspended=False,
            created_at=now,
            updated_at=now,
            version=1,
        )
        self.repository.add(restaurant)
        logger.info(f"Created restaurant {restaurant.id} ({restaurant.name})")
        return restaurant

    def update(
        self,
        restaurant_id: str,
        changes: RestaurantUpdate | dict,
        expected_version: int | None = None,
    ) -> Restaurant:
        """Shallow-merge changes into a restaurant and bump its version.

        Args:
            restaurant_id: Restaurant to change
            changes: Fields to overwrite
            expected_version: Version the caller last read, if it cares about
                lost updates

        Raises:
            NotFoundError: If no restaurant has this id
            VersionConflictError: If expected_version is stale
        """
        if isinstance(changes, RestaurantUpdate):
            changes = changes.changes()
        return self._apply(restaurant_id, changes, expected_version)

    def approve(self, restaurant_id: str) -> Restaurant:
        logger.info(f"Approving restaurant {restaurant_id}")
        return self._apply(restaurant_id, {"is_approved": True})

    def toggle_suspension(self, restaurant_id: str) -> Restaurant:
        with self._lock:
            suspended = not self.get_by_id(restaurant_id).suspended
            logger.info(
                f"{'Suspending' if suspended else 'Reinstating'} restaurant {restaurant_id}"
            )
            return self._apply(restaurant_id, {"suspended": suspended})

    def add_image(self, restaurant_id: str, url: str) -> Restaurant:
        """Append an image URL to the restaurant's current gallery.

        Raises:
            NotFoundError: If no restaurant has this id
        """
        with self._lock:
            images = self.get_by_id(restaurant_id).images
            return self._apply(restaurant_id, {"images": [*images, url]})

    def remove(self, restaurant_id: str) -> None:
        """Hard-delete a restaurant (admin rejection). No tombstone is kept.

        Raises:
            NotFoundError: If no restaurant has this id
        """
        if not self.repository.delete(restaurant_id):
            raise NotFoundError("Restaurant", restaurant_id)
        logger.info(f"Removed restaurant {restaurant_id}")

    def apply_booking_effect(self, restaurant_id: str, delta: int) -> Restaurant | None:
        """Adjust a restaurant's bookings-today counter, floored at zero.

        This is the only place bookings touch restaurant state.

        Returns:
            The updated restaurant, or None if it no longer exists
        """
        with self._lock:
            restaurant = self.repository.get(restaurant_id)
            if restaurant is None:
                logger.warning(
                    f"Booking effect skipped: restaurant {restaurant_id} does not exist"
                )
                return None
            count = max(0, restaurant.bookings_today + delta)
            if count == restaurant.bookings_today:
                return restaurant
            return self._apply(restaurant_id, {"bookings_today": count})

    def set_bookings_today(self, restaurant_id: str, count: int) -> Restaurant:
        return self._apply(restaurant_id, {"bookings_today": max(0, count)})

    def set_review_stats(
        self, restaurant_id: str, rating: float, review_count: int
    ) -> Restaurant:
        return self._apply(
            restaurant_id, {"rating": rating, "review_count": review_count}
        )

    def _apply(
        self,
        restaurant_id: str,
        changes: dict,
        expected_version: int | None = None,
    ) -> Restaurant:
        with self._lock:
            restaurant = self.get_by_id(restaurant_id)
            if expected_version is not None and expected_version != restaurant.version:
                raise VersionConflictError(
                    restaurant_id, expected_version, restaurant.version
                )

            updated = restaurant.model_copy(
                update={
                    **changes,
                    "updated_at": self.clock(),
                    "version": restaurant.version + 1,
                }
            )
            self.repository.save(updated)
        logger.debug(
            f"Restaurant {restaurant_id} updated to version {updated.version}: "
            f"{sorted(changes)}"
        )
        return updated
