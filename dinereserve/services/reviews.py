"""Restaurant reviews and the rating aggregate they drive."""

import logging
import uuid
from collections.abc import Callable
from datetime import datetime

from dinereserve.errors import DuplicateReviewError
from dinereserve.models import Review, ReviewCreate, User
from dinereserve.repositories import ReviewRepository
from dinereserve.services.catalog import CatalogService

logger = logging.getLogger(__name__)


class ReviewService:
    """Stores reviews and keeps restaurant rating/review_count in step."""

    def __init__(
        self,
        repository: ReviewRepository,
        catalog: CatalogService,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.repository = repository
        self.catalog = catalog
        self.clock = clock

    def list_for_restaurant(self, restaurant_id: str) -> list[Review]:
        self.catalog.get_by_id(restaurant_id)
        return [r for r in self.repository.list() if r.restaurant_id == restaurant_id]

    def add(self, restaurant_id: str, data: ReviewCreate, user: User) -> Review:
        """Add a user's review and refresh the restaurant's rating.

        Raises:
            NotFoundError: If the restaurant does not exist
            DuplicateReviewError: If the user already reviewed it
        """
        restaurant = self.catalog.get_by_id(restaurant_id)

        existing = self.list_for_restaurant(restaurant_id)
        if any(r.user_id == user.id for r in existing):
            raise DuplicateReviewError(
                f"User '{user.id}' has already reviewed restaurant '{restaurant_id}'"
            )

        review = Review(
            **data.model_dump(),
            id=f"review-{uuid.uuid4().hex[:12]}",
            restaurant_id=restaurant_id,
            user_id=user.id,
            user_name=user.name,
            date=self.clock(),
        )
        self.repository.add(review)

        # Seed restaurants carry counts for reviews that are not stored here,
        # so fold the new rating into the running average.
        count = restaurant.review_count + 1
        rating = (restaurant.rating * restaurant.review_count + review.rating) / count
        self.catalog.set_review_stats(
            restaurant_id, rating=round(rating, 1), review_count=count
        )
        logger.info(f"User {user.id} rated restaurant {restaurant_id} {review.rating}/5")
        return review
