"""In-memory repositories.

Entities are immutable snapshots, so handing out the stored objects is safe.
Dict insertion order gives the catalog its "source order".
"""

import logging
from typing import Generic, Protocol, TypeVar

from dinereserve.models import Booking, Restaurant, Review

logger = logging.getLogger(__name__)


class _HasId(Protocol):
    id: str


EntityT = TypeVar("EntityT", bound=_HasId)


class InMemoryRepository(Generic[EntityT]):
    """Dict-backed store keyed by entity id."""

    entity_name = "entity"

    def __init__(self, items: list[EntityT] | None = None) -> None:
        self._items: dict[str, EntityT] = {}
        for item in items or []:
            self.add(item)

    def get(self, entity_id: str) -> EntityT | None:
        return self._items.get(entity_id)

    def list(self) -> list[EntityT]:
        return list(self._items.values())

    def add(self, item: EntityT) -> None:
        if item.id in self._items:
            raise ValueError(f"{self.entity_name} '{item.id}' already exists")
        self._items[item.id] = item
        logger.debug(f"Added {self.entity_name} {item.id}")

    def save(self, item: EntityT) -> None:
        if item.id not in self._items:
            raise KeyError(item.id)
        # Replacing the value keeps the key's original position.
        self._items[item.id] = item

    def delete(self, entity_id: str) -> bool:
        return self._items.pop(entity_id, None) is not None

    def __len__(self) -> int:
        return len(self._items)


class InMemoryRestaurantRepository(InMemoryRepository[Restaurant]):
    entity_name = "restaurant"


class InMemoryBookingRepository(InMemoryRepository[Booking]):
    entity_name = "booking"


class InMemoryReviewRepository(InMemoryRepository[Review]):
    entity_name = "review"
