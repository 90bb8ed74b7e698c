"""Exception hierarchy for DineReserve domain and upstream failures."""


class DineReserveError(Exception):
    """Base class for all DineReserve errors."""


class NotFoundError(DineReserveError):
    """An entity lookup by id found nothing."""

    def __init__(self, entity: str, entity_id: str) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} '{entity_id}' not found")


class InvalidRequestError(DineReserveError):
    """Input was rejected before reaching the domain."""


class InvalidTransitionError(DineReserveError):
    """A booking status change is not allowed from the current status."""

    def __init__(self, booking_id: str, current: str, requested: str) -> None:
        self.booking_id = booking_id
        self.current = current
        self.requested = requested
        super().__init__(
            f"Booking '{booking_id}' cannot move from {current} to {requested}"
        )


class SlotUnavailableError(DineReserveError):
    """The requested time slot has no remaining capacity."""


class VersionConflictError(DineReserveError):
    """A restaurant was modified since the caller last read it."""

    def __init__(self, restaurant_id: str, expected: int, actual: int) -> None:
        self.restaurant_id = restaurant_id
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Restaurant '{restaurant_id}' is at version {actual}, expected {expected}"
        )


class DuplicateReviewError(DineReserveError):
    """A user tried to review the same restaurant twice."""


class InvalidUploadError(DineReserveError):
    """An image upload failed type or size validation."""


class AuthenticationError(DineReserveError):
    """Credentials or tokens were rejected."""


class UpstreamError(DineReserveError):
    """A third-party auth, storage or LLM call failed."""
