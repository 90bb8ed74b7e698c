"""Restaurant data models."""

import re
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

WEEKDAYS = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class Address(BaseModel):
    """Street address plus coordinates."""

    model_config = ConfigDict(frozen=True)

    street: str = Field(..., description="Street and number")
    city: str = Field(..., description="City")
    state: str = Field(..., description="State or region")
    zip_code: str = Field(..., description="Postal code")
    country: str = Field(..., description="Country")
    latitude: float = Field(..., ge=-90, le=90, description="Decimal degrees")
    longitude: float = Field(..., ge=-180, le=180, description="Decimal degrees")


class ContactInfo(BaseModel):
    """How to reach the restaurant."""

    model_config = ConfigDict(frozen=True)

    phone: str = Field(..., description="Phone number")
    email: str = Field(..., description="Contact email")
    website: str | None = Field(None, description="Website URL")


class DayHours(BaseModel):
    """Opening hours for one day, as 24-hour HH:MM local times."""

    model_config = ConfigDict(frozen=True)

    open: str = Field(..., description="Opening time (HH:MM)")
    close: str = Field(..., description="Closing time (HH:MM)")

    @field_validator("open", "close")
    @classmethod
    def _check_time(cls, value: str) -> str:
        if not TIME_PATTERN.match(value):
            raise ValueError(f"'{value}' is not a HH:MM time")
        return value


def _check_hours(hours: dict[str, DayHours] | None) -> dict[str, DayHours] | None:
    if hours is None:
        return None
    unknown = [day for day in hours if day not in WEEKDAYS]
    if unknown:
        raise ValueError(f"Unknown weekday(s) in hours: {', '.join(unknown)}")
    return hours


class RestaurantCreate(BaseModel):
    """Fields a manager supplies when listing a restaurant."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Restaurant name")
    description: str = Field("", description="Short description")
    cuisine: str = Field(..., min_length=1, description="Cuisine category")
    price_range: int = Field(..., ge=1, le=4, description="Price tier 1-4")
    address: Address
    contact_info: ContactInfo
    hours: dict[str, DayHours] = Field(
        default_factory=dict, description="Weekday name to opening hours"
    )
    images: list[str] = Field(default_factory=list, description="Image URLs")

    @field_validator("hours")
    @classmethod
    def _validate_hours(cls, value):
        return _check_hours(value)


class RestaurantUpdate(BaseModel):
    """Partial restaurant update; only fields that were set are merged."""

    name: str | None = Field(None, min_length=1)
    description: str | None = None
    cuisine: str | None = Field(None, min_length=1)
    price_range: int | None = Field(None, ge=1, le=4)
    address: Address | None = None
    contact_info: ContactInfo | None = None
    hours: dict[str, DayHours] | None = None
    images: list[str] | None = None
    is_approved: bool | None = None
    suspended: bool | None = None

    @field_validator("hours")
    @classmethod
    def _validate_hours(cls, value):
        return _check_hours(value)

    @model_validator(mode="after")
    def _reject_explicit_nulls(self) -> "RestaurantUpdate":
        nulls = [name for name in self.model_fields_set if getattr(self, name) is None]
        if nulls:
            raise ValueError(f"Fields cannot be null: {', '.join(sorted(nulls))}")
        return self

    def changes(self) -> dict:
        """Return the explicitly set fields as model instances, not dicts."""
        return {name: getattr(self, name) for name in self.model_fields_set}


class Restaurant(RestaurantCreate):
    """A listed restaurant as stored in the catalog."""

    id: str = Field(..., description="Restaurant id")
    manager_id: str = Field(..., description="Owning manager's user id")
    rating: float = Field(0.0, ge=0, le=5, description="Average review rating")
    review_count: int = Field(0, ge=0, description="Number of reviews")
    bookings_today: int = Field(0, ge=0, description="Non-cancelled bookings today")
    is_approved: bool = Field(False, description="Visible in customer search")
    suspended: bool = Field(False, description="Blocked by an administrator")
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
    version: int = Field(1, ge=1, description="Bumped on every mutation")

    @property
    def is_bookable(self) -> bool:
        """Approved and not suspended."""
        return self.is_approved and not self.suspended


class SearchFilter(BaseModel):
    """Customer search criteria. Empty values impose no constraint."""

    location: str | None = Field(None, description="City, state or zip substring")
    cuisine: str | None = Field(None, description="Cuisine substring")
