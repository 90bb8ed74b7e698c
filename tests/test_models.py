"""Tests for data models."""

from datetime import date

import pytest
from pydantic import ValidationError

from dinereserve.models import (
    ALLOWED_TRANSITIONS,
    Address,
    BookingCreate,
    BookingStatus,
    ContactInfo,
    DayHours,
    RestaurantCreate,
    RestaurantUpdate,
    ReviewCreate,
)
from dinereserve.seed import demo_restaurants


def _listing(**overrides) -> dict:
    data = {
        "name": "Test Bistro",
        "cuisine": "French",
        "price_range": 2,
        "address": Address(
            street="1 Main St",
            city="Oakland",
            state="CA",
            zip_code="94612",
            country="USA",
            latitude=37.8,
            longitude=-122.27,
        ),
        "contact_info": ContactInfo(phone="(510) 555-0100", email="hi@bistro.test"),
        "hours": {"monday": DayHours(open="11:00", close="22:00")},
    }
    data.update(overrides)
    return data


class TestRestaurantCreate:
    """Tests for the RestaurantCreate model."""

    def test_create_listing(self):
        """Test creating a valid listing."""
        listing = RestaurantCreate(**_listing())

        assert listing.name == "Test Bistro"
        assert listing.hours["monday"].open == "11:00"
        assert listing.images == []

    def test_price_range_bounds(self):
        """Test that price range must be 1-4."""
        with pytest.raises(ValidationError):
            RestaurantCreate(**_listing(price_range=5))
        with pytest.raises(ValidationError):
            RestaurantCreate(**_listing(price_range=0))

    def test_unknown_weekday_rejected(self):
        """Test that hours keys must be lowercase English weekdays."""
        with pytest.raises(ValidationError, match="Unknown weekday"):
            RestaurantCreate(
                **_listing(hours={"Funday": DayHours(open="10:00", close="12:00")})
            )

    def test_bad_time_rejected(self):
        """Test that opening hours must be HH:MM."""
        with pytest.raises(ValidationError):
            DayHours(open="7pm", close="22:00")

    def test_latitude_bounds(self):
        """Test coordinate validation."""
        with pytest.raises(ValidationError):
            Address(
                street="x", city="x", state="x", zip_code="x", country="x",
                latitude=91, longitude=0,
            )

    def test_restaurant_immutable(self):
        """Test that stored restaurants are frozen."""
        restaurant = demo_restaurants()[0]

        with pytest.raises(ValidationError):
            restaurant.name = "New Name"


class TestRestaurantUpdate:
    """Tests for partial restaurant updates."""

    def test_changes_only_set_fields(self):
        """Test that only explicitly set fields are merged."""
        update = RestaurantUpdate(name="Renamed", price_range=3)

        assert update.changes() == {"name": "Renamed", "price_range": 3}

    def test_explicit_null_rejected(self):
        """Test that required fields cannot be nulled out."""
        with pytest.raises(ValidationError, match="cannot be null"):
            RestaurantUpdate(name=None)


class TestBookingCreate:
    """Tests for the BookingCreate model."""

    def test_create_booking_request(self):
        """Test creating a booking request."""
        request = BookingCreate(
            restaurant_id="4",
            user_id="1",
            date="2026-10-19",
            time="19:00",
            party_size=4,
        )

        assert request.date == date(2026, 10, 19)
        assert request.special_requests is None

    def test_party_size_must_be_positive(self):
        """Test party size validation."""
        with pytest.raises(ValidationError):
            BookingCreate(
                restaurant_id="4", user_id="1", date="2026-10-19", time="19:00",
                party_size=0,
            )

    def test_time_format(self):
        """Test that time must be HH:MM."""
        with pytest.raises(ValidationError):
            BookingCreate(
                restaurant_id="4", user_id="1", date="2026-10-19", time="7:00 PM",
                party_size=2,
            )


class TestBookingStatus:
    """Tests for status values and transitions."""

    def test_status_values(self):
        """Test status wire values."""
        assert BookingStatus.PENDING.value == "pending"
        assert BookingStatus("completed") == BookingStatus.COMPLETED

    def test_terminal_states(self):
        """Test that cancelled and completed have no way out."""
        assert ALLOWED_TRANSITIONS[BookingStatus.CANCELLED] == frozenset()
        assert ALLOWED_TRANSITIONS[BookingStatus.COMPLETED] == frozenset()

    def test_pending_cannot_complete(self):
        """Test that a booking must be confirmed before it completes."""
        assert BookingStatus.COMPLETED not in ALLOWED_TRANSITIONS[BookingStatus.PENDING]


class TestReviewCreate:
    def test_rating_bounds(self):
        """Test that ratings are 1-5 stars."""
        assert ReviewCreate(rating=5).rating == 5
        with pytest.raises(ValidationError):
            ReviewCreate(rating=6)
