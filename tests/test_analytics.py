"""Tests for admin analytics."""

import random
from datetime import timedelta

from dinereserve.models import Booking, BookingStatus
from dinereserve.seed import demo_restaurants, generate_bookings
from dinereserve.services import generate_analytics

from .conftest import NOW, TODAY


def _booking(n: int, restaurant_id: str, days_ago: int, status=BookingStatus.COMPLETED,
             party_size: int = 2) -> Booking:
    return Booking(
        id=f"b{n}",
        restaurant_id=restaurant_id,
        user_id="1",
        date=TODAY - timedelta(days=days_ago),
        time="19:00",
        party_size=party_size,
        status=status,
        created_at=NOW,
        updated_at=NOW,
    )


class TestGenerateAnalytics:
    """Tests for generate_analytics."""

    def test_empty_ledger(self):
        """Test that an empty ledger gives zeros, not errors."""
        report = generate_analytics([], demo_restaurants(), TODAY)

        assert report.total_bookings == 0
        assert report.average_party_size == 0.0
        assert len(report.bookings_by_day) == 30
        assert all(day.count == 0 for day in report.bookings_by_day)
        assert len(report.top_restaurants) == 5

    def test_window_bounds(self):
        """Test that only bookings within [today-30, today] count."""
        bookings = [
            _booking(1, "1", 0),
            _booking(2, "1", 30),
            _booking(3, "1", 31),
            _booking(4, "1", -1),
        ]

        report = generate_analytics(bookings, demo_restaurants(), TODAY)

        assert report.total_bookings == 2
        assert report.window_start == TODAY - timedelta(days=30)
        assert report.window_end == TODAY

    def test_counts_and_average(self):
        bookings = [
            _booking(1, "1", 1, BookingStatus.COMPLETED, party_size=2),
            _booking(2, "2", 2, BookingStatus.CANCELLED, party_size=4),
            _booking(3, "2", 2, BookingStatus.CONFIRMED, party_size=6),
        ]

        report = generate_analytics(bookings, demo_restaurants(), TODAY)

        assert report.total_bookings == 3
        assert report.completed_bookings == 1
        assert report.cancelled_bookings == 1
        assert report.average_party_size == 4.0

    def test_bookings_by_day_oldest_first(self):
        """Test the daily series ends today and runs oldest to newest."""
        report = generate_analytics([_booking(1, "1", 0), _booking(2, "1", 0)],
                                    demo_restaurants(), TODAY)

        days = [entry.date for entry in report.bookings_by_day]
        assert days == sorted(days)
        assert days[-1] == TODAY
        assert report.bookings_by_day[-1].count == 2

    def test_top_restaurants_ties_by_id(self):
        """Test ranking by count with ties broken by restaurant id."""
        bookings = [
            _booking(1, "3", 1),
            _booking(2, "3", 1),
            _booking(3, "6", 1),
            _booking(4, "2", 1),
            _booking(5, "5", 1),
        ]

        report = generate_analytics(bookings, demo_restaurants(), TODAY)

        assert [rc.restaurant_id for rc in report.top_restaurants] == [
            "3", "2", "5", "6", "1",
        ]
        assert report.top_restaurants[0].name == "Chez Panisse"
        assert report.top_restaurants[0].count == 2

    def test_every_restaurant_listed(self):
        report = generate_analytics([], demo_restaurants(), TODAY)
        assert [rc.restaurant_id for rc in report.bookings_by_restaurant] == [
            str(i) for i in range(1, 9)
        ]

    def test_seeded_bookings(self):
        """Test the demo generator feeds a sensible report."""
        bookings = generate_bookings(TODAY, random.Random(1))

        report = generate_analytics(bookings, demo_restaurants(), TODAY)

        past_or_today = [b for b in bookings if b.date <= TODAY]
        assert report.total_bookings == len(past_or_today)
        assert report.completed_bookings + report.cancelled_bookings == len(
            [b for b in past_or_today if b.date < TODAY]
        )
        assert 1 <= report.average_party_size <= 6
