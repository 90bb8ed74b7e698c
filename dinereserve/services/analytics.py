"""Admin analytics over the booking ledger."""

import logging
from collections import Counter
from collections.abc import Iterable
from datetime import date, timedelta

from dinereserve.models import (
    AnalyticsReport,
    Booking,
    BookingStatus,
    DailyCount,
    Restaurant,
    RestaurantCount,
)

logger = logging.getLogger(__name__)

TOP_RESTAURANT_LIMIT = 5


def generate_analytics(
    bookings: Iterable[Booking],
    restaurants: Iterable[Restaurant],
    today: date,
    window_days: int = 30,
) -> AnalyticsReport:
    """Summarize bookings dated within the trailing window ending today.

    Args:
        bookings: Ledger snapshot
        restaurants: Catalog snapshot, in display order
        today: Last day of the window
        window_days: Window length in days

    Returns:
        AnalyticsReport with per-day counts oldest first and the top five
        restaurants by booking count (ties broken by restaurant id)
    """
    window_start = today - timedelta(days=window_days)
    recent = [b for b in bookings if window_start <= b.date <= today]

    total = len(recent)
    completed = sum(1 for b in recent if b.status == BookingStatus.COMPLETED)
    cancelled = sum(1 for b in recent if b.status == BookingStatus.CANCELLED)
    average_party_size = sum(b.party_size for b in recent) / total if total else 0.0

    per_day = Counter(b.date for b in recent)
    bookings_by_day = [
        DailyCount(date=day, count=per_day.get(day, 0))
        for day in (today - timedelta(days=offset) for offset in range(window_days - 1, -1, -1))
    ]

    per_restaurant = Counter(b.restaurant_id for b in recent)
    bookings_by_restaurant = [
        RestaurantCount(restaurant_id=r.id, name=r.name, count=per_restaurant.get(r.id, 0))
        for r in restaurants
    ]
    top_restaurants = sorted(
        bookings_by_restaurant, key=lambda rc: (-rc.count, rc.restaurant_id)
    )[:TOP_RESTAURANT_LIMIT]

    logger.debug(
        f"Analytics for {window_start}..{today}: {total} bookings, "
        f"{completed} completed, {cancelled} cancelled"
    )

    return AnalyticsReport(
        window_start=window_start,
        window_end=today,
        total_bookings=total,
        completed_bookings=completed,
        cancelled_bookings=cancelled,
        average_party_size=average_party_size,
        bookings_by_day=bookings_by_day,
        bookings_by_restaurant=bookings_by_restaurant,
        top_restaurants=top_restaurants,
    )
