"""Admin analytics report models."""

import datetime as dt

from pydantic import BaseModel, Field


class DailyCount(BaseModel):
    date: dt.date
    count: int


class RestaurantCount(BaseModel):
    restaurant_id: str
    name: str
    count: int


class AnalyticsReport(BaseModel):
    """Booking statistics over a trailing window ending today."""

    window_start: dt.date
    window_end: dt.date
    total_bookings: int = 0
    completed_bookings: int = 0
    cancelled_bookings: int = 0
    average_party_size: float = 0.0
    bookings_by_day: list[DailyCount] = Field(
        default_factory=list, description="Oldest to newest"
    )
    bookings_by_restaurant: list[RestaurantCount] = Field(default_factory=list)
    top_restaurants: list[RestaurantCount] = Field(default_factory=list)
