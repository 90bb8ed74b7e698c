"""Data models for the DineReserve system."""

from dinereserve.models.analytics import AnalyticsReport, DailyCount, RestaurantCount
from dinereserve.models.booking import (
    ALLOWED_TRANSITIONS,
    Booking,
    BookingCreate,
    BookingStatus,
    StatusUpdate,
    TimeSlot,
)
from dinereserve.models.chat import (
    ChatMessage,
    ChatRequest,
    ChatResponse,
    RestaurantMention,
    RestaurantSummary,
)
from dinereserve.models.restaurant import (
    WEEKDAYS,
    Address,
    ContactInfo,
    DayHours,
    Restaurant,
    RestaurantCreate,
    RestaurantUpdate,
    SearchFilter,
)
from dinereserve.models.review import Review, ReviewCreate
from dinereserve.models.user import (
    Credentials,
    GoogleLogin,
    PasswordCheck,
    PasswordResetRequest,
    Registration,
    User,
    UserRole,
)

__all__ = [
    "ALLOWED_TRANSITIONS",
    "WEEKDAYS",
    "Address",
    "AnalyticsReport",
    "Booking",
    "BookingCreate",
    "BookingStatus",
    "ChatMessage",
    "ChatRequest",
    "ChatResponse",
    "ContactInfo",
    "Credentials",
    "DailyCount",
    "DayHours",
    "GoogleLogin",
    "PasswordCheck",
    "PasswordResetRequest",
    "Registration",
    "Restaurant",
    "RestaurantCount",
    "RestaurantCreate",
    "RestaurantMention",
    "RestaurantSummary",
    "RestaurantUpdate",
    "Review",
    "ReviewCreate",
    "SearchFilter",
    "StatusUpdate",
    "TimeSlot",
    "User",
    "UserRole",
]
