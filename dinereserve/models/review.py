"""Review data models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ReviewCreate(BaseModel):
    """A customer's review of a restaurant."""

    model_config = ConfigDict(frozen=True)

    rating: int = Field(..., ge=1, le=5, description="Stars, 1-5")
    comment: str = Field("", description="Free-text comment")


class Review(ReviewCreate):
    """A stored review."""

    id: str
    restaurant_id: str
    user_id: str
    user_name: str = Field(..., description="Reviewer's display name")
    date: datetime = Field(default_factory=datetime.now)
