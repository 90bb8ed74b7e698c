"""Chat widget request and response models."""

from pydantic import BaseModel, Field


class ChatMessage(BaseModel):
    role: str = Field("user", description="user or assistant")
    content: str = ""


class ChatRequest(BaseModel):
    messages: list[ChatMessage] = Field(..., min_length=1)


class RestaurantMention(BaseModel):
    id: str
    name: str


class RestaurantSummary(BaseModel):
    id: str
    name: str
    cuisine: str
    city: str


class ChatResponse(BaseModel):
    """Reply to the chat widget.

    ``source`` says which path produced the reply: ``mention`` for a restaurant
    named in the message, ``search`` for an intent-filtered listing, ``llm`` for
    a model answer.
    """

    reply: str
    source: str
    restaurant: RestaurantMention | None = None
    restaurants: list[RestaurantSummary] = Field(default_factory=list)
