"""Chat widget backend: intent extraction and the LLM proxy."""

from dinereserve.chat.intent import ExtractedFilters, extract_filters
from dinereserve.chat.service import ChatService

__all__ = ["ChatService", "ExtractedFilters", "extract_filters"]
