"""Regex intent extraction for chat booking and search requests.

Deliberately simple: the first cuisine keyword wins, there is no negation
handling and only one value per field is extracted.
"""

import re
from collections.abc import Iterable

from pydantic import BaseModel

DEFAULT_CUISINES = ("indian", "japanese", "mexican", "american", "california")

_CITY_PATTERN = re.compile(r"\bin\s+([a-z][a-z ]*)", re.IGNORECASE)
_DATE_PATTERN = re.compile(r"\b(tomorrow|today|\d{4}-\d{2}-\d{2})\b", re.IGNORECASE)
_TIME_PATTERN = re.compile(r"\b(\d{1,2}:\d{2}|\d{1,2} ?(?:am|pm))\b", re.IGNORECASE)
_PARTY_PATTERN = re.compile(r"\btable for (\d+)", re.IGNORECASE)

# Words that end a city name captured after "in".
_CITY_STOPWORDS = {"today", "tomorrow", "at", "for", "on", "tonight", "this", "next"}


class ExtractedFilters(BaseModel):
    cuisine: str | None = None
    city: str | None = None
    date: str | None = None
    time: str | None = None
    party_size: int | None = None

    def has_any(self) -> bool:
        return any(
            value is not None
            for value in (self.cuisine, self.city, self.date, self.time, self.party_size)
        )


def _cuisine_pattern(cuisines: Iterable[str]) -> re.Pattern | None:
    names = sorted({c.lower() for c in cuisines if c}, key=len, reverse=True)
    if not names:
        return None
    return re.compile(r"\b(" + "|".join(re.escape(n) for n in names) + r")\b", re.IGNORECASE)


def _trim_city(raw: str) -> str | None:
    words = []
    for word in raw.split():
        if word.lower() in _CITY_STOPWORDS:
            break
        words.append(word)
    return " ".join(words) or None


def extract_filters(
    text: str, cuisines: Iterable[str] = DEFAULT_CUISINES
) -> ExtractedFilters:
    """Pull cuisine, city, date, time and party size out of free text.

    Args:
        text: The user's message
        cuisines: Cuisine keywords to look for

    Returns:
        ExtractedFilters with None for anything not found
    """
    cuisine_pattern = _cuisine_pattern(cuisines)
    cuisine_match = cuisine_pattern.search(text) if cuisine_pattern else None
    city_match = _CITY_PATTERN.search(text)
    date_match = _DATE_PATTERN.search(text)
    time_match = _TIME_PATTERN.search(text)
    party_match = _PARTY_PATTERN.search(text)

    return ExtractedFilters(
        cuisine=cuisine_match.group(1) if cuisine_match else None,
        city=_trim_city(city_match.group(1)) if city_match else None,
        date=date_match.group(1) if date_match else None,
        time=time_match.group(1) if time_match else None,
        party_size=int(party_match.group(1)) if party_match else None,
    )
