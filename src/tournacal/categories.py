from __future__ import annotations

from enum import Enum
from typing import Callable, Iterable

from .labels import label
from .models import Tournament


class EventCategory(str, Enum):
    LOCAL = "Local"
    OTS = "OTS"
    REGIONAL = "Regional"
    NATIONAL = "National"
    FREE_PLAY = "FreePlay"


CATEGORY_DISPLAY_ORDER = (
    EventCategory.FREE_PLAY,
    EventCategory.LOCAL,
    EventCategory.OTS,
    EventCategory.REGIONAL,
    EventCategory.NATIONAL,
)

_CATEGORY_COLORS = {
    EventCategory.LOCAL: "#3b82f6",
    EventCategory.OTS: "#a855f7",
    EventCategory.REGIONAL: "#f59e0b",
    EventCategory.NATIONAL: "#ef4444",
    EventCategory.FREE_PLAY: "#10b981",
}

# (predicate over lower-cased event name and url, category); first match wins.
_CATEGORY_RULES: list[tuple[Callable[[str, str], bool], EventCategory]] = [
    (lambda name, url: "open dueling" in name, EventCategory.FREE_PLAY),
    (lambda name, url: "opens" in url, EventCategory.REGIONAL),
    (lambda name, url: "regional" in name, EventCategory.REGIONAL),
    (lambda name, url: "national" in name or "nemzeti" in name, EventCategory.NATIONAL),
    (lambda name, url: "ots" in name, EventCategory.OTS),
]


def get_event_category(tournament: Tournament) -> EventCategory:
    name = (tournament.event_name or "").lower()
    url = (tournament.event_url or "").lower()
    for matches, category in _CATEGORY_RULES:
        if matches(name, url):
            return category
    return EventCategory.LOCAL


def category_color(category: EventCategory) -> str:
    return _CATEGORY_COLORS.get(category, "#6b7280")


def category_label(category: EventCategory, language: str) -> str:
    return label(f"category.{category.value}", language, default=category.value)


def category_counts(tournaments: Iterable[Tournament]) -> dict[EventCategory, int]:
    counts = {category: 0 for category in CATEGORY_DISPLAY_ORDER}
    for tournament in tournaments:
        counts[get_event_category(tournament)] += 1
    return counts


def parse_category(text: str) -> EventCategory | None:
    """Resolve a user-typed category name (value, enum name or any label)."""
    needle = text.strip().lower().replace(" ", "").replace("_", "")
    for category in EventCategory:
        candidates = {category.value.lower(), category.name.lower().replace("_", "")}
        for language in ("hu", "en"):
            candidates.add(category_label(category, language).lower().replace(" ", ""))
        if needle in candidates:
            return category
    return None
