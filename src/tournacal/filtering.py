from __future__ import annotations

import calendar
import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, timedelta
from typing import AbstractSet, Iterable, Sequence

from .categories import EventCategory, get_event_category
from .dates import date_key, parse_local_datetime, today_key
from .models import Tournament
from .stores import DEFAULT_TOP_STORES, other_store_names

LOGGER = logging.getLogger(__name__)
GRID_DAYS = 42


@dataclass(frozen=True, slots=True)
class CalendarDay:
    day: date
    key: str
    in_month: bool
    count: int
    is_today: bool
    is_weekend: bool


def filter_tournaments(
    tournaments: Iterable[Tournament],
    selected_stores: AbstractSet[str] = frozenset(),
    selected_categories: AbstractSet[EventCategory] = frozenset(),
) -> list[Tournament]:
    """Keep tournaments matching the selections; an empty set means no filter."""
    out: list[Tournament] = []
    for tournament in tournaments:
        if selected_stores and tournament.display_store_name not in selected_stores:
            continue
        if selected_categories and get_event_category(tournament) not in selected_categories:
            continue
        out.append(tournament)
    return out


def group_by_day(tournaments: Iterable[Tournament]) -> dict[str, list[Tournament]]:
    grouped: dict[str, list[Tournament]] = defaultdict(list)
    for tournament in tournaments:
        try:
            start = parse_local_datetime(tournament.local_tournament_date)
        except ValueError:
            LOGGER.debug(
                "Skipping tournament %s in calendar view, unreadable date %r",
                tournament.tournament_no,
                tournament.local_tournament_date,
            )
            continue
        grouped[date_key(start)].append(tournament)
    return dict(grouped)


def tournaments_on(by_day: dict[str, list[Tournament]], day: date) -> list[Tournament]:
    return list(by_day.get(date_key(day), []))


def toggle_store(selected: AbstractSet[str], store_name: str) -> frozenset[str]:
    if store_name in selected:
        return frozenset(selected - {store_name})
    return frozenset(selected | {store_name})


def toggle_category(
    selected: AbstractSet[EventCategory],
    category: EventCategory,
) -> frozenset[EventCategory]:
    if category in selected:
        return frozenset(selected - {category})
    return frozenset(selected | {category})


def toggle_other_stores(
    tournaments: Sequence[Tournament],
    selected: AbstractSet[str],
    top_n: int = DEFAULT_TOP_STORES,
) -> frozenset[str]:
    """Select or clear every store outside the top ``top_n`` as one unit.

    The "other" set is recomputed from ``tournaments`` on every call. If any
    of those stores is selected they are all cleared, otherwise all are added.
    """
    others = set(other_store_names(tournaments, top_n=top_n))
    if not others:
        return frozenset(selected)
    if others & selected:
        return frozenset(selected - others)
    return frozenset(selected | others)


def month_grid(
    year: int,
    month: int,
    by_day: dict[str, list[Tournament]],
    today: date | None = None,
) -> list[CalendarDay]:
    """Six Monday-first weeks covering ``month``, with per-day counts."""
    current = today_key(today)
    first = date(year, month, 1)
    start = first - timedelta(days=first.weekday())
    _, days_in_month = calendar.monthrange(year, month)
    last = date(year, month, days_in_month)

    cells: list[CalendarDay] = []
    for offset in range(GRID_DAYS):
        day = start + timedelta(days=offset)
        key = date_key(day)
        cells.append(
            CalendarDay(
                day=day,
                key=key,
                in_month=first <= day <= last,
                count=len(by_day.get(key, [])),
                is_today=key == current,
                is_weekend=day.weekday() >= 5,
            )
        )
    return cells
