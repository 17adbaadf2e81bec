from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable

from .dates import parse_local_datetime
from .labels import label
from .models import Tournament

LOGGER = logging.getLogger(__name__)
UNKNOWN_WEEK_KEY = "0000-W00"


@dataclass(frozen=True, slots=True)
class IsoWeek:
    year: int
    week: int

    @property
    def key(self) -> str:
        return week_key(self)


@dataclass(frozen=True, slots=True)
class WeekInfo:
    year: int
    week: int
    key: str

    @property
    def known(self) -> bool:
        return self.week > 0


def iso_week(value: date | datetime) -> IsoWeek:
    """Return the ISO-8601 week number and week-year of a date.

    The week runs Monday to Sunday and belongs to the year holding its
    Thursday, so 29-31 December can be week 1 of the next year and 1-3
    January can be week 52/53 of the previous one.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        value = value.date()
    year, week, _ = value.isocalendar()
    return IsoWeek(year=year, week=week)


def week_key(week: IsoWeek) -> str:
    return f"{week.year:04d}-W{week.week:02d}"


def week_info(local_date_text: str) -> WeekInfo:
    try:
        parsed = parse_local_datetime(local_date_text)
    except ValueError:
        return WeekInfo(year=0, week=0, key=UNKNOWN_WEEK_KEY)
    week = iso_week(parsed)
    return WeekInfo(year=week.year, week=week.week, key=week.key)


def current_week(today: date | None = None) -> IsoWeek:
    return iso_week(today or date.today())


def is_current_week(year: int, week: int, today: date | None = None) -> bool:
    return current_week(today) == IsoWeek(year=year, week=week)


def week_label(info: WeekInfo, language: str) -> str:
    if not info.known:
        return "?"
    if language == "hu":
        return f"{info.year}. {info.week}. {label('week', language)}"
    return f"{info.year}, {label('week', language)} {info.week}"


def group_by_week(tournaments: Iterable[Tournament]) -> dict[str, list[Tournament]]:
    """Bucket tournaments by ISO week key, buckets in ascending key order.

    Records with an unreadable date stay in the list view under
    ``UNKNOWN_WEEK_KEY``.
    """
    grouped: dict[str, list[Tournament]] = defaultdict(list)
    for tournament in tournaments:
        info = week_info(tournament.local_tournament_date)
        if not info.known:
            LOGGER.debug(
                "Tournament %s has unreadable date %r",
                tournament.tournament_no,
                tournament.local_tournament_date,
            )
        grouped[info.key].append(tournament)
    return {key: grouped[key] for key in sorted(grouped)}
