from __future__ import annotations

from datetime import date
from html import escape
from typing import AbstractSet

from .categories import (
    CATEGORY_DISPLAY_ORDER,
    EventCategory,
    category_label,
    get_event_category,
)
from .filtering import CalendarDay
from .labels import label, structure_label
from .models import Tournament
from .stores import StoreOverview, get_store_type, store_type_label
from .weeks import WeekInfo, is_current_week, week_label

MONTH_NAMES = {
    "hu": [
        "Január", "Február", "Március", "Április", "Május", "Június",
        "Július", "Augusztus", "Szeptember", "Október", "November", "December",
    ],
    "en": [
        "January", "February", "March", "April", "May", "June",
        "July", "August", "September", "October", "November", "December",
    ],
}
WEEKDAY_NAMES = {
    "hu": ["H", "K", "Sz", "Cs", "P", "Sz", "V"],
    "en": ["M", "T", "W", "T", "F", "S", "S"],
}


def format_tournament(tournament: Tournament, language: str) -> str:
    category = get_event_category(tournament)
    when = tournament.local_tournament_date or "TBD"
    if tournament.local_tournament_date_end:
        when = f"{when} - {tournament.local_tournament_date_end}"

    store = tournament.display_store_name or "TBD"
    store_type = get_store_type(store)
    lines = [
        f"<b>{escape(tournament.tournament_name or tournament.event_name)}</b> "
        f"[{escape(category_label(category, language))}]",
        f"   {escape(when)} | {escape(structure_label(tournament.structure, language))}",
        f"   {escape(store)} ({escape(store_type_label(store_type, language))})",
        f"   {escape(label('players', language))}: "
        f"{tournament.local_player_number} / {tournament.forecast_player_number}",
    ]
    if tournament.reservable and tournament.rest_reserve_player_number > 0:
        spots = label("spots_available", language).format(count=tournament.rest_reserve_player_number)
        lines[-1] += f" | {escape(label('reservations', language))}: {escape(spots)}"
    if tournament.event_url:
        href = escape(tournament.event_url, quote=True)
        lines.append(f'   <a href="{href}">{escape(label("more_information", language))}</a>')
    return "\n".join(lines)


def format_week_list(
    weeks: dict[str, list[Tournament]],
    language: str,
    today: date | None = None,
) -> str:
    if not weeks:
        return label("no_tournaments", language)

    total = sum(len(rows) for rows in weeks.values())
    lines = [f"<b>{escape(label('tournaments_found', language).format(count=total))}</b>"]
    for key, rows in weeks.items():
        year, _, week = key.partition("-W")
        info = WeekInfo(year=int(year), week=int(week), key=key)
        heading = week_label(info, language)
        if info.known and is_current_week(info.year, info.week, today):
            heading += " *"
        lines.append(f"\n<b>{escape(heading)}</b> ({len(rows)})")
        lines.extend(format_tournament(row, language) for row in rows)
    return "\n".join(lines)


def format_day(day: date, tournaments: list[Tournament], language: str) -> str:
    heading = f"<b>{day:%Y-%m-%d}</b>"
    if not tournaments:
        return f"{heading}\n{label('no_tournaments_on_date', language)}"
    lines = [f"{heading} ({len(tournaments)})"]
    lines.extend(format_tournament(row, language) for row in tournaments)
    return "\n".join(lines)


def format_calendar(year: int, month: int, cells: list[CalendarDay], language: str) -> str:
    names = MONTH_NAMES.get(language, MONTH_NAMES["en"])
    weekdays = WEEKDAY_NAMES.get(language, WEEKDAY_NAMES["en"])
    rows = [" ".join(f"{name:>3} " for name in weekdays)]
    for start in range(0, len(cells), 7):
        rows.append(" ".join(_calendar_cell(cell) for cell in cells[start:start + 7]))
    busy = sum(cell.count for cell in cells if cell.in_month)
    return (
        f"<b>{escape(names[month - 1])} {year}</b> ({busy})\n"
        f"<pre>{escape(chr(10).join(rows))}</pre>"
    )


def _calendar_cell(cell: CalendarDay) -> str:
    if not cell.in_month:
        return "  . "
    mark = " "
    if cell.count >= 10:
        mark = "+"
    elif cell.count:
        mark = str(cell.count)
    today = "!" if cell.is_today else " "
    return f"{cell.day.day:>2}{mark}{today}"


def format_store_filter(
    overview: StoreOverview,
    selected: AbstractSet[str],
    language: str,
) -> str:
    lines = [f"<b>{escape(label('filter_by_store', language))}</b>"]
    for store in overview.main:
        tick = "[x]" if store.name in selected else "[ ]"
        lines.append(
            f"{tick} {escape(store.name)} "
            f"({escape(store_type_label(store.store_type, language))}) ({store.count})"
        )
    if overview.other:
        tick = "[x]" if set(overview.other_names) & set(selected) else "[ ]"
        lines.append(f"{tick} {escape(label('other_stores', language))} ({overview.other_count})")

    empty = [store for store in overview.permanent if store.disabled]
    if empty:
        lines.append("")
        lines.append(label("no_tournaments_now", language))
        lines.extend(f"- {escape(store.name)}, {escape(store.city)}" for store in empty)
    return "\n".join(lines)


def format_category_filter(
    counts: dict[EventCategory, int],
    selected: AbstractSet[EventCategory],
    language: str,
) -> str:
    lines = [f"<b>{escape(label('filter_by_event_type', language))}</b>"]
    for category in CATEGORY_DISPLAY_ORDER:
        count = counts.get(category, 0)
        tick = "[x]" if category in selected else "[ ]"
        lines.append(f"{tick} {escape(category_label(category, language))} ({count})")
    return "\n".join(lines)
