from __future__ import annotations

SUPPORTED_LANGUAGES = ("hu", "en")
DEFAULT_LANGUAGE = "hu"

LABELS: dict[str, dict[str, str]] = {
    "hu": {
        "category.Local": "Local",
        "category.OTS": "OTSC",
        "category.Regional": "Regional",
        "category.National": "Nemzeti",
        "category.FreePlay": "Szabad Játék",
        "store.Other": "Egyéb",
        "structure.FREE": "Szabad játék",
        "structure.SWISSDRAW": "Svájci rendszer",
        "structure.SINGLE_ELIMINATION": "Egyenes kiesés",
        "week": "hét",
        "other_stores": "Egyéb boltok",
        "today": "Mai nap",
        "no_tournaments": "Nincs a szűrésnek megfelelő verseny.",
        "no_tournaments_on_date": "Nincs verseny ezen a napon.",
        "tournaments_found": "{count} verseny",
        "players": "Játékosok",
        "reservations": "Foglalás",
        "spots_available": "{count} szabad hely",
        "more_information": "További információ",
        "filter_by_store": "Szűrés bolt szerint",
        "filter_by_event_type": "Szűrés esemény típus szerint",
        "no_tournaments_now": "Jelenleg nincs verseny:",
    },
    "en": {
        "category.Local": "Local",
        "category.OTS": "OTSC",
        "category.Regional": "Regional",
        "category.National": "National",
        "category.FreePlay": "Free Play",
        "store.Other": "Other",
        "structure.FREE": "Free Play",
        "structure.SWISSDRAW": "Swiss Draw",
        "structure.SINGLE_ELIMINATION": "Single Elimination",
        "week": "week",
        "other_stores": "Other stores",
        "today": "Today",
        "no_tournaments": "No tournaments match the current filters.",
        "no_tournaments_on_date": "No tournaments on this date.",
        "tournaments_found": "{count} tournaments",
        "players": "Players",
        "reservations": "Reservations",
        "spots_available": "{count} spots",
        "more_information": "More information",
        "filter_by_store": "Filter by store",
        "filter_by_event_type": "Filter by event type",
        "no_tournaments_now": "No tournaments right now:",
    },
}


def label(key: str, language: str, default: str | None = None) -> str:
    table = LABELS.get(language) or LABELS[DEFAULT_LANGUAGE]
    if key in table:
        return table[key]
    return default if default is not None else key


def structure_label(structure: str, language: str) -> str:
    return label(f"structure.{structure}", language, default=structure)
