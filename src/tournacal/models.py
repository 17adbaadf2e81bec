from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Structure(str, Enum):
    FREE = "FREE"
    SWISSDRAW = "SWISSDRAW"
    SINGLE_ELIMINATION = "SINGLE_ELIMINATION"


@dataclass(frozen=True, slots=True)
class Location:
    location_name: str = ""
    address1: str = ""
    address2: str = ""
    address3: str = ""
    postal_code: str = ""
    state_name: str = ""
    tel_no: str | None = None
    latitude: float | None = None
    longitude: float | None = None

    @classmethod
    def from_api(cls, payload: dict[str, Any] | None) -> "Location":
        if not payload:
            return cls()
        return cls(
            location_name=_text(payload.get("locationName")),
            address1=_text(payload.get("address1")),
            address2=_text(payload.get("address2")),
            address3=_text(payload.get("address3")),
            postal_code=_text(payload.get("postalCode")),
            state_name=_text(payload.get("stateName")),
            tel_no=payload.get("telNo") or None,
            latitude=payload.get("latitude"),
            longitude=payload.get("longitude"),
        )


@dataclass(frozen=True, slots=True)
class Tournament:
    tournament_no: str
    tournament_name: str
    event_name: str
    local_tournament_date: str
    event_id: int = 0
    event_url: str | None = None
    structure: str = ""
    reserve_state: str = "DISABLED"
    store_name: str = ""
    location_name: str = ""
    address: str = ""
    nation_code: str = ""
    information: str | None = None
    local_tournament_date_end: str | None = None
    local_entry_start_date: str = ""
    local_entry_end_date: str = ""
    local_player_number: int = 0
    forecast_player_number: int = 0
    rest_reserve_player_number: int = 0
    location: Location = field(default_factory=Location)

    @property
    def display_store_name(self) -> str:
        return self.store_name or self.location_name

    @property
    def reservable(self) -> bool:
        return self.reserve_state == "RESERVEABLE"

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "Tournament":
        """Build a record from one entry of the search API's ``result`` list.

        Missing keys fall back to empty values so a partial record from the
        upstream API still classifies and groups.
        """
        return cls(
            tournament_no=_text(payload.get("tournamentNo")),
            tournament_name=_text(payload.get("tournamentName")),
            event_id=_int(payload.get("eventId")),
            event_name=_text(payload.get("eventName")),
            event_url=payload.get("eventUrl") or None,
            structure=_text(payload.get("structure")),
            reserve_state=_text(payload.get("reserveState")) or "DISABLED",
            store_name=_text(payload.get("storeName")),
            location_name=_text(payload.get("locationName")),
            address=_text(payload.get("address")),
            nation_code=_text(payload.get("nationCode")),
            information=payload.get("information") or None,
            local_tournament_date=_text(payload.get("localTournamentDate")),
            local_tournament_date_end=payload.get("localTournamentDateEnd") or None,
            local_entry_start_date=_text(payload.get("localEntryStartDate")),
            local_entry_end_date=_text(payload.get("localEntryEndDate")),
            local_player_number=_int(payload.get("localPlayerNumber")),
            forecast_player_number=_int(payload.get("forecastPlayerNumber")),
            rest_reserve_player_number=_int(payload.get("restReservePlayerNumber")),
            location=Location.from_api(payload.get("location")),
        )


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0
