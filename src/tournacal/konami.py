from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any

import httpx

from .config import KONAMI_SEARCH_URL
from .models import Tournament

LOGGER = logging.getLogger(__name__)
_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json, text/plain, */*",
}


class TournamentApiError(RuntimeError):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def build_search_request(
    *,
    nation_codes: list[str],
    index_count: int = 50,
    now: datetime | None = None,
) -> dict[str, Any]:
    """Search body for tournaments from today onwards in ``nation_codes``."""
    if now is None:
        now = datetime.now().astimezone()
    start_date = now.replace(hour=0, minute=0, second=0, microsecond=0)
    web_open_date = (start_date - timedelta(days=1)).replace(hour=23)

    return {
        "keyword": "",
        "nationCodes": list(nation_codes),
        "stateCodes": None,
        "sDate": now.isoformat(timespec="seconds"),
        "startDate": start_date.isoformat(timespec="seconds"),
        "eDate": None,
        "endDate": None,
        "startTime": None,
        "startTimeSelect": None,
        "endTime": None,
        "endTimeSelect": None,
        "startSeats": None,
        "eventType": None,
        "structure": None,
        "reserveable": False,
        "gpsSearch": False,
        "gpsRange": "10000",
        "latitude": None,
        "longitude": None,
        "ageLimits": None,
        "webOpenDate": web_open_date.isoformat(timespec="seconds"),
        "indexStart": 0,
        "indexCount": index_count,
        "eventGrpId": 0,
    }


def parse_search_response(payload: dict[str, Any]) -> list[Tournament]:
    rows = payload.get("result") or []
    return [Tournament.from_api(row) for row in rows if isinstance(row, dict)]


def response_count(payload: dict[str, Any]) -> int:
    count = payload.get("count")
    if isinstance(count, int):
        return count
    return len(payload.get("result") or [])


class KonamiClient:
    def __init__(
        self,
        search_url: str = KONAMI_SEARCH_URL,
        nation_codes: list[str] | None = None,
        index_count: int = 50,
        timeout_seconds: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.search_url = search_url
        self.nation_codes = nation_codes or ["HU"]
        self.index_count = index_count
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    async def fetch_payload(self, *, now: datetime | None = None) -> dict[str, Any]:
        body = build_search_request(
            nation_codes=self.nation_codes,
            index_count=self.index_count,
            now=now,
        )
        async with httpx.AsyncClient(
            timeout=self.timeout_seconds,
            transport=self._transport,
        ) as client:
            try:
                response = await client.post(self.search_url, json=body, headers=_HEADERS)
            except httpx.HTTPError as exc:
                raise TournamentApiError(f"Failed to fetch tournaments: {exc}") from exc

        if not response.is_success:
            raise TournamentApiError(
                f"Failed to fetch tournaments: {response.status_code} {response.text}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise TournamentApiError(
                "Invalid JSON response from Konami API",
                status_code=response.status_code,
            ) from exc
        if not isinstance(payload, dict):
            raise TournamentApiError(
                "Unexpected response shape from Konami API",
                status_code=response.status_code,
            )

        LOGGER.info("Konami search returned %d tournaments", response_count(payload))
        return payload

    async def fetch_tournaments(self, *, now: datetime | None = None) -> list[Tournament]:
        payload = await self.fetch_payload(now=now)
        return parse_search_response(payload)
