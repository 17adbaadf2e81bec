import asyncio
import json
from datetime import datetime, timedelta, timezone

import httpx
import pytest

from tournacal.konami import (
    KonamiClient,
    TournamentApiError,
    build_search_request,
    parse_search_response,
    response_count,
)

SAMPLE_ROW = {
    "tournamentNo": "T-100",
    "tournamentName": "Friday Locals",
    "eventId": 12,
    "eventName": "Local Event",
    "eventUrl": None,
    "structure": "SWISSDRAW",
    "reserveState": "RESERVEABLE",
    "storeName": "Metagame Budapest",
    "locationName": "Metagame",
    "address": "Budapest, Fő utca 1.",
    "nationCode": "HU",
    "localTournamentDate": "2026/01/16 18:00",
    "localTournamentDateEnd": "",
    "localEntryStartDate": "2026/01/01 00:00",
    "localEntryEndDate": "2026/01/16 17:00",
    "localPlayerNumber": 7,
    "forecastPlayerNumber": 16,
    "restReservePlayerNumber": 9,
    "location": {"locationName": "Metagame", "telNo": "+36 1 234 5678", "postalCode": "1011"},
}


def test_build_search_request_dates() -> None:
    now = datetime(2026, 1, 15, 10, 30, 12, tzinfo=timezone(timedelta(hours=1)))
    body = build_search_request(nation_codes=["HU"], index_count=50, now=now)

    assert body["sDate"] == "2026-01-15T10:30:12+01:00"
    assert body["startDate"] == "2026-01-15T00:00:00+01:00"
    assert body["webOpenDate"] == "2026-01-14T23:00:00+01:00"
    assert body["nationCodes"] == ["HU"]
    assert body["indexStart"] == 0
    assert body["indexCount"] == 50
    assert body["gpsRange"] == "10000"
    assert body["reserveable"] is False
    assert body["eDate"] is None


def test_parse_search_response_maps_fields() -> None:
    [tournament] = parse_search_response({"result": [SAMPLE_ROW], "count": 1})

    assert tournament.tournament_no == "T-100"
    assert tournament.display_store_name == "Metagame Budapest"
    assert tournament.local_tournament_date_end is None
    assert tournament.reservable
    assert tournament.rest_reserve_player_number == 9
    assert tournament.location.tel_no == "+36 1 234 5678"


def test_parse_search_response_tolerates_partial_rows() -> None:
    [tournament] = parse_search_response({"result": [{"tournamentNo": 5}]})
    assert tournament.tournament_no == "5"
    assert tournament.event_name == ""
    assert tournament.local_player_number == 0


def test_response_count_falls_back_to_result_length() -> None:
    assert response_count({"count": 3, "result": []}) == 3
    assert response_count({"result": [{}, {}]}) == 2
    assert response_count({}) == 0


def test_fetch_tournaments_posts_search_body() -> None:
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["accept"] = request.headers["accept"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"result": [SAMPLE_ROW], "count": 1})

    client = KonamiClient(
        search_url="https://example.test/search",
        nation_codes=["HU", "AT"],
        index_count=25,
        transport=httpx.MockTransport(handler),
    )
    tournaments = asyncio.run(client.fetch_tournaments())

    assert [t.tournament_no for t in tournaments] == ["T-100"]
    assert seen["method"] == "POST"
    assert seen["accept"] == "application/json, text/plain, */*"
    assert seen["body"]["nationCodes"] == ["HU", "AT"]
    assert seen["body"]["indexCount"] == 25


def test_http_error_status_raises() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(503, text="maintenance"))
    client = KonamiClient(search_url="https://example.test/search", transport=transport)

    with pytest.raises(TournamentApiError) as excinfo:
        asyncio.run(client.fetch_payload())

    assert excinfo.value.status_code == 503
    assert "maintenance" in str(excinfo.value)


def test_invalid_json_raises() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>nope</html>"))
    client = KonamiClient(search_url="https://example.test/search", transport=transport)

    with pytest.raises(TournamentApiError, match="Invalid JSON"):
        asyncio.run(client.fetch_payload())


def test_transport_error_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    client = KonamiClient(search_url="https://example.test/search", transport=httpx.MockTransport(handler))

    with pytest.raises(TournamentApiError) as excinfo:
        asyncio.run(client.fetch_payload())
    assert excinfo.value.status_code is None
