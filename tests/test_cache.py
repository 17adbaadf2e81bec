import asyncio
import json

import httpx
import pytest

from tournacal.cache import CacheUnavailableError, TournamentCache
from tournacal.fetch import FAILURE, SUCCESS, fetch_and_store
from tournacal.konami import KonamiClient


def test_save_and_load(tmp_path) -> None:
    cache = TournamentCache(tmp_path / "data" / "tournaments.json")
    payload = {
        "result": [
            {"tournamentNo": "1", "eventName": "Nemzeti Bajnokság", "localTournamentDate": "2026/03/07 10:00"}
        ],
        "count": 1,
    }

    assert cache.save(payload) == 1

    text = cache.path.read_text(encoding="utf-8")
    assert "Nemzeti Bajnokság" in text
    assert json.loads(text) == payload
    [tournament] = cache.load()
    assert tournament.tournament_no == "1"
    assert cache.last_modified() is not None


def test_missing_cache(tmp_path) -> None:
    cache = TournamentCache(tmp_path / "missing.json")
    with pytest.raises(CacheUnavailableError):
        cache.load()
    assert cache.last_modified() is None


def test_corrupt_cache(tmp_path) -> None:
    path = tmp_path / "tournaments.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(CacheUnavailableError):
        TournamentCache(path).load()


def test_fetch_and_store_writes_cache(tmp_path) -> None:
    transport = httpx.MockTransport(
        lambda request: httpx.Response(200, json={"result": [{"tournamentNo": "7"}], "count": 1})
    )
    client = KonamiClient(search_url="https://example.test/search", transport=transport)
    cache = TournamentCache(tmp_path / "tournaments.json")

    assert asyncio.run(fetch_and_store(client, cache)) == SUCCESS
    assert [t.tournament_no for t in cache.load()] == ["7"]


def test_fetch_and_store_reports_failure(tmp_path) -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(500, text="boom"))
    client = KonamiClient(search_url="https://example.test/search", transport=transport)
    cache = TournamentCache(tmp_path / "tournaments.json")

    assert asyncio.run(fetch_and_store(client, cache)) == FAILURE
    assert not cache.path.exists()
