from __future__ import annotations

from typing import Any

import pytest

from tournacal.models import Tournament


def _make_tournament(
    tournament_no: str = "1",
    *,
    event_name: str = "Local Event",
    event_url: str | None = None,
    store_name: str = "Metagame Budapest",
    location_name: str = "",
    local_tournament_date: str = "2026/01/12 10:00",
    **extra: Any,
) -> Tournament:
    return Tournament(
        tournament_no=tournament_no,
        tournament_name=extra.pop("tournament_name", f"Tournament {tournament_no}"),
        event_name=event_name,
        event_url=event_url,
        store_name=store_name,
        location_name=location_name,
        local_tournament_date=local_tournament_date,
        **extra,
    )


@pytest.fixture
def make_tournament():
    return _make_tournament
