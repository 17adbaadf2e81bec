from __future__ import annotations

from dataclasses import dataclass
from os import getenv
from pathlib import Path

from .labels import DEFAULT_LANGUAGE, SUPPORTED_LANGUAGES

KONAMI_SEARCH_URL = (
    "https://cardgame-network.konami.net/mt/user/rest/tournament/EU/tournament_gsearch"
)


@dataclass(slots=True)
class Settings:
    telegram_bot_token: str
    konami_search_url: str
    konami_nation_codes: list[str]
    konami_index_count: int
    konami_timeout_seconds: float
    tournaments_cache_path: Path
    preferences_path: Path
    store_top_count: int
    default_language: str

    @classmethod
    def from_env(cls, *, require_token: bool = True) -> "Settings":
        token = getenv("TELEGRAM_BOT_TOKEN", "").strip()
        if require_token and not token:
            raise ValueError("Missing TELEGRAM_BOT_TOKEN")

        nations_csv = getenv("KONAMI_NATION_CODES", "HU")
        nations = [x.strip().upper() for x in nations_csv.split(",") if x.strip()]
        if not nations:
            raise ValueError("Set KONAMI_NATION_CODES, comma-separated")

        search_url = getenv("KONAMI_SEARCH_URL", KONAMI_SEARCH_URL).strip()

        index_count = _int_env("KONAMI_INDEX_COUNT", 50)
        top_count = _int_env("STORE_TOP_COUNT", 8)
        try:
            timeout = float(getenv("KONAMI_TIMEOUT_SECONDS", "30"))
        except ValueError as exc:
            raise ValueError("KONAMI_TIMEOUT_SECONDS must be a number") from exc

        language = getenv("DEFAULT_LANGUAGE", DEFAULT_LANGUAGE).strip().lower()
        if language not in SUPPORTED_LANGUAGES:
            raise ValueError(f"DEFAULT_LANGUAGE must be one of {', '.join(SUPPORTED_LANGUAGES)}")

        return cls(
            telegram_bot_token=token,
            konami_search_url=search_url,
            konami_nation_codes=nations,
            konami_index_count=index_count,
            konami_timeout_seconds=timeout,
            tournaments_cache_path=Path(getenv("TOURNAMENTS_CACHE_PATH", "data/tournaments.json")),
            preferences_path=Path(getenv("PREFERENCES_PATH", "data/preferences.json")),
            store_top_count=top_count,
            default_language=language,
        )


def _int_env(name: str, default: int) -> int:
    raw = getenv(name, str(default)).strip()
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer") from exc
    if value <= 0:
        raise ValueError(f"{name} must be positive")
    return value
