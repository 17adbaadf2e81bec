"""Fetch tournaments from the Konami search API and cache them as JSON.

Meant to run on a schedule (cron or a systemd timer); exits non-zero when
the API call fails so the scheduler can alert.
"""
from __future__ import annotations

import asyncio
import logging

from dotenv import load_dotenv

from .cache import TournamentCache
from .config import Settings
from .konami import KonamiClient, TournamentApiError

LOGGER = logging.getLogger(__name__)
SUCCESS = 0
FAILURE = 1


async def fetch_and_store(client: KonamiClient, cache: TournamentCache) -> int:
    LOGGER.info("Calling Konami API…")
    try:
        payload = await client.fetch_payload()
    except TournamentApiError as exc:
        LOGGER.error("Konami API error: %s", exc)
        return FAILURE
    cache.save(payload)
    return SUCCESS


def main() -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    load_dotenv()
    settings = Settings.from_env(require_token=False)
    client = KonamiClient(
        search_url=settings.konami_search_url,
        nation_codes=settings.konami_nation_codes,
        index_count=settings.konami_index_count,
        timeout_seconds=settings.konami_timeout_seconds,
    )
    cache = TournamentCache(settings.tournaments_cache_path)
    return asyncio.run(fetch_and_store(client, cache))


if __name__ == "__main__":
    raise SystemExit(main())
