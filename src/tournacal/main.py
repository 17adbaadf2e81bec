from __future__ import annotations

import logging

from dotenv import load_dotenv

from .bot import TournaCalBot
from .config import Settings

LOGGER = logging.getLogger(__name__)


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    load_dotenv()
    settings = Settings.from_env()
    LOGGER.info(
        "Starting tournament calendar for %s (cache %s, preferences %s, language %s)",
        ",".join(settings.konami_nation_codes),
        settings.tournaments_cache_path,
        settings.preferences_path,
        settings.default_language,
    )
    bot = TournaCalBot(settings)
    bot.run()


if __name__ == "__main__":
    main()
