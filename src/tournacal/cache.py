from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from .konami import parse_search_response, response_count
from .models import Tournament

LOGGER = logging.getLogger(__name__)


class CacheUnavailableError(RuntimeError):
    pass


class TournamentCache:
    """The last search response, stored as pretty-printed JSON on disk."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def save(self, payload: dict[str, Any]) -> int:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        content = json.dumps(payload, ensure_ascii=False, indent=4)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(content, encoding="utf-8")
        tmp_path.replace(self.path)
        count = response_count(payload)
        LOGGER.info("Saved %d tournaments to %s.", count, self.path)
        return count

    def load_payload(self) -> dict[str, Any]:
        if not self.path.exists():
            raise CacheUnavailableError(f"Tournaments data not available at {self.path}")
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise CacheUnavailableError(f"Could not read {self.path}: {exc}") from exc
        if not isinstance(payload, dict):
            raise CacheUnavailableError(f"Unexpected cache content in {self.path}")
        return payload

    def load(self) -> list[Tournament]:
        return parse_search_response(self.load_payload())

    def last_modified(self) -> datetime | None:
        try:
            return datetime.fromtimestamp(self.path.stat().st_mtime).astimezone()
        except FileNotFoundError:
            return None
