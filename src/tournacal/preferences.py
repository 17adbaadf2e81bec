from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol

from .labels import DEFAULT_LANGUAGE, SUPPORTED_LANGUAGES

LOGGER = logging.getLogger(__name__)

VIEW_MODES = ("list", "calendar")
DEFAULT_VIEW_MODE = "list"


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class JsonFileStore:
    """Flat string map persisted to one JSON file, rewritten on every set."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._data: dict[str, str] | None = None

    def _load(self) -> dict[str, str]:
        if self._data is None:
            self._data = {}
            if self.path.exists():
                try:
                    raw = json.loads(self.path.read_text(encoding="utf-8"))
                except (OSError, ValueError) as exc:
                    LOGGER.warning("Ignoring unreadable preferences file %s: %s", self.path, exc)
                    raw = {}
                if isinstance(raw, dict):
                    self._data = {str(k): str(v) for k, v in raw.items()}
        return self._data

    def get(self, key: str) -> str | None:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
        tmp_path.replace(self.path)


def detect_language(hint: str | None, default: str = "en") -> str:
    """Pick a language from a locale hint such as Telegram's ``language_code``."""
    if not hint:
        return default
    return "hu" if hint.lower().startswith("hu") else "en"


class AppState:
    """View mode and language, read from ``store`` and written on change."""

    def __init__(
        self,
        store: KeyValueStore,
        namespace: str = "",
        language_hint: str | None = None,
        default_language: str = DEFAULT_LANGUAGE,
    ) -> None:
        self.store = store
        self.namespace = namespace
        self._view_mode = self._read("view_mode", VIEW_MODES) or DEFAULT_VIEW_MODE
        self._language = self._read("language", SUPPORTED_LANGUAGES) or detect_language(
            language_hint, default=default_language
        )

    def _key(self, name: str) -> str:
        return f"{self.namespace}:{name}" if self.namespace else name

    def _read(self, name: str, allowed: tuple[str, ...]) -> str | None:
        value = self.store.get(self._key(name))
        return value if value in allowed else None

    @property
    def view_mode(self) -> str:
        return self._view_mode

    @view_mode.setter
    def view_mode(self, value: str) -> None:
        if value not in VIEW_MODES:
            raise ValueError(f"Unknown view mode: {value}")
        self._view_mode = value
        self.store.set(self._key("view_mode"), value)

    @property
    def language(self) -> str:
        return self._language

    @language.setter
    def language(self, value: str) -> None:
        if value not in SUPPORTED_LANGUAGES:
            raise ValueError(f"Unsupported language: {value}")
        self._language = value
        self.store.set(self._key("language"), value)

    def toggle_view_mode(self) -> str:
        self.view_mode = "calendar" if self._view_mode == "list" else "list"
        return self._view_mode
