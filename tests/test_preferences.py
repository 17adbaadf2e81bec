import json
from pathlib import Path

import pytest

from tournacal.preferences import AppState, JsonFileStore, MemoryStore, detect_language


def test_defaults_without_saved_values() -> None:
    state = AppState(MemoryStore(), default_language="hu")
    assert state.view_mode == "list"
    assert state.language == "hu"


def test_language_detected_from_hint() -> None:
    assert AppState(MemoryStore(), language_hint="hu-HU").language == "hu"
    assert AppState(MemoryStore(), language_hint="en-GB", default_language="hu").language == "en"
    assert detect_language(None, default="hu") == "hu"


def test_changes_are_written_to_store() -> None:
    store = MemoryStore()
    state = AppState(store, namespace="42")

    state.view_mode = "calendar"
    state.language = "en"

    assert store.data == {"42:view_mode": "calendar", "42:language": "en"}
    reloaded = AppState(store, namespace="42", language_hint="hu")
    assert reloaded.view_mode == "calendar"
    assert reloaded.language == "en"


def test_invalid_saved_values_fall_back() -> None:
    state = AppState(MemoryStore({"view_mode": "grid", "language": "de"}), default_language="hu")
    assert state.view_mode == "list"
    assert state.language == "hu"


def test_invalid_new_values_raise() -> None:
    state = AppState(MemoryStore())
    with pytest.raises(ValueError):
        state.view_mode = "grid"
    with pytest.raises(ValueError):
        state.language = "de"


def test_toggle_view_mode() -> None:
    state = AppState(MemoryStore())
    assert state.toggle_view_mode() == "calendar"
    assert state.toggle_view_mode() == "list"


def test_json_file_store_persists(tmp_path) -> None:
    path = tmp_path / "prefs" / "preferences.json"
    AppState(JsonFileStore(path), namespace="7").language = "en"

    assert AppState(JsonFileStore(path), namespace="7", default_language="hu").language == "en"


def test_json_file_store_ignores_corrupt_file(tmp_path) -> None:
    path = tmp_path / "preferences.json"
    path.write_text("[broken", encoding="utf-8")
    store = JsonFileStore(path)
    assert store.get("language") is None
    store.set("language", "hu")
    assert JsonFileStore(path).get("language") == "hu"


def test_json_file_store_replaces_file_atomically(tmp_path, monkeypatch) -> None:
    path = tmp_path / "preferences.json"
    store = JsonFileStore(path)
    store.set("language", "en")

    assert json.loads(path.read_text(encoding="utf-8")) == {"language": "en"}
    assert not path.with_suffix(".json.tmp").exists()

    def fail_replace(self, target):
        raise OSError("disk full")

    monkeypatch.setattr(Path, "replace", fail_replace)
    with pytest.raises(OSError):
        store.set("language", "hu")

    assert json.loads(path.read_text(encoding="utf-8")) == {"language": "en"}
