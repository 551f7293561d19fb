"""
Tests for the JSON settings store.
"""

import json

import pytest

from findmark.errors import SettingsStoreError
from findmark.settings_models import SettingsPaths, default_settings, highlight_color_value
from findmark.settings_store import JsonSettingsStore, merge_defaults


class TestSectionKeys:
    def test_get_and_set_section_keys(self):
        store = JsonSettingsStore("unused.json", {}, persistent=False)
        assert store.set("search.match_case", True) is True
        assert store.data == {"search": {"match_case": True}}
        assert store.get("search.match_case") is True
        assert store.get("search.missing", "d") == "d"
        assert store.get("search") == {"match_case": True}

    def test_set_replaces_non_dict_section(self):
        store = JsonSettingsStore("unused.json", {}, persistent=False)
        store.set("search", "flat")
        assert store.get("search.term", "d") == "d"
        store.set("search.term", "x")
        assert store.get("search") == {"term": "x"}

    def test_set_rejects_empty_key(self):
        store = JsonSettingsStore("unused.json", {}, persistent=False)
        with pytest.raises(ValueError):
            store.set("", 1)

    def test_merge_keeps_explicit_values(self):
        merged = merge_defaults({"search": {"use_regex": True}}, default_settings())
        assert merged["search"]["use_regex"] is True
        assert merged["search"]["match_case"] is False
        assert merged["bookmarks"]["persist"] is True

    def test_merge_does_not_share_default_objects(self):
        defaults = default_settings()
        merged = merge_defaults({}, defaults)
        merged["bookmarks"]["items"].append({"file": "a", "line": 1})
        assert defaults["bookmarks"]["items"] == []


class TestJsonSettingsStore:
    def test_missing_file_loads_defaults(self, tmp_path):
        store = JsonSettingsStore(tmp_path / "settings.json", default_settings())
        data = store.load()
        assert data["search"]["highlight_color"] == "default"
        assert store.dirty

    def test_save_and_reload(self, tmp_path):
        path = tmp_path / "nested" / "settings.json"
        store = JsonSettingsStore(path, default_settings())
        store.load()
        assert store.set("search.last_term", "needle") is True
        assert store.set("search.last_term", "needle") is False
        store.save()
        assert not store.dirty

        reloaded = JsonSettingsStore(path, default_settings())
        reloaded.load()
        assert reloaded.get("search.last_term") == "needle"

    def test_invalid_json_falls_back_to_defaults(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("{not json", encoding="utf-8")
        store = JsonSettingsStore(path, default_settings())
        store.load()
        assert store.last_error
        assert store.get("search.match_case") is False

    def test_non_object_root_is_rejected(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps([1, 2]), encoding="utf-8")
        store = JsonSettingsStore(path, default_settings())
        store.load()
        assert "JSON object" in store.last_error

    def test_save_failure_raises(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("", encoding="utf-8")
        store = JsonSettingsStore(blocker / "settings.json", default_settings())
        store.load()
        with pytest.raises(SettingsStoreError):
            store.save()

    def test_memory_store_never_writes(self, tmp_path):
        path = tmp_path / "settings.json"
        store = JsonSettingsStore(path, default_settings(), persistent=False)
        store.load()
        store.set("search.use_regex", True)
        store.save()
        assert not path.exists()
        assert not store.dirty


class TestSettingsModels:
    def test_app_dir_override(self, tmp_path, monkeypatch):
        monkeypatch.setenv("FINDMARK_APP_DIR", str(tmp_path))
        paths = SettingsPaths.default()
        assert paths.settings_file == tmp_path.resolve() / "settings.json"

    def test_highlight_colors(self):
        assert highlight_color_value("Coral") == "#FFA07A"
        assert highlight_color_value("pale green") == "#98FB98"
        assert highlight_color_value("unknown") == highlight_color_value("default")
