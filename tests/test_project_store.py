"""
Unit tests for project_store module.

Tests key-value stores and project bundle saving and loading.
"""

import json

import pytest

from PF_Libs.constants import PROJECT_STORAGE_KEY
from PF_Libs.ImageEditingLib.adjustment_settings import EditorSettings
from PF_Libs.ProjStoreLib.project_store import (
    JsonFileStore,
    MemoryStore,
    build_project_bundle,
    load_project_bundle,
    save_project_bundle,
)


class TestMemoryStore:
    """Tests for MemoryStore."""

    def test_get_missing_returns_none(self):
        assert MemoryStore().get("missing") is None

    def test_set_get_delete(self):
        store = MemoryStore()
        store.set("key", "value")

        assert store.get("key") == "value"

        store.delete("key")
        assert store.get("key") is None

    def test_delete_missing_is_noop(self):
        MemoryStore().delete("missing")


class TestJsonFileStore:
    """Tests for JsonFileStore."""

    def test_creates_directory_on_set(self, temp_project_dir):
        directory = temp_project_dir / "store"
        store = JsonFileStore(directory)

        store.set(PROJECT_STORAGE_KEY, "{}")

        assert (directory / f"{PROJECT_STORAGE_KEY}.json").exists()
        assert store.get(PROJECT_STORAGE_KEY) == "{}"

    def test_get_missing_returns_none(self, temp_project_dir):
        assert JsonFileStore(temp_project_dir).get("missing") is None

    def test_overwrites_previous_value(self, temp_project_dir):
        store = JsonFileStore(temp_project_dir)
        store.set("key", "first")
        store.set("key", "second")

        assert store.get("key") == "second"

    def test_sanitizes_key(self, temp_project_dir):
        store = JsonFileStore(temp_project_dir)
        store.set("../escape me", "x")

        assert (temp_project_dir / "escape_me.json").exists()

    def test_rejects_empty_key(self, temp_project_dir):
        with pytest.raises(ValueError):
            JsonFileStore(temp_project_dir).set("///", "x")

    def test_delete(self, temp_project_dir):
        store = JsonFileStore(temp_project_dir)
        store.set("key", "x")
        store.delete("key")
        store.delete("key")

        assert store.get("key") is None


class TestProjectBundle:
    """Tests for bundle building, saving and loading."""

    def test_build_bundle_fields(self):
        bundle = build_project_bundle("data:image/png;base64,AAAA", EditorSettings(hue=5), [], 1700000000000)

        assert bundle["image"] == "data:image/png;base64,AAAA"
        assert bundle["settings"]["hue"] == 5.0
        assert bundle["layers"] == []
        assert bundle["timestamp"] == 1700000000000
        assert "source" not in bundle

    def test_build_bundle_with_source(self):
        bundle = build_project_bundle("img", EditorSettings(), [], 1, source_data_url="src")
        assert bundle["source"] == "src"

    def test_save_and_load_round_trip(self):
        store = MemoryStore()
        layers = [{"layer_id": "layer-1", "name": "Background"}]
        bundle = build_project_bundle("img", EditorSettings(contrast=30), layers, 42, source_data_url="src")

        save_project_bundle(store, bundle)
        loaded = load_project_bundle(store)

        assert loaded["image"] == "img"
        assert loaded["source"] == "src"
        assert loaded["settings"] == EditorSettings(contrast=30)
        assert loaded["layers"] == layers
        assert loaded["timestamp"] == 42

    def test_saved_under_fixed_key(self):
        store = MemoryStore()
        save_project_bundle(store, build_project_bundle("img", EditorSettings(), [], 1))

        assert json.loads(store.get(PROJECT_STORAGE_KEY))["image"] == "img"

    def test_load_missing_returns_none(self):
        assert load_project_bundle(MemoryStore()) is None

    def test_load_invalid_json_returns_none(self):
        store = MemoryStore()
        store.set(PROJECT_STORAGE_KEY, "{not json")

        assert load_project_bundle(store) is None

    def test_load_non_object_returns_none(self):
        store = MemoryStore()
        store.set(PROJECT_STORAGE_KEY, "[1, 2, 3]")

        assert load_project_bundle(store) is None

    def test_load_normalizes_bad_fields(self):
        store = MemoryStore()
        store.set(PROJECT_STORAGE_KEY, json.dumps({
            "image": 5,
            "settings": {"brightness": 500, "bogus": 1},
            "layers": [{"name": "ok"}, "junk"],
            "timestamp": "yesterday",
        }))

        loaded = load_project_bundle(store)

        assert loaded["image"] is None
        assert loaded["source"] is None
        assert loaded["settings"].brightness == 100.0
        assert loaded["layers"] == [{"name": "ok"}]
        assert loaded["timestamp"] is None
