"""Unit tests for key-value storage collaborators."""

import json

import pytest

from tailui.errors import ErrorCategory, StorageError
from tailui.project.storage import JsonFileKeyValueStore, MemoryKeyValueStore


class TestMemoryKeyValueStore:
    """Test the in-memory store."""

    def test_set_get_delete(self, storage):
        storage.set("k", {"a": [1, 2]})
        assert "k" in storage
        assert storage.get("k") == {"a": [1, 2]}
        storage.delete("k")
        assert storage.get("k") is None

    def test_stored_value_is_detached(self, storage):
        value = {"a": [1]}
        storage.set("k", value)
        value["a"].append(2)
        assert storage.get("k") == {"a": [1]}

    def test_delete_missing_key(self, storage):
        storage.delete("missing")

    def test_unserializable_value(self):
        with pytest.raises(StorageError) as exc_info:
            MemoryKeyValueStore().set("k", {"a": object()})
        assert exc_info.value.category == ErrorCategory.STORAGE
        assert exc_info.value.details == {"key": "k"}


class TestJsonFileKeyValueStore:
    """Test the JSON file store."""

    def test_round_trip(self, tmp_path):
        path = tmp_path / "nested" / "store.json"
        store = JsonFileKeyValueStore(path)
        store.set("project", {"columns": 6})
        store.set("other", 1)

        assert json.loads(path.read_text()) == {"project": {"columns": 6}, "other": 1}
        assert JsonFileKeyValueStore(path).get("project") == {"columns": 6}

    def test_missing_file(self, tmp_path):
        assert JsonFileKeyValueStore(tmp_path / "none.json").get("k") is None

    def test_delete(self, tmp_path):
        store = JsonFileKeyValueStore(tmp_path / "store.json")
        store.set("a", 1)
        store.set("b", 2)
        store.delete("a")
        assert store.get("a") is None
        assert store.get("b") == 2

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("{broken")
        with pytest.raises(StorageError, match="Failed to read"):
            JsonFileKeyValueStore(path).get("k")

    def test_non_object_file(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("[1, 2]")
        with pytest.raises(StorageError):
            JsonFileKeyValueStore(path).get("k")

    def test_unwritable_location(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("")
        store = JsonFileKeyValueStore(blocker / "store.json")
        with pytest.raises(StorageError, match="Failed to write"):
            store.set("k", 1)
