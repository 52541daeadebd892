"""Unit tests for ProjectSerializer."""

import json

import pytest

from tailui.core.elements import Element
from tailui.errors import StorageError, ValidationError
from tailui.project.serializer import (
    DEFAULT_STORAGE_KEY,
    LoadResult,
    ProjectSerializer,
    check_columns,
)


class FailingStorage:
    """Storage collaborator whose every call fails."""

    def get(self, key):
        raise StorageError("disk gone", key=key)

    def set(self, key, value):
        raise StorageError("disk full", key=key)

    def delete(self, key):
        raise StorageError("disk gone", key=key)


class TestLoad:
    """Test loading projects into the store."""

    def test_load_replaces_store_and_resets_history(
        self, serializer, store, history, sample_project
    ):
        store.add(store.create("div", 0, 0))
        history.commit(store.get_all())
        store.select(store.get_all()[0].id)

        result = serializer.load(sample_project)

        assert isinstance(result, LoadResult)
        assert result.element_count == 3
        assert result.columns == 6
        assert result.persisted
        assert result.success
        assert [e.id for e in store.get_all()] == ["a", "b", "c"]
        assert store.selected_id is None
        assert len(history) == 1
        assert history.current() == store.get_all()
        assert serializer.columns == 6

    def test_load_fills_defaults(self, serializer, store, sample_project):
        serializer.load(sample_project)
        button = store.get_by_id("a")
        assert button.text_content == "Go"
        assert button.width == 120
        assert store.get_by_id("c").font_weight == 700

    def test_load_persists(self, serializer, storage, sample_project):
        serializer.load(sample_project)
        saved = storage.get(DEFAULT_STORAGE_KEY)
        assert saved["columns"] == 6
        assert [e["id"] for e in saved["elements"]] == ["a", "b", "c"]

    def test_invalid_payload_leaves_store_untouched(self, serializer, store, history):
        element = store.create("div", 0, 0)
        store.add(element)
        history.commit(store.get_all())

        with pytest.raises(ValidationError) as exc_info:
            serializer.load({"elements": "x", "columns": 6})

        assert exc_info.value.field == "elements"
        assert store.get_all() == (element,)
        assert len(history) == 2
        assert serializer.columns == 12

    def test_unbuildable_element_aborts_whole_load(self, serializer, store):
        project = {
            "elements": [
                {"id": "a", "type": "div", "x": 0, "y": 0},
                {"id": "b", "type": "div", "x": 0, "y": 0, "animation": "spin"},
            ],
            "columns": 4,
        }
        with pytest.raises(ValidationError) as exc_info:
            serializer.load(project)
        assert exc_info.value.field == "elements.1.animation"
        assert len(store) == 0

    def test_mistyped_style_value_rejected_before_compile(self, serializer, store, button):
        store.add(button)
        project = {
            "elements": [{"id": "a", "type": "div", "x": 0, "y": 0, "borderRadius": "7"}],
            "columns": 4,
        }
        with pytest.raises(ValidationError) as exc_info:
            serializer.load(project)

        assert exc_info.value.field == "elements.0.borderRadius"
        assert store.get_all() == (button,)
        assert 'id="element-btn"' in serializer.export_markup()

    def test_loaded_snapshots_do_not_share_nested_data(self, serializer, history):
        project = {
            "elements": [{"id": "a", "type": "div", "x": 0, "y": 0, "meta": {"k": "orig"}}],
            "columns": 6,
        }
        serializer.load(project)

        project["elements"][0]["meta"]["k"] = "changed-after-load"
        payload = serializer.save()
        payload["elements"][0]["meta"]["k2"] = "changed-via-payload"

        assert history.current()[0].extra["meta"] == {"k": "orig"}
        assert serializer.save()["elements"][0]["meta"] == {"k": "orig"}

    def test_storage_failure_does_not_block_load(self, store, history, sample_project):
        serializer = ProjectSerializer(store, history, storage=FailingStorage())
        result = serializer.load(sample_project)

        assert len(store) == 3
        assert not result.persisted
        assert not result.success
        assert isinstance(result.storage_error, StorageError)

    def test_load_without_storage(self, store, history, sample_project):
        result = ProjectSerializer(store, history).load(sample_project)
        assert result.success
        assert not result.persisted


class TestSave:
    """Test building and handing off payloads."""

    def test_save_payload(self, serializer, store, button):
        store.add(button)
        payload = serializer.save()
        assert payload == {"elements": [button.to_dict()], "columns": 12, "version": "1.0.0"}

    def test_save_hands_payload_to_transport(self, store, history, button):
        sent = []
        serializer = ProjectSerializer(store, history, transport=sent.append)
        store.add(button)
        payload = serializer.save()
        assert sent == [payload]

    def test_load_save_round_trip(self, serializer, store, sample_project):
        serializer.load(sample_project)
        original = store.get_all()
        store.update("a", {"paddingTop": 3, "animation": {"type": "bounce"}})
        edited = store.get_all()

        serializer.load(serializer.save())
        assert store.get_all() == edited
        assert store.get_all() != original

    def test_json_round_trip(self, serializer, store, sample_project):
        serializer.load(sample_project)
        before = store.get_all()
        result = serializer.loads(serializer.dumps())
        assert result.element_count == 3
        assert store.get_all() == before

    def test_parse_rejects_invalid_json(self, serializer):
        with pytest.raises(ValidationError, match="not valid JSON"):
            serializer.parse("{nope")

    def test_parse_validates(self, serializer):
        with pytest.raises(ValidationError):
            serializer.parse(json.dumps({"elements": [], "columns": 40}))


class TestPersistence:
    """Test autosave and restore."""

    def test_restore(self, serializer, store, storage, sample_project):
        storage.set(DEFAULT_STORAGE_KEY, sample_project)
        result = serializer.restore()
        assert result.element_count == 3
        assert len(store) == 3

    def test_restore_nothing_saved(self, serializer):
        assert serializer.restore() is None

    def test_restore_ignores_invalid_saved_project(self, serializer, storage, store):
        storage.set(DEFAULT_STORAGE_KEY, {"elements": 1})
        assert serializer.restore() is None
        assert len(store) == 0

    def test_restore_storage_failure(self, store, history):
        serializer = ProjectSerializer(store, history, storage=FailingStorage())
        assert serializer.restore() is None

    def test_persist_raises_storage_error(self, store, history):
        serializer = ProjectSerializer(store, history, storage=FailingStorage())
        with pytest.raises(StorageError):
            serializer.persist()

    def test_clear_persisted(self, serializer, storage):
        serializer.persist()
        serializer.clear_persisted()
        assert storage.get(DEFAULT_STORAGE_KEY) is None

    def test_custom_storage_key(self, store, history, storage):
        serializer = ProjectSerializer(store, history, storage=storage, storage_key="k")
        serializer.persist()
        assert storage.get("k") == {"elements": [], "columns": 12, "version": "1.0.0"}


class TestColumns:
    def test_setter_validates(self, serializer):
        serializer.columns = 3
        assert serializer.columns == 3
        with pytest.raises(ValidationError):
            serializer.columns = 0
        assert serializer.columns == 3

    @pytest.mark.parametrize("value", [0, 13, True, "4", None])
    def test_check_columns_rejects(self, value):
        with pytest.raises(ValidationError):
            check_columns(value)


class TestExports:
    def test_export_markup_uses_columns(self, serializer, store, button):
        store.add(button)
        serializer.columns = 4
        markup = serializer.export_markup(title="Landing")
        assert "calc(25% - 1px)" in markup
        assert "<title>Landing</title>" in markup
        assert 'id="element-btn"' in markup

    def test_export_stylesheet(self, serializer, store, button):
        store.add(button)
        assert ".element-button-1 {" in serializer.export_stylesheet()

    def test_elements_survive_markup_export(self, serializer, store, button):
        store.add(button)
        serializer.export_markup()
        assert store.get_all() == (button,)
        assert isinstance(store.get_all()[0], Element)
