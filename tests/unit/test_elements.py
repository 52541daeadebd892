"""Unit tests for the element model and ElementStore."""

import dataclasses

import pytest

from tailui.core.elements import (
    ELEMENT_KINDS,
    Animation,
    Element,
    ElementStore,
    generate_id,
    kind_defaults,
    resolve_patch,
    snap_to_grid,
)


class TestSnapToGrid:
    """Test grid snapping."""

    @pytest.mark.parametrize(
        "value,expected",
        [(37, 40), (52, 60), (0, 0), (9, 0), (10, 20), (30, 40), (-9, 0), (-11, -20)],
    )
    def test_snaps_to_nearest_multiple(self, value, expected):
        assert snap_to_grid(value) == expected

    def test_custom_grid_size(self):
        assert snap_to_grid(37, 10) == 40
        assert snap_to_grid(34, 10) == 30


class TestGenerateId:
    def test_short_base36(self):
        element_id = generate_id()
        assert len(element_id) == 9
        assert all(c in "0123456789abcdefghijklmnopqrstuvwxyz" for c in element_id)


class TestElement:
    """Test the Element value type."""

    def test_frozen(self, button):
        with pytest.raises(dataclasses.FrozenInstanceError):
            button.x = 100

    def test_kind_defaults_applied(self, button):
        assert button.width == 120
        assert button.height == 40
        assert button.background_color == "#6366f1"
        assert button.font_weight == 500
        assert button.border_radius == 6
        assert button.tag == "button"
        # Global defaults fill everything else
        assert button.border_width == 1
        assert button.display == "block"
        assert button.position == "absolute"

    def test_light_text_kinds(self):
        assert kind_defaults("navbar")["text_color"] == "#ffffff"
        assert kind_defaults("hero")["text_color"] == "#ffffff"
        assert "text_color" not in kind_defaults("button")

    def test_image_url_only_for_images(self, button):
        image = Element.from_dict({"id": "i", "type": "image", "x": 0, "y": 0})
        assert image.image_url == ""
        assert button.image_url is None
        assert "imageUrl" not in button.to_dict()

    def test_resolved_spacing_falls_back_to_uniform(self, button):
        element = button.with_changes({"padding": 10, "paddingTop": 2, "margin_left": 7})
        assert element.resolved_padding() == (2, 10, 10, 10)
        assert element.resolved_margin() == (4, 4, 4, 7)

    def test_to_dict_uses_wire_names(self, button):
        data = button.with_changes({"css_float": "left"}).to_dict()
        assert data["backgroundColor"] == "#6366f1"
        assert data["float"] == "left"
        assert data["zIndex"] == 1
        assert data["animation"] == {"type": "none", "duration": 1000, "delay": 0, "loop": False}
        assert "paddingTop" not in data

    def test_round_trip_preserves_unknown_keys(self):
        data = {"id": "x", "type": "card", "x": 0, "y": 0, "customFlag": True}
        element = Element.from_dict(data)
        assert element.extra["customFlag"] is True
        assert Element.from_dict(element.to_dict()) == element
        assert element.to_dict()["customFlag"] is True

    def test_nested_unknown_values_are_detached(self):
        data = {"id": "x", "type": "card", "meta": {"tags": ["a"]}}
        element = Element.from_dict(data)

        data["meta"]["tags"].append("changed-after-load")
        exported = element.to_dict()
        exported["meta"]["tags"].append("changed-via-export")

        assert element.extra["meta"] == {"tags": ["a"]}
        assert element.to_dict()["meta"] == {"tags": ["a"]}

    @pytest.mark.parametrize(
        "key,value",
        [
            ("borderRadius", "7"),
            ("fontWeight", [700]),
            ("borderWidth", None),
            ("opacity", "50"),
            ("gap", False),
            ("shadow", 2),
        ],
    )
    def test_from_dict_rejects_mistyped_values(self, key, value):
        with pytest.raises(ValueError, match=key):
            Element.from_dict({"id": "a", "type": "div", key: value})

    def test_from_dict_accepts_nullable_values(self):
        element = Element.from_dict(
            {"id": "a", "type": "div", "opacity": None, "marginTop": None, "width": 12.5}
        )
        assert element.opacity is None
        assert element.margin_top is None
        assert element.width == 12.5

    @pytest.mark.parametrize(
        "animation",
        [{"type": 3}, {"duration": "1s"}, {"delay": True}, {"loop": "yes"}],
    )
    def test_from_dict_rejects_mistyped_animation(self, animation):
        with pytest.raises(ValueError):
            Element.from_dict({"id": "a", "type": "div", "animation": animation})

    def test_from_dict_requires_identity(self):
        with pytest.raises(ValueError):
            Element.from_dict({"type": "card"})
        with pytest.raises(ValueError):
            Element.from_dict(["not", "a", "mapping"])

    def test_from_dict_converts_animation(self):
        element = Element.from_dict(
            {"id": "a", "type": "div", "animation": {"type": "spin", "loop": True}}
        )
        assert element.animation == Animation(type="spin", duration=1000, delay=0, loop=True)

    def test_unknown_kind_gets_global_defaults(self):
        element = Element.from_dict({"id": "a", "type": "widget"})
        assert element.width == 200
        assert element.height == 150
        assert "widget" not in ELEMENT_KINDS


class TestResolvePatch:
    def test_accepts_both_naming_styles(self):
        assert resolve_patch({"fontSize": 20, "text_align": "right"}) == {
            "font_size": 20,
            "text_align": "right",
        }

    def test_rejects_unknown_keys(self):
        with pytest.raises(ValueError, match="Unknown element field"):
            resolve_patch({"colour": "red"})

    def test_rejects_identity_changes(self):
        with pytest.raises(ValueError):
            resolve_patch({"id": "other"})
        with pytest.raises(ValueError):
            resolve_patch({"type": "circle"})

    def test_rejects_mistyped_values(self):
        with pytest.raises(ValueError, match="borderRadius"):
            resolve_patch({"borderRadius": "7"})
        with pytest.raises(ValueError, match="animation"):
            resolve_patch({"animation": "spin"})

    def test_converts_animation_mapping(self):
        assert resolve_patch({"animation": {"type": "pulse"}}) == {
            "animation": Animation(type="pulse")
        }


class TestElementStore:
    """Test ElementStore operations."""

    def test_create_snaps_and_defaults(self, store):
        element = store.create("button", 37, 52)

        assert (element.x, element.y) == (40, 60)
        assert element.width == 120
        assert element.height == 40
        assert element.background_color == "#6366f1"
        assert element.font_size == 14
        assert element.font_weight == 500
        assert element.border_radius == 6
        # Not inserted
        assert len(store) == 0

    def test_create_regenerates_colliding_ids(self):
        ids = iter(["dup", "dup", "fresh"])
        store = ElementStore(id_factory=lambda: next(ids))
        store.add(store.create("div", 0, 0))
        assert store.create("div", 0, 0).id == "fresh"

    def test_add_returns_snapshot(self, store):
        element = store.create("text", 0, 0)
        snapshot = store.add(element)
        assert snapshot == (element,)
        assert isinstance(snapshot, tuple)

    def test_add_rejects_duplicate_id(self, store, button):
        store.add(button)
        with pytest.raises(ValueError, match="Duplicate"):
            store.add(button)

    def test_update_merges_patch(self, store, button):
        store.add(button)
        store.update("btn", {"textContent": "Buy", "width": 160})
        updated = store.get_by_id("btn")
        assert updated.text_content == "Buy"
        assert updated.width == 160
        assert updated.height == button.height

    def test_update_unknown_id_is_noop(self, store, button):
        store.add(button)
        before = store.get_all()
        assert store.update("missing", {"width": 10}) == before

    def test_update_invalid_patch_leaves_store_untouched(self, store, button):
        store.add(button)
        with pytest.raises(ValueError):
            store.update("btn", {"width": 10, "bogus": 1})
        assert store.get_by_id("btn") == button

    def test_delete_clears_selection(self, store, button):
        store.add(button)
        store.select("btn")
        store.delete("btn")
        assert store.selected_id is None
        assert len(store) == 0

    def test_delete_other_keeps_selection(self, store):
        a = store.create("div", 0, 0)
        b = store.create("div", 0, 0)
        store.add(a)
        store.add(b)
        store.select(a.id)
        store.delete(b.id)
        assert store.selected_id == a.id

    def test_delete_unknown_id_is_noop(self, store, button):
        store.add(button)
        assert store.delete("missing") == (button,)

    def test_select_ignores_unknown_ids(self, store, button):
        store.add(button)
        store.select("btn")
        store.select("missing")
        assert store.selected_id == "btn"
        assert store.get_selected() == button

    def test_clear_selection(self, store, button):
        store.add(button)
        store.select("btn")
        store.clear_selection()
        assert store.get_selected() is None

    def test_set_all_replaces_and_clears_vanished_selection(self, store, button):
        store.add(button)
        store.select("btn")
        other = store.create("card", 0, 0)
        assert store.set_all([other]) == (other,)
        assert store.selected_id is None

    def test_set_all_keeps_surviving_selection(self, store, button):
        store.add(button)
        store.select("btn")
        store.set_all([button, store.create("card", 0, 0)])
        assert store.selected_id == "btn"

    def test_set_all_rejects_duplicates(self, store, button):
        store.add(button)
        with pytest.raises(ValueError):
            store.set_all([button, button])
        assert store.get_all() == (button,)

    def test_snapshots_are_independent(self, store, button):
        snapshot = store.add(button)
        store.update("btn", {"x": 500})
        assert snapshot[0].x == 40
        assert store.get_by_id("btn").x == 500
