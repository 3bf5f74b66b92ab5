import pytest

from animcore.core.document import BackgroundKeyframe, Properties
from animcore.core.easing import Easing
from animcore.core.results import EditError


def test_add_requires_selected_layer(keyframes, notices):
    result = keyframes.add_or_update({"x": 1})
    assert result.error is EditError.NO_LAYER_SELECTED
    assert notices[-1] == ("Select a layer first", "error")


def test_add_inserts_sorted_and_selects(session, layers, keyframes):
    layers.add_layer("a.png")
    keyframes.add_or_update({"x": 10}, time=2000)
    result = keyframes.add_or_update({"x": 5}, time=1000)

    layer = session.document.layers[0]
    assert [k.time for k in layer.keyframes] == [0.0, 1000.0, 2000.0]
    assert result.value == 1
    assert session.selection.keyframe_index == 1
    assert session.history.undo_labels()[:2] == ["Add Keyframe", "Add Keyframe"]


def test_write_within_threshold_overwrites(session, layers, keyframes):
    layers.add_layer()
    keyframes.add_or_update({"x": 10}, time=1000)
    result = keyframes.add_or_update({"x": 20}, time=1099)

    layer = session.document.layers[0]
    assert len(layer.keyframes) == 2
    assert layer.keyframes[1].x == 20
    assert layer.keyframes[1].time == 1000
    assert result.message == "Keyframe updated!"
    assert session.history.undo_labels()[0] == "Update Keyframe"


def test_threshold_boundary_inserts(session, layers, keyframes):
    layers.add_layer()
    keyframes.add_or_update({"x": 10}, time=1000)
    keyframes.add_or_update({"x": 20}, time=1100)
    assert len(session.document.layers[0].keyframes) == 3


def test_merge_threshold_is_configurable(session, layers):
    from animcore.actions.keyframe_actions import KeyframeActions

    wide = KeyframeActions(session, merge_threshold_ms=500)
    layers.add_layer()
    wide.add_or_update({"x": 10}, time=400)
    assert len(session.document.layers[0].keyframes) == 1


def test_partial_values_keep_sampled_properties(session, layers, keyframes):
    layers.add_layer()
    keyframes.add_or_update({"x": 100, "rotation": 45}, time=1000)
    keyframes.add_or_update({"y": 7}, time=1000)

    key = session.document.layers[0].keyframes[1]
    assert key.x == 100
    assert key.rotation == 45
    assert key.y == 7


def test_new_keyframe_defaults_to_sampled_values(session, layers, keyframes):
    layers.add_layer()
    keyframes.add_or_update({"x": 0}, time=0)
    keyframes.add_or_update({"x": 200}, time=2000)
    session.set_current_time(1000)
    keyframes.add_or_update()

    key = session.document.layers[0].keyframes[1]
    assert key.time == 1000
    assert key.x == pytest.approx(100)


def test_full_properties_replace_values(session, layers, keyframes):
    layers.add_layer()
    keyframes.add_or_update(Properties(x=1, y=2, scale_x=3, scale_y=4, rotation=5, visible=False), time=0)
    assert session.document.layers[0].keyframes[0].properties() == Properties(1, 2, 3, 4, 5, False)


def test_delete_selected_allows_zero_keyframes(session, layers, keyframes):
    layers.add_layer()
    result = keyframes.delete_selected()
    assert result
    assert session.document.layers[0].keyframes == []
    assert session.selection.keyframe_index is None
    assert session.current_properties() is None
    assert keyframes.delete_selected().error is EditError.NO_KEYFRAME_SELECTED


def test_delete_recomputes_duration(session, layers, keyframes):
    layers.add_layer()
    keyframes.add_or_update({"x": 1}, time=8000)
    assert session.document.settings.duration == 10000
    keyframes.delete_selected()
    # the workspace only grows
    assert session.document.settings.duration == 10000


def test_set_easing_and_select_keyframe(session, layers, keyframes):
    layers.add_layer()
    keyframes.add_or_update({"x": 5}, time=1500)
    keyframes.select_keyframe(0)
    assert session.current_time == 0
    keyframes.set_easing("easeInCubic")
    assert session.document.layers[0].keyframes[0].easing is Easing.EASE_IN_CUBIC
    keyframes.set_easing("whatever")
    assert session.document.layers[0].keyframes[0].easing is Easing.LINEAR
    assert keyframes.select_keyframe(9).error is EditError.INVALID_INDEX


def test_paste_rules(session, layers, keyframes):
    assert keyframes.paste().error is EditError.NOTHING_COPIED

    layers.add_layer()
    keyframes.add_or_update({"x": 321, "rotation": 30}, time=0)
    keyframes.set_easing(Easing.EASE_OUT_QUAD)
    assert keyframes.copy_selected()
    assert keyframes.paste().error is EditError.SAME_LAYER_PASTE

    layers.add_layer()
    session.set_current_time(1200)
    result = keyframes.paste()
    assert result.message == "Keyframe pasted at 1.20s"

    pasted = session.document.layers[1].keyframes[1]
    assert pasted.time == 1200
    assert pasted.x == 321
    assert pasted.rotation == 30
    assert pasted.easing is Easing.EASE_OUT_QUAD
    assert session.selection.layer_index == 1
    assert session.selection.keyframe_index == 1


def test_paste_onto_existing_keyframe_updates_it(session, layers, keyframes):
    layers.add_layer()
    keyframes.copy_selected()
    layers.add_layer()
    session.set_current_time(50)
    result = keyframes.paste()
    assert result.message == "Keyframe updated with copied properties"
    assert len(session.document.layers[1].keyframes) == 1


def test_rejections_are_logged(keyframes, caplog):
    with caplog.at_level("WARNING"):
        keyframes.copy_selected()
    assert "no_keyframe_selected" in caplog.text


def test_background_color_add_update_and_select(session, keyframes):
    keyframes.set_background_color("#000000", time=0)
    keyframes.set_background_color("#ffffff", time=1000)
    keyframes.set_background_color("#ff0000", time=1050)

    keys = session.document.background_keyframes
    assert [(k.time, k.color) for k in keys] == [(0.0, "#000000"), (1000.0, "#ff0000")]

    session.selection.select_layer(None)
    keyframes.select_background_keyframe(1)
    assert session.selection.background_keyframe_index == 1
    assert session.current_time == 1000


def test_background_insert_keeps_selected_keyframe(session, keyframes):
    session.document.background_keyframes[:] = [BackgroundKeyframe(1000, "#111111")]
    keyframes.select_background_keyframe(0)
    keyframes.set_background_color("#222222", time=0)
    assert session.selection.background_keyframe_index == 1


def test_delete_background_keyframe(session, keyframes, notices):
    keyframes.set_background_color("#000000", time=0)
    assert keyframes.delete_background_keyframe(0).error is EditError.SOLE_BACKGROUND_KEYFRAME
    assert notices[-1] == ("Cannot delete the only background keyframe", "error")

    keyframes.set_background_color("#111111", time=1000)
    keyframes.set_background_color("#222222", time=2000)
    keyframes.select_background_keyframe(2)
    assert keyframes.delete_background_keyframe(0)
    assert session.selection.background_keyframe_index == 1
    assert keyframes.delete_background_keyframe()
    assert session.selection.background_keyframe_index is None
    assert [k.color for k in session.document.background_keyframes] == ["#111111"]


def test_layer_and_background_selection_are_exclusive(session, layers, keyframes):
    layers.add_layer()
    keyframes.set_background_color("#000000", time=0)
    keyframes.select_background_keyframe(0)
    assert session.selection.keyframe_index is None

    keyframes.select_keyframe(0)
    assert session.selection.background_keyframe_index is None


def test_unconvertible_value_leaves_keyframe_and_history_untouched(session, layers, keyframes, caplog):
    layers.add_layer()
    keyframes.add_or_update({"x": 10, "y": 20}, time=1000)
    keyframes.add_or_update({"x": 11}, time=2000)
    session.history.undo()
    before = session.document.clone()
    labels = session.history.undo_labels()

    with caplog.at_level("WARNING"), pytest.raises(ValueError):
        keyframes.add_or_update({"y": 99, "x": "abc"}, time=1000)

    assert session.document == before
    key = session.document.layers[0].keyframes[1]
    assert (key.x, key.y) == (10.0, 20.0)
    assert session.history.undo_labels() == labels
    assert session.history.redo_labels() == ["Add Keyframe"]
    assert "Rolled back failed edit: Update Keyframe" in caplog.text


def test_unconvertible_value_does_not_insert(session, layers, keyframes):
    layers.add_layer()
    with pytest.raises(ValueError):
        keyframes.add_or_update({"rotation": "spin"}, time=3000)
    assert len(session.document.layers[0].keyframes) == 1
    assert session.history.undo_labels() == ["Add Layer"]


def test_non_finite_values_fall_back_to_sampled_properties(session, layers, keyframes):
    from animcore.core.interpolation import sample_layer

    layers.add_layer()
    keyframes.add_or_update({"x": 0}, time=0)
    keyframes.add_or_update({"x": 100, "y": 50}, time=1000)
    result = keyframes.add_or_update({"x": float("nan"), "y": float("inf"), "rotation": 15}, time=1000)

    assert result
    key = session.document.layers[0].keyframes[1]
    assert (key.x, key.y, key.rotation) == (100.0, 50.0, 15.0)
    props = sample_layer(session.document.layers[0], 500)
    assert props.x == pytest.approx(50.0)


def test_non_finite_values_in_new_keyframe_use_interpolated_values(session, layers, keyframes):
    layers.add_layer()
    keyframes.add_or_update({"x": 0}, time=0)
    keyframes.add_or_update({"x": 200}, time=2000)
    keyframes.add_or_update(Properties(x=float("nan"), y=1.0), time=1000)

    key = session.document.layers[0].keyframes[1]
    assert key.x == pytest.approx(100.0)
    assert key.y == 1.0
