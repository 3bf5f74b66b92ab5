from animcore.core.results import EditError


def test_gesture_records_exactly_one_history_entry(session, layers, gestures, notices):
    layers.add_layer()
    session.set_current_time(1000)

    assert gestures.begin_gesture("Move Layer")
    for x in (10, 20, 30):
        gestures.commit_tick({"x": x})
    assert gestures.end_gesture()

    layer = session.document.layers[0]
    assert [k.time for k in layer.keyframes] == [0.0, 1000.0]
    assert layer.keyframes[1].x == 30
    assert session.history.undo_labels() == ["Move Layer", "Add Layer"]
    assert [m for m, _ in notices].count("Keyframe auto-created!") == 1

    session.history.undo()
    assert len(session.document.layers[0].keyframes) == 1


def test_tick_outside_gesture_snapshots_normally(session, layers, gestures):
    layers.add_layer()
    gestures.commit_tick({"x": 5})
    gestures.commit_tick({"x": 6})
    assert session.history.undo_labels() == ["Update Keyframe", "Update Keyframe", "Add Layer"]


def test_gesture_needs_a_layer(session, gestures):
    assert not gestures.begin_gesture()
    assert not gestures.gesture_active
    assert not session.history.can_undo()
    assert gestures.commit_tick({"x": 1}).error is EditError.NO_LAYER_SELECTED


def test_gesture_grows_workspace_while_dragging(session, layers, gestures):
    layers.add_layer()
    session.set_current_time(4500)
    gestures.begin_gesture("Scale Layer")
    gestures.commit_tick({"scale_x": 2})
    assert session.document.settings.duration == 10000
    gestures.end_gesture()


def test_keyframe_drag_tracks_index_and_saves_once(session, layers, keyframes, gestures):
    layers.add_layer()
    keyframes.add_or_update({"x": 1}, time=1000)
    keyframes.add_or_update({"x": 2}, time=2000)
    depth = len(session.history.undo_labels())

    assert gestures.begin_keyframe_drag(0, 0)
    gestures.drag_keyframe_to(1200)
    gestures.drag_keyframe_to(1500)
    assert session.selection.keyframe_index == 1
    gestures.drag_keyframe_to(2500)
    assert session.selection.keyframe_index == 2
    assert gestures.end_keyframe_drag()

    layer = session.document.layers[0]
    assert [k.time for k in layer.keyframes] == [1000.0, 2000.0, 2500.0]
    assert layer.keyframes[2].x == 400
    assert session.current_time == 2500
    assert len(session.history.undo_labels()) == depth + 1
    assert session.history.undo_labels()[0] == "Drag Keyframe"


def test_drag_is_clamped_to_workspace(session, layers, gestures):
    layers.add_layer()
    gestures.begin_keyframe_drag(0, 0)
    gestures.drag_keyframe_to(99999)
    gestures.end_keyframe_drag()
    key = session.document.layers[0].keyframes[0]
    assert key.time == 5000
    assert session.document.settings.duration == 10000

    gestures.begin_keyframe_drag(0, 0)
    gestures.drag_keyframe_to(-50)
    gestures.end_keyframe_drag()
    assert key.time == 0


def test_drag_without_movement_records_nothing(session, layers, gestures):
    layers.add_layer()
    depth = len(session.history.undo_labels())
    gestures.begin_keyframe_drag(0, 0)
    assert not gestures.end_keyframe_drag()
    assert len(session.history.undo_labels()) == depth
    assert not gestures.begin_keyframe_drag(0, 3)


def test_dropping_onto_a_neighbour_replaces_it(session, layers, keyframes, gestures):
    layers.add_layer()
    keyframes.add_or_update({"x": 77}, time=1000)
    depth = len(session.history.undo_labels())

    gestures.begin_keyframe_drag(0, 1)
    gestures.drag_keyframe_to(30)
    assert [k.time for k in session.document.layers[0].keyframes] == [0.0, 30.0]
    gestures.end_keyframe_drag()

    layer = session.document.layers[0]
    assert [(k.time, k.x) for k in layer.keyframes] == [(30.0, 77.0)]
    assert session.selection.keyframe_index == 0
    assert len(session.history.undo_labels()) == depth + 1

    session.history.undo()
    assert [k.time for k in session.document.layers[0].keyframes] == [0.0, 1000.0]
