"""Interactive gestures that commit many values under one history entry."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..actions.keyframe_actions import KeyframeActions, Values
from ..core.document import Keyframe, Layer, index_of
from ..core.results import EditError, EditResult
from ..session import EditorSession


logger = logging.getLogger(__name__)


@dataclass
class _GestureState:
    label: Optional[str] = None
    layer_id: Optional[str] = None

    @property
    def active(self) -> bool:
        return self.layer_id is not None

    def reset(self) -> None:
        self.label = None
        self.layer_id = None


@dataclass
class _KeyDragState:
    layer_id: Optional[str] = None
    key: Optional[Keyframe] = None
    start_time: float = 0.0
    moved: bool = False

    @property
    def active(self) -> bool:
        return self.key is not None

    def reset(self) -> None:
        self.layer_id = None
        self.key = None
        self.start_time = 0.0
        self.moved = False


class GestureController:
    """Live canvas drags (move/scale/rotate) and timeline keyframe drags.

    A canvas gesture snapshots once in :meth:`begin_gesture`; every
    :meth:`commit_tick` then writes the keyframe at the playhead without
    touching history until :meth:`end_gesture`.
    """

    def __init__(self, session: EditorSession, keyframes: Optional[KeyframeActions] = None) -> None:
        self.session = session
        self.keyframes = keyframes or KeyframeActions(session)
        self._gesture = _GestureState()
        self._drag = _KeyDragState()

    def _layer_for_id(self, layer_id: Optional[str]) -> Optional[Layer]:
        for layer in self.session.document.layers:
            if layer.id == layer_id:
                return layer
        return None

    # ------------------------------------------------------------------
    # Canvas gesture lifecycle
    # ------------------------------------------------------------------
    @property
    def gesture_active(self) -> bool:
        return self._gesture.active

    def begin_gesture(self, label: str = "Move Layer", layer_index: Optional[int] = None) -> bool:
        idx = self.session.selection.layer_index if layer_index is None else layer_index
        layer = self.session.document.layer_at(idx)
        if layer is None:
            return False
        if self._gesture.active:
            self.end_gesture()
        self.session.history.save_state(label)
        self._gesture.label = label
        self._gesture.layer_id = layer.id
        return True

    def commit_tick(self, values: Values) -> EditResult:
        """Write ``values`` at the playhead; snapshots only outside a gesture."""

        if not self._gesture.active:
            return self.keyframes.add_or_update(values)
        layer = self._layer_for_id(self._gesture.layer_id)
        if layer is None:
            self._gesture.reset()
            return EditResult.rejected(EditError.NO_LAYER_SELECTED)

        key_idx, created = self.keyframes.write_keyframe(layer, self.session.current_time, values)
        self.session.selection.select_layer(index_of(self.session.document.layers, layer), key_idx)
        if created:
            self.session.notify("Keyframe auto-created!", "info")
        self.session.commit()
        return EditResult.success(value=key_idx)

    def end_gesture(self) -> bool:
        if not self._gesture.active:
            return False
        logger.debug("Gesture finished: %s", self._gesture.label)
        self._gesture.reset()
        self.session.commit()
        return True

    # ------------------------------------------------------------------
    # Timeline keyframe drag
    # ------------------------------------------------------------------
    @property
    def keyframe_drag_active(self) -> bool:
        return self._drag.active

    def begin_keyframe_drag(self, layer_index: int, keyframe_index: int) -> bool:
        layer = self.session.document.layer_at(layer_index)
        if layer is None or not 0 <= keyframe_index < len(layer.keyframes):
            return False
        key = layer.keyframes[keyframe_index]
        self._drag.layer_id = layer.id
        self._drag.key = key
        self._drag.start_time = key.time
        self._drag.moved = False
        return True

    def drag_keyframe_to(self, time: float) -> bool:
        """Move the dragged keyframe to ``time`` (clamped to the workspace)."""

        if not self._drag.active:
            return False
        layer = self._layer_for_id(self._drag.layer_id)
        key = self._drag.key
        if layer is None or key is None or index_of(layer.keyframes, key) is None:
            self._drag.reset()
            return False

        if not self._drag.moved:
            self.session.history.save_state("Drag Keyframe")
            self._drag.moved = True

        duration = self.session.document.settings.duration
        key.time = min(max(0.0, float(time)), duration)
        layer.sort_keyframes()
        self.session.selection.select_layer(
            index_of(self.session.document.layers, layer), index_of(layer.keyframes, key)
        )
        self.session.commit(structural=False)
        return True

    def end_keyframe_drag(self) -> bool:
        """Finish the drag; the dropped keyframe replaces neighbours within the merge threshold."""

        if not self._drag.active:
            return False
        key = self._drag.key
        layer = self._layer_for_id(self._drag.layer_id)
        moved = self._drag.moved
        self._drag.reset()
        if not moved or key is None:
            return False

        if layer is not None and index_of(layer.keyframes, key) is not None:
            threshold = self.keyframes.merge_threshold_ms
            kept = [k for k in layer.keyframes if k is key or abs(k.time - key.time) >= threshold]
            if len(kept) != len(layer.keyframes):
                logger.info("Dropped keyframe at %.0fms replaced %d neighbour(s)", key.time, len(layer.keyframes) - len(kept))
                layer.keyframes[:] = kept
            self.session.selection.select_layer(
                index_of(self.session.document.layers, layer), index_of(layer.keyframes, key)
            )
        self.session.set_current_time(key.time)
        self.session.commit()
        return True
