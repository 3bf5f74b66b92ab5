"""Keyframe and background-keyframe editing with undo integration."""

from __future__ import annotations

import logging
import math
from typing import Any, Mapping, Optional, Tuple, Union

from ..core.document import (
    MERGE_THRESHOLD_MS,
    BackgroundKeyframe,
    Keyframe,
    Layer,
    Properties,
    find_near,
    index_of,
)
from ..core.easing import Easing, resolve_easing
from ..core.interpolation import sample_layer
from ..core.results import EditError, EditResult
from ..session import EditorSession, KeyframeClipboard


logger = logging.getLogger(__name__)

Values = Union[Properties, Mapping[str, Any], None]


def _non_finite(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    try:
        return not math.isfinite(float(value))
    except (TypeError, ValueError):
        return False


class KeyframeActions:
    """Owns keyframe add/update/delete/copy/paste on the session document.

    ``merge_threshold_ms`` decides when a write at time T lands on an existing
    keyframe instead of inserting a new one.
    """

    def __init__(self, session: EditorSession, *, merge_threshold_ms: float = MERGE_THRESHOLD_MS) -> None:
        self.session = session
        self.merge_threshold_ms = float(merge_threshold_ms)

    # ------------------------------------------------------------------
    # Core write (no history)
    # ------------------------------------------------------------------
    def write_keyframe(
        self,
        layer: Layer,
        time: float,
        values: Values = None,
        *,
        easing: Optional[Union[Easing, str]] = None,
    ) -> Tuple[int, bool]:
        """Overwrite the keyframe near ``time`` or insert a new one.

        Returns ``(index, created)``. Properties missing from ``values`` keep
        the layer's sampled value at ``time``.
        """

        time = max(0.0, float(time))
        merged = self._resolve_values(layer, time, values)
        idx = find_near(layer.keyframes, time, self.merge_threshold_ms)
        if idx is not None:
            key = layer.keyframes[idx]
            key.apply(merged)
            if easing is not None:
                key.easing = resolve_easing(easing)
            created = False
        else:
            key = Keyframe.from_properties(time, merged, easing if easing is not None else Easing.LINEAR)
            layer.keyframes.append(key)
            created = True
        layer.sort_keyframes()
        return index_of(layer.keyframes, key), created

    def _resolve_values(self, layer: Layer, time: float, values: Values) -> Properties:
        base = sample_layer(layer, time, self.session.document.smooth_playback)
        if base is None:
            base = self.session.default_properties()
        if values is None:
            return base
        if isinstance(values, Properties):
            values = values.as_dict()
        data = base.as_dict()
        for name, value in values.items():
            if name not in data:
                continue
            if _non_finite(value):
                # NaN/inf input keeps the sampled value for that property
                logger.debug("Ignoring non-finite %s=%r at %.0fms", name, value, time)
                continue
            data[name] = value
        return Properties(**data)

    def _reject(self, error: EditError) -> EditResult:
        result = EditResult.rejected(error)
        logger.warning("Keyframe edit rejected: %s", error.value)
        self.session.notify(result.message, "error")
        return result

    def _target_layer(self, layer_index: Optional[int]) -> Tuple[Optional[int], Optional[Layer]]:
        idx = self.session.selection.layer_index if layer_index is None else layer_index
        return idx, self.session.document.layer_at(idx)

    # ------------------------------------------------------------------
    # Layer keyframes
    # ------------------------------------------------------------------
    def add_or_update(
        self,
        values: Values = None,
        *,
        layer_index: Optional[int] = None,
        time: Optional[float] = None,
        easing: Optional[Union[Easing, str]] = None,
    ) -> EditResult:
        """Add a keyframe at ``time`` (default: playhead) or update the one there."""

        idx, layer = self._target_layer(layer_index)
        if layer is None:
            return self._reject(EditError.NO_LAYER_SELECTED)
        t = self.session.current_time if time is None else float(time)

        near = layer.find_keyframe(t, self.merge_threshold_ms)
        label = "Update Keyframe" if near is not None else "Add Keyframe"
        with self.session.mutate(label):
            key_idx, created = self.write_keyframe(layer, t, values, easing=easing)
            self.session.selection.select_layer(idx, key_idx)
        message = "Keyframe added!" if created else "Keyframe updated!"
        self.session.notify(message, "success")
        return EditResult.success(message, value=key_idx)

    def delete_selected(self) -> EditResult:
        layer = self.session.selected_layer
        if layer is None:
            return self._reject(EditError.NO_LAYER_SELECTED)
        key_idx = self.session.selection.keyframe_index
        if key_idx is None or not 0 <= key_idx < len(layer.keyframes):
            return self._reject(EditError.NO_KEYFRAME_SELECTED)

        with self.session.mutate("Delete Keyframe"):
            del layer.keyframes[key_idx]
            self.session.selection.select_keyframe(None)
        self.session.notify("Keyframe deleted", "info")
        return EditResult.success("Keyframe deleted")

    def set_easing(self, easing: Union[Easing, str]) -> EditResult:
        key = self.session.selected_keyframe
        if key is None:
            return self._reject(EditError.NO_KEYFRAME_SELECTED)
        with self.session.mutate("Change Easing", structural=False):
            key.easing = resolve_easing(easing)
        logger.debug("Updated keyframe easing to %s", key.easing.value)
        return EditResult.success(value=key.easing)

    def select_keyframe(self, index: int) -> EditResult:
        """Select a keyframe of the selected layer and jump the playhead to it."""

        layer = self.session.selected_layer
        if layer is None:
            return self._reject(EditError.NO_LAYER_SELECTED)
        if not 0 <= index < len(layer.keyframes):
            return self._reject(EditError.INVALID_INDEX)
        self.session.selection.select_keyframe(index)
        self.session.set_current_time(layer.keyframes[index].time)
        return EditResult.success(value=index)

    # ------------------------------------------------------------------
    # Clipboard
    # ------------------------------------------------------------------
    def copy_selected(self) -> EditResult:
        layer = self.session.selected_layer
        key = self.session.selected_keyframe
        if layer is None or key is None:
            return self._reject(EditError.NO_KEYFRAME_SELECTED)
        self.session.clipboard = KeyframeClipboard(key.properties(), key.easing, layer.id)
        message = "Keyframe copied! Select another layer to paste"
        self.session.notify(message, "success")
        return EditResult.success(message)

    def paste(self, layer_index: Optional[int] = None) -> EditResult:
        """Paste the clipboard at the playhead onto another layer."""

        clip = self.session.clipboard
        if clip is None:
            return self._reject(EditError.NOTHING_COPIED)
        idx, layer = self._target_layer(layer_index)
        if layer is None:
            return self._reject(EditError.NO_LAYER_SELECTED)
        if layer.id == clip.source_layer_id:
            return self._reject(EditError.SAME_LAYER_PASTE)

        t = self.session.current_time
        with self.session.mutate("Paste Keyframe"):
            key_idx, created = self.write_keyframe(layer, t, clip.properties, easing=clip.easing)
            self.session.selection.select_layer(idx, key_idx)
        if created:
            message = f"Keyframe pasted at {t / 1000.0:.2f}s"
        else:
            message = "Keyframe updated with copied properties"
        self.session.notify(message, "success")
        return EditResult.success(message, value=key_idx)

    # ------------------------------------------------------------------
    # Background keyframes
    # ------------------------------------------------------------------
    def set_background_color(self, color: str, time: Optional[float] = None) -> EditResult:
        """Add or update the global background keyframe at ``time``."""

        doc = self.session.document
        t = max(0.0, self.session.current_time if time is None else float(time))
        idx = find_near(doc.background_keyframes, t, self.merge_threshold_ms)
        if idx is not None:
            with self.session.mutate("Update Background Keyframe", structural=False):
                doc.background_keyframes[idx].color = str(color)
            logger.debug("Updated background keyframe at %.0fms to %s", doc.background_keyframes[idx].time, color)
            return EditResult.success(value=idx)

        key = BackgroundKeyframe(t, color)
        selection = self.session.selection
        selected = (
            doc.background_keyframes[selection.background_keyframe_index]
            if selection.background_keyframe_index is not None
            and 0 <= selection.background_keyframe_index < len(doc.background_keyframes)
            else None
        )
        with self.session.mutate("Create Background Keyframe", structural=False):
            doc.background_keyframes.append(key)
            doc.sort_background_keyframes()
            if selected is not None:
                selection.background_keyframe_index = index_of(doc.background_keyframes, selected)
        logger.debug("Created background keyframe at %.0fms with %s", t, color)
        return EditResult.success(value=index_of(doc.background_keyframes, key))

    def delete_background_keyframe(self, index: Optional[int] = None) -> EditResult:
        keys = self.session.document.background_keyframes
        idx = self.session.selection.background_keyframe_index if index is None else index
        if idx is None:
            return self._reject(EditError.NO_KEYFRAME_SELECTED)
        if len(keys) == 1 and idx == 0:
            return self._reject(EditError.SOLE_BACKGROUND_KEYFRAME)
        if not 0 <= idx < len(keys):
            return self._reject(EditError.INVALID_INDEX)

        with self.session.mutate("Delete Background Keyframe", structural=False):
            del keys[idx]
            self.session.selection.background_removed(idx)
        self.session.notify("Background keyframe deleted", "success")
        return EditResult.success("Background keyframe deleted")

    def select_background_keyframe(self, index: int) -> EditResult:
        keys = self.session.document.background_keyframes
        if not 0 <= index < len(keys):
            return self._reject(EditError.INVALID_INDEX)
        self.session.selection.select_background(index)
        self.session.set_current_time(keys[index].time)
        return EditResult.success(value=index)
