"""Layer add/delete/duplicate/reorder/rename on the session document."""

from __future__ import annotations

import logging
from typing import Any, Optional

from ..core.document import MAX_LAYER_NAME_LENGTH, Keyframe, Layer
from ..core.results import EditError, EditResult
from ..session import EditorSession


logger = logging.getLogger(__name__)


class LayerActions:
    def __init__(self, session: EditorSession) -> None:
        self.session = session

    def _reject(self, error: EditError) -> EditResult:
        result = EditResult.rejected(error)
        logger.warning("Layer edit rejected: %s", error.value)
        self.session.notify(result.message, "error")
        return result

    def _valid(self, index: Optional[int]) -> bool:
        return self.session.document.layer_at(index) is not None

    # ---------------- structure ----------------
    def add_layer(self, image_url: str = "", image: Any = None, name: Optional[str] = None) -> EditResult:
        """Append a layer with one identity keyframe at time 0 and select it."""

        doc = self.session.document
        start = self.session.default_properties()
        name = (name or "").strip() or f"Layer {len(doc.layers) + 1}"
        layer = Layer(
            name=name[:MAX_LAYER_NAME_LENGTH],
            image_url=image_url,
            image=image,
            keyframes=[Keyframe.from_properties(0.0, start)],
        )
        with self.session.mutate("Add Layer"):
            doc.layers.append(layer)
            self.session.selection.select_layer(len(doc.layers) - 1, 0)
            self.session.current_time = 0.0
        logger.info("Layer added and selected: %s", layer.name)
        self.session.notify("Layer added! Drag to position or add keyframes.", "success")
        return EditResult.success(value=len(doc.layers) - 1)

    def delete_layer(self, index: int) -> EditResult:
        if not self._valid(index):
            return self._reject(EditError.INVALID_INDEX)
        doc = self.session.document
        with self.session.mutate("Delete Layer"):
            removed = doc.layers.pop(index)
            self.session.selection.layer_removed(index)
        logger.info("Deleted layer %s, %d remaining", removed.name, len(doc.layers))
        self.session.notify("Layer deleted", "info")
        return EditResult.success(value=removed.id)

    def duplicate_layer(self, index: int) -> EditResult:
        """Insert a copy after ``index``; keyframes are copied, the image shared."""

        if not self._valid(index):
            return self._reject(EditError.INVALID_INDEX)
        doc = self.session.document
        source = doc.layers[index]
        copy = source.clone(new_id=True)
        copy.name = f"{source.name} (Copy)"[:MAX_LAYER_NAME_LENGTH]
        copy.visible = True

        with self.session.mutate("Duplicate Layer"):
            doc.layers.insert(index + 1, copy)
            self.session.selection.select_layer(index + 1, 0 if copy.keyframes else None)
            if copy.keyframes:
                self.session.current_time = copy.keyframes[0].time
        message = f"Layer duplicated! All {len(copy.keyframes)} keyframes copied."
        self.session.notify(message, "success")
        return EditResult.success(message, value=index + 1)

    def reorder_layer(self, src: int, dst: int) -> EditResult:
        """Move the layer at ``src`` so that it ends up at index ``dst``."""

        if not self._valid(src) or not self._valid(dst):
            return self._reject(EditError.INVALID_INDEX)
        if src == dst:
            return EditResult.rejected(EditError.UNCHANGED)
        doc = self.session.document
        with self.session.mutate("Reorder Layer", structural=False):
            layer = doc.layers.pop(src)
            doc.layers.insert(dst, layer)
            self.session.selection.layer_moved(src, dst)
        logger.debug("Layer %s moved to position %d", layer.name, dst)
        return EditResult.success(value=dst)

    # ---------------- attributes ----------------
    def rename_layer(self, index: int, new_name: str) -> EditResult:
        if not self._valid(index):
            return self._reject(EditError.INVALID_INDEX)
        name = (new_name or "").strip()
        if not name:
            return self._reject(EditError.EMPTY_NAME)
        if len(name) > MAX_LAYER_NAME_LENGTH:
            return self._reject(EditError.NAME_TOO_LONG)
        layer = self.session.document.layers[index]
        if layer.name == name:
            return EditResult.rejected(EditError.UNCHANGED)

        old = layer.name
        with self.session.mutate("Rename Layer", structural=False):
            layer.name = name
        logger.info("Layer renamed from %r to %r", old, name)
        self.session.notify(f'Layer renamed to "{name}"', "success")
        return EditResult.success(value=name)

    def toggle_visibility(self, index: int) -> EditResult:
        if not self._valid(index):
            return self._reject(EditError.INVALID_INDEX)
        layer = self.session.document.layers[index]
        # not recorded in history
        layer.visible = not layer.visible
        self.session.commit(structural=False)
        return EditResult.success(value=layer.visible)

    # ---------------- selection ----------------
    def select_layer(self, index: Optional[int], preserve_keyframe: bool = False) -> EditResult:
        """Select a layer; switching layers selects its first keyframe.

        ``None`` or an unknown index clears the layer selection.
        """

        selection = self.session.selection
        previous = selection.layer_index
        layer = self.session.document.layer_at(index)
        if layer is None:
            selection.select_layer(None)
            if index is not None:
                logger.warning("Layer at index %s not found", index)
                return EditResult.rejected(EditError.INVALID_INDEX)
            return EditResult.success()

        keyframe_index = selection.keyframe_index
        selection.select_layer(index, keyframe_index)
        if not layer.keyframes:
            selection.select_keyframe(None)
        elif not preserve_keyframe and previous != index:
            selection.select_keyframe(0)
            self.session.set_current_time(layer.keyframes[0].time)
        elif keyframe_index is not None and keyframe_index >= len(layer.keyframes):
            selection.select_keyframe(0)
            self.session.set_current_time(layer.keyframes[0].time)
        return EditResult.success(value=index)
