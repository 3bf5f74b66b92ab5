"""Selection state shared by the editing operations.

At most one of {layer keyframe, background keyframe} is active; selecting one
clears the other. Index helpers keep the selection pointing at the same
logical entity when the sequences around it change.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from ..core.document import Document


@dataclass
class Selection:
    layer_index: Optional[int] = None
    keyframe_index: Optional[int] = None
    background_keyframe_index: Optional[int] = None

    def copy(self) -> "Selection":
        return replace(self)

    # ---- basic operations ----
    def clear(self) -> None:
        self.layer_index = None
        self.keyframe_index = None
        self.background_keyframe_index = None

    def clear_layer(self) -> None:
        self.layer_index = None
        self.keyframe_index = None

    def select_layer(self, layer_index: Optional[int], keyframe_index: Optional[int] = None) -> None:
        self.layer_index = layer_index
        self.keyframe_index = keyframe_index if layer_index is not None else None
        self.background_keyframe_index = None

    def select_keyframe(self, keyframe_index: Optional[int]) -> None:
        self.keyframe_index = keyframe_index
        if keyframe_index is not None:
            self.background_keyframe_index = None

    def select_background(self, index: Optional[int]) -> None:
        self.background_keyframe_index = index
        if index is not None:
            self.keyframe_index = None

    # ---- remapping ----
    def layer_removed(self, index: int) -> None:
        if self.layer_index is None:
            return
        if self.layer_index == index:
            self.clear_layer()
        elif self.layer_index > index:
            self.layer_index -= 1

    def layer_moved(self, src: int, dst: int) -> None:
        sel = self.layer_index
        if sel is None or src == dst:
            return
        if sel == src:
            self.layer_index = dst
        elif src < sel <= dst:
            self.layer_index = sel - 1
        elif dst <= sel < src:
            self.layer_index = sel + 1

    def background_removed(self, index: int) -> None:
        sel = self.background_keyframe_index
        if sel is None:
            return
        if sel == index:
            self.background_keyframe_index = None
        elif sel > index:
            self.background_keyframe_index = sel - 1

    def clamp(self, document: Document) -> None:
        """Drop indices that no longer resolve inside ``document``."""

        layer = document.layer_at(self.layer_index)
        if layer is None:
            self.clear_layer()
        elif self.keyframe_index is not None and not 0 <= self.keyframe_index < len(layer.keyframes):
            self.keyframe_index = None
        bg = self.background_keyframe_index
        if bg is not None and not 0 <= bg < len(document.background_keyframes):
            self.background_keyframe_index = None
