from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class EditError(str, Enum):
    NO_LAYER_SELECTED = "no_layer_selected"
    NO_KEYFRAME_SELECTED = "no_keyframe_selected"
    INVALID_INDEX = "invalid_index"
    EMPTY_NAME = "empty_name"
    NAME_TOO_LONG = "name_too_long"
    UNCHANGED = "unchanged"
    SOLE_BACKGROUND_KEYFRAME = "sole_background_keyframe"
    SAME_LAYER_PASTE = "same_layer_paste"
    NOTHING_COPIED = "nothing_copied"
    EMPTY_UNDO = "empty_undo"
    EMPTY_REDO = "empty_redo"


MESSAGES = {
    EditError.NO_LAYER_SELECTED: "Select a layer first",
    EditError.NO_KEYFRAME_SELECTED: "No keyframe selected",
    EditError.INVALID_INDEX: "Nothing at that position",
    EditError.EMPTY_NAME: "Layer name cannot be empty",
    EditError.NAME_TOO_LONG: "Layer name too long (max 50 characters)",
    EditError.UNCHANGED: "Nothing changed",
    EditError.SOLE_BACKGROUND_KEYFRAME: "Cannot delete the only background keyframe",
    EditError.SAME_LAYER_PASTE: "Cannot paste on the same layer - select a different layer",
    EditError.NOTHING_COPIED: "No keyframe copied yet",
    EditError.EMPTY_UNDO: "Nothing to undo",
    EditError.EMPTY_REDO: "Nothing to redo",
}


@dataclass(frozen=True)
class EditResult:
    """Outcome of an editing operation; rejections carry an :class:`EditError`."""

    ok: bool
    message: str = ""
    error: Optional[EditError] = None
    value: Any = None

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls, message: str = "", value: Any = None) -> "EditResult":
        return cls(True, message, None, value)

    @classmethod
    def rejected(cls, error: EditError) -> "EditResult":
        return cls(False, MESSAGES[error], error)
