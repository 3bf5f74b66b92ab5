"""Animation-state engine for a layered, keyframe-based 2D editor."""

from .core.document import BackgroundKeyframe, Document, DocumentSettings, Keyframe, Layer, Properties
from .core.easing import Easing, ease, resolve_easing
from .core.interpolation import sample_background_color, sample_layer
from .core.results import EditError, EditResult
from .session import EditorSession
from .actions import KeyframeActions, LayerActions
from .interaction.gesture import GestureController

__all__ = [
    "BackgroundKeyframe",
    "Document",
    "DocumentSettings",
    "Easing",
    "EditError",
    "EditResult",
    "EditorSession",
    "GestureController",
    "Keyframe",
    "KeyframeActions",
    "Layer",
    "LayerActions",
    "Properties",
    "ease",
    "resolve_easing",
    "sample_background_color",
    "sample_layer",
]
