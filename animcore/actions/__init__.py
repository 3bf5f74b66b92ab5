"""Undoable editing operations on the session document."""

from .keyframe_actions import KeyframeActions
from .layer_actions import LayerActions

__all__ = ["KeyframeActions", "LayerActions"]
