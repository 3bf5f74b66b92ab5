"""Plain-data view of a document for the persistence collaborator.

Image handles never leave the process: ``document_to_dict`` drops them and
``document_from_dict`` re-attaches handles resolved externally by image URL.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..core.document import (
    DEFAULT_BACKGROUND_COLOR,
    DEFAULT_WORKSPACE_MS,
    BackgroundKeyframe,
    Document,
    DocumentSettings,
    Keyframe,
    Layer,
)
from ..interaction.selection import Selection

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1

# wire key -> model attribute
_KEY_FIELDS = (
    ("time", "time"),
    ("x", "x"),
    ("y", "y"),
    ("scaleX", "scale_x"),
    ("scaleY", "scale_y"),
    ("rotation", "rotation"),
    ("visible", "visible"),
)
_SETTINGS_FIELDS = (
    ("width", "canvas_width"),
    ("height", "canvas_height"),
    ("fps", "fps"),
    ("backgroundColor", "background_color"),
    ("duration", "duration"),
)


def _serialize_keyframe(key: Keyframe) -> dict:
    data = {wire: getattr(key, attr) for wire, attr in _KEY_FIELDS}
    data["easing"] = key.easing.value
    return data


def _serialize_layer(layer: Layer) -> dict:
    return {
        "id": layer.id,
        "name": layer.name,
        "imageUrl": layer.image_url,
        "visible": layer.visible,
        "opacity": layer.opacity,
        "keyframes": [_serialize_keyframe(k) for k in layer.keyframes],
    }


def document_to_dict(document: Document) -> dict:
    settings = {wire: getattr(document.settings, attr) for wire, attr in _SETTINGS_FIELDS}
    return {
        "version": FORMAT_VERSION,
        "settings": settings,
        "loopEnabled": document.loop_enabled,
        "smoothPlayback": document.smooth_playback,
        "layers": [_serialize_layer(layer) for layer in document.layers],
        "backgroundKeyframes": [
            {"time": k.time, "color": k.color} for k in document.background_keyframes
        ],
    }


def _coerce_keyframe(payload: Mapping[str, Any]) -> Keyframe:
    data = {attr: payload[wire] for wire, attr in _KEY_FIELDS if payload.get(wire) is not None}
    data.setdefault("time", 0.0)
    return Keyframe(easing=payload.get("easing"), **data)


def _load_settings(data: Mapping[str, Any]) -> DocumentSettings:
    settings = DocumentSettings()
    for wire, attr in _SETTINGS_FIELDS:
        if data.get(wire) is None:
            continue
        default = getattr(settings, attr)
        try:
            setattr(settings, attr, type(default)(data[wire]))
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid setting %s=%r", wire, data[wire])
    if not settings.background_color:
        settings.background_color = DEFAULT_BACKGROUND_COLOR
    if settings.duration <= 0:
        settings.duration = DEFAULT_WORKSPACE_MS
    return settings


def _load_layers(data: Iterable[Mapping[str, Any]], images: Mapping[str, Any]) -> List[Layer]:
    layers: List[Layer] = []
    for idx, layer_obj in enumerate(data):
        image_url = str(layer_obj.get("imageUrl") or "")
        kwargs: Dict[str, Any] = {}
        if layer_obj.get("id"):
            kwargs["id"] = str(layer_obj["id"])
        layer = Layer(
            name=str(layer_obj.get("name") or f"Layer {idx + 1}"),
            image_url=image_url,
            image=images.get(image_url),
            visible=bool(layer_obj.get("visible", True)),
            opacity=layer_obj.get("opacity", 255),
            keyframes=[_coerce_keyframe(k) for k in layer_obj.get("keyframes") or []],
            **kwargs,
        )
        if image_url and layer.image is None:
            logger.warning("No image handle resolved for %s", image_url)
        layers.append(layer)
    return layers


def document_from_dict(data: Mapping[str, Any], images: Optional[Mapping[str, Any]] = None) -> Document:
    """Rebuild a document; keyframe lists are re-sorted by time."""

    background = [
        BackgroundKeyframe(float(k.get("time", 0.0)), k.get("color") or DEFAULT_BACKGROUND_COLOR)
        for k in data.get("backgroundKeyframes") or []
    ]
    return Document(
        settings=_load_settings(data.get("settings") or {}),
        loop_enabled=bool(data.get("loopEnabled", True)),
        smooth_playback=bool(data.get("smoothPlayback", False)),
        layers=_load_layers(data.get("layers") or [], images or {}),
        background_keyframes=background,
    )


def restore_selection(selection: Optional[Selection], document: Document) -> Selection:
    """Selection for a freshly loaded document, clamped to its contents.

    Without a saved selection the first layer and its first keyframe are picked.
    """

    if selection is None:
        restored = Selection()
        if document.layers:
            restored.select_layer(0, 0 if document.layers[0].keyframes else None)
        return restored
    restored = selection.copy()
    restored.clamp(document)
    return restored
