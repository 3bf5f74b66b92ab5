from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Any, Iterable, List, Mapping, Optional, Union
from uuid import uuid4

from .easing import Easing, resolve_easing

MERGE_THRESHOLD_MS = 100.0
MAX_LAYER_NAME_LENGTH = 50
DEFAULT_BACKGROUND_COLOR = "#2c3e50"
DEFAULT_WORKSPACE_MS = 5000.0


@dataclass(frozen=True)
class Properties:
    """Transform properties of a layer at one instant."""

    x: float = 0.0
    y: float = 0.0
    scale_x: float = 1.0
    scale_y: float = 1.0
    rotation: float = 0.0
    visible: bool = True

    def as_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


_PROPERTY_NAMES = tuple(f.name for f in fields(Properties))


@dataclass
class Keyframe:
    time: float
    x: float = 0.0
    y: float = 0.0
    scale_x: float = 1.0
    scale_y: float = 1.0
    rotation: float = 0.0
    visible: bool = True
    easing: Easing = Easing.LINEAR

    def __post_init__(self) -> None:
        self.time = max(0.0, float(self.time))
        self.x = float(self.x)
        self.y = float(self.y)
        self.scale_x = float(self.scale_x)
        self.scale_y = float(self.scale_y)
        self.rotation = float(self.rotation)
        self.visible = bool(self.visible)
        self.easing = resolve_easing(self.easing)

    def properties(self) -> Properties:
        return Properties(**{name: getattr(self, name) for name in _PROPERTY_NAMES})

    def apply(self, values: Union[Properties, Mapping[str, Any]]) -> None:
        """Overwrite transform properties (and easing when given) in place."""

        if isinstance(values, Properties):
            values = values.as_dict()
        data = {name: values.get(name, getattr(self, name)) for name in _PROPERTY_NAMES}
        # coerce on a scratch keyframe so bad input leaves this one untouched
        checked = Keyframe(self.time, easing=values.get("easing", self.easing), **data)
        for name in _PROPERTY_NAMES + ("easing",):
            setattr(self, name, getattr(checked, name))

    def copy(self) -> "Keyframe":
        return replace(self)

    @classmethod
    def from_properties(
        cls, time: float, props: Properties, easing: Union[Easing, str, None] = Easing.LINEAR
    ) -> "Keyframe":
        return cls(time, easing=resolve_easing(easing), **props.as_dict())


@dataclass
class BackgroundKeyframe:
    time: float
    color: str = DEFAULT_BACKGROUND_COLOR

    def __post_init__(self) -> None:
        self.time = max(0.0, float(self.time))
        self.color = str(self.color)

    def copy(self) -> "BackgroundKeyframe":
        return replace(self)


def find_near(keys: Iterable[Any], time: float, threshold: float = MERGE_THRESHOLD_MS) -> Optional[int]:
    """Index of the first key strictly closer than ``threshold`` to ``time``."""

    for idx, key in enumerate(keys):
        if abs(key.time - time) < threshold:
            return idx
    return None


def _new_layer_id() -> str:
    return f"layer_{uuid4().hex}"


@dataclass
class Layer:
    name: str = "Layer"
    image_url: str = ""
    image: Any = field(default=None, repr=False, compare=False)
    visible: bool = True
    opacity: int = 255
    keyframes: List[Keyframe] = field(default_factory=list)
    id: str = field(default_factory=_new_layer_id)

    def __post_init__(self) -> None:
        self.opacity = max(0, min(255, int(self.opacity)))
        self.sort_keyframes()

    def sort_keyframes(self) -> None:
        self.keyframes.sort(key=lambda k: k.time)

    def find_keyframe(self, time: float, threshold: float = MERGE_THRESHOLD_MS) -> Optional[int]:
        return find_near(self.keyframes, time, threshold)

    def clone(self, *, new_id: bool = False) -> "Layer":
        """Copy the layer and its keyframes; the image handle is shared."""

        return Layer(
            name=self.name,
            image_url=self.image_url,
            image=self.image,
            visible=self.visible,
            opacity=self.opacity,
            keyframes=[k.copy() for k in self.keyframes],
            id=_new_layer_id() if new_id else self.id,
        )


@dataclass
class DocumentSettings:
    canvas_width: int = 800
    canvas_height: int = 600
    fps: int = 60
    background_color: str = DEFAULT_BACKGROUND_COLOR
    duration: float = DEFAULT_WORKSPACE_MS

    def copy(self) -> "DocumentSettings":
        return replace(self)


@dataclass
class Document:
    settings: DocumentSettings = field(default_factory=DocumentSettings)
    loop_enabled: bool = True
    smooth_playback: bool = False
    layers: List[Layer] = field(default_factory=list)
    background_keyframes: List[BackgroundKeyframe] = field(default_factory=list)

    def __post_init__(self) -> None:
        for layer in self.layers:
            if not isinstance(layer, Layer):
                raise TypeError("Expected Layer instances in 'layers'.")
        self.sort_background_keyframes()

    def sort_background_keyframes(self) -> None:
        self.background_keyframes.sort(key=lambda k: k.time)

    def layer_at(self, index: Optional[int]) -> Optional[Layer]:
        if index is None or not 0 <= index < len(self.layers):
            return None
        return self.layers[index]

    def iter_keyframes(self) -> Iterable[Keyframe]:
        for layer in self.layers:
            yield from layer.keyframes

    def clone(self) -> "Document":
        """Deep copy of every value field; layer image handles stay shared."""

        return Document(
            settings=self.settings.copy(),
            loop_enabled=self.loop_enabled,
            smooth_playback=self.smooth_playback,
            layers=[layer.clone() for layer in self.layers],
            background_keyframes=[k.copy() for k in self.background_keyframes],
        )


def index_of(items: Iterable[Any], obj: Any) -> Optional[int]:
    """Position of ``obj`` by identity (keyframes compare equal by value)."""

    for idx, item in enumerate(items):
        if item is obj:
            return idx
    return None
