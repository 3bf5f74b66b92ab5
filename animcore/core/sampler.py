from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import numpy as np

from .document import Document, Keyframe, Layer, Properties
from .interpolation import sample_background_color, sample_layer_grid
from .timeline import compute_animation_end

TRAIL_SAMPLES = 50


@dataclass
class FrameSamples:
    """Per-frame values for an external exporter; ``None`` where a layer has no keys."""

    times: np.ndarray
    layers: List[Tuple[Layer, List[Optional[Properties]]]]
    background: List[str]


def export_frame_times(document: Document, fps: Optional[float] = None) -> np.ndarray:
    rate = max(1.0, float(fps if fps is not None else document.settings.fps))
    frame_ms = 1000.0 / rate
    end = compute_animation_end(document)
    n = int(math.ceil(end / frame_ms))
    return np.arange(n, dtype=float) * frame_ms


def _properties_at(grid: Optional[Dict[str, np.ndarray]], count: int) -> List[Optional[Properties]]:
    if grid is None:
        return [None] * count
    return [
        Properties(
            x=float(grid["x"][i]),
            y=float(grid["y"][i]),
            scale_x=float(grid["scale_x"][i]),
            scale_y=float(grid["scale_y"][i]),
            rotation=float(grid["rotation"][i]),
            visible=bool(grid["visible"][i]),
        )
        for i in range(count)
    ]


def sample_frames(document: Document, fps: Optional[float] = None) -> FrameSamples:
    ts = export_frame_times(document, fps)
    smooth = document.smooth_playback
    layers = [
        (layer, _properties_at(sample_layer_grid(layer, ts, smooth), len(ts))) for layer in document.layers
    ]
    background = [sample_background_color(document, t) for t in ts]
    return FrameSamples(ts, layers, background)


def motion_trail(layer: Layer, samples: int = TRAIL_SAMPLES, smooth_playback: bool = False) -> np.ndarray:
    """``(samples + 1, 2)`` array of positions from the first to the last keyframe."""

    keys = layer.keyframes
    if len(keys) < 2:
        return np.empty((0, 2))
    start, end = keys[0].time, keys[-1].time
    if end <= start:
        return np.empty((0, 2))
    ts = np.linspace(start, end, max(1, int(samples)) + 1)
    grid = sample_layer_grid(layer, ts, smooth_playback)
    return np.column_stack((grid["x"], grid["y"]))


def onion_skin_neighbors(layer: Layer, time: float) -> Tuple[Optional[Keyframe], Optional[Keyframe]]:
    prev_key = None
    next_key = None
    for key in layer.keyframes:
        if key.time < time:
            prev_key = key
        elif key.time > time and next_key is None:
            next_key = key
    return prev_key, next_key
