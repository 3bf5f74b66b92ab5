from __future__ import annotations

import math
import re
from typing import Dict, Optional, Sequence, Tuple, TypeVar

import numpy as np

from .document import (
    DEFAULT_BACKGROUND_COLOR,
    MERGE_THRESHOLD_MS,
    BackgroundKeyframe,
    Document,
    Keyframe,
    Layer,
    Properties,
    find_near,
)
from .easing import EASING_FUNCTIONS, Easing, ease

SNAP_THRESHOLD_MS = MERGE_THRESHOLD_MS

_HEX_RE = re.compile(r"^#?([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})$", re.IGNORECASE)

Rgb = Tuple[int, int, int]
_K = TypeVar("_K", Keyframe, BackgroundKeyframe)


def lerp(start: float, end: float, progress: float) -> float:
    return start + (end - start) * progress


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def parse_hex_color(color: Optional[str]) -> Rgb:
    match = _HEX_RE.match(color or "")
    if match is None:
        match = _HEX_RE.match(DEFAULT_BACKGROUND_COLOR)
    return tuple(int(part, 16) for part in match.groups())  # type: ignore[return-value]


def format_hex_color(rgb: Sequence[float]) -> str:
    channels = [max(0, min(255, _round_half_up(c))) for c in rgb]
    return "#" + "".join(f"{c:02x}" for c in channels)


def blend_colors(color1: Optional[str], color2: Optional[str], progress: float) -> str:
    """Blend two hex colors channel by channel in 0-255 space."""

    c1 = parse_hex_color(color1)
    c2 = parse_hex_color(color2)
    return format_hex_color([lerp(a, b, progress) for a, b in zip(c1, c2)])


def bracket(keys: Sequence[_K], time: float) -> Tuple[_K, _K]:
    """Return the first adjacent ``(prev, next)`` pair enclosing ``time``.

    Falls back to ``(first, last)`` when ``time`` lies outside the keyed range.
    """

    for i in range(len(keys) - 1):
        if keys[i].time <= time <= keys[i + 1].time:
            return keys[i], keys[i + 1]
    return keys[0], keys[-1]


def _progress(prev: _K, nxt: _K, time: float) -> Optional[float]:
    span = nxt.time - prev.time
    if span <= 0.0:
        return None
    return (time - prev.time) / span


def sample_layer(layer: Layer, time: float, smooth_playback: bool = False) -> Optional[Properties]:
    """Transform properties of ``layer`` at ``time`` or ``None`` without keyframes."""

    keys = layer.keyframes
    if not keys:
        return None
    if len(keys) == 1:
        return keys[0].properties()

    time = float(time)
    if not smooth_playback:
        idx = find_near(keys, time, SNAP_THRESHOLD_MS)
        if idx is not None:
            return keys[idx].properties()

    prev, nxt = bracket(keys, time)
    if time < prev.time:
        return prev.properties()
    if time > nxt.time:
        return nxt.properties()

    progress = _progress(prev, nxt, time)
    if progress is None:
        return prev.properties()
    eased = ease(prev.easing, progress)

    # rotation is a plain scalar: 350 -> 10 sweeps through 180
    return Properties(
        x=lerp(prev.x, nxt.x, eased),
        y=lerp(prev.y, nxt.y, eased),
        scale_x=lerp(prev.scale_x, nxt.scale_x, eased),
        scale_y=lerp(prev.scale_y, nxt.scale_y, eased),
        rotation=lerp(prev.rotation, nxt.rotation, eased),
        visible=prev.visible,
    )


def sample_background_color(document: Document, time: float) -> str:
    keys = document.background_keyframes
    if not keys:
        return document.settings.background_color or DEFAULT_BACKGROUND_COLOR
    if len(keys) == 1:
        return keys[0].color

    time = float(time)
    prev, nxt = bracket(keys, time)
    if time < prev.time:
        return prev.color
    if time > nxt.time:
        return nxt.color

    progress = _progress(prev, nxt, time)
    if progress is None:
        return prev.color
    return blend_colors(prev.color, nxt.color, progress)


_NUMERIC_PROPERTIES = ("x", "y", "scale_x", "scale_y", "rotation")


def _layer_arrays(layer: Layer) -> Tuple[np.ndarray, Dict[str, np.ndarray]]:
    keys = layer.keyframes
    t = np.array([k.time for k in keys], dtype=float)
    values = {name: np.array([getattr(k, name) for k in keys], dtype=float) for name in _NUMERIC_PROPERTIES}
    values["visible"] = np.array([k.visible for k in keys], dtype=bool)
    return t, values


def _ease_segments(layer: Layer, seg: np.ndarray, progress: np.ndarray) -> np.ndarray:
    kinds = np.array([k.easing.value for k in layer.keyframes])[seg]
    eased = progress.copy()
    for kind in np.unique(kinds):
        if kind == Easing.LINEAR.value:
            continue
        mask = kinds == kind
        fn = EASING_FUNCTIONS[Easing(kind)]
        eased[mask] = np.fromiter((fn(float(p)) for p in progress[mask]), dtype=float, count=int(mask.sum()))
    return eased


def sample_layer_grid(
    layer: Layer, ts: np.ndarray, smooth_playback: bool = False
) -> Optional[Dict[str, np.ndarray]]:
    """Vectorised :func:`sample_layer` over a time grid.

    Returns one array per property (``visible`` as bool), or ``None`` for a
    layer without keyframes.
    """

    ts = np.asarray(ts, dtype=float)
    t, values = _layer_arrays(layer)
    n = len(t)
    if n == 0:
        return None
    if n == 1:
        return {name: np.full(ts.shape, arr[0], dtype=arr.dtype) for name, arr in values.items()}

    # first adjacent pair with t[i] <= time <= t[i + 1]
    seg = np.clip(np.searchsorted(t, ts, side="left") - 1, 0, n - 2)
    t0, t1 = t[seg], t[seg + 1]
    span = t1 - t0
    flat = span <= 0.0
    progress = np.where(flat, 0.0, (ts - t0) / np.where(flat, 1.0, span))
    eased = _ease_segments(layer, seg, progress)

    out: Dict[str, np.ndarray] = {}
    for name in _NUMERIC_PROPERTIES:
        v0, v1 = values[name][seg], values[name][seg + 1]
        out[name] = np.where(flat, v0, v0 + (v1 - v0) * eased)
    out["visible"] = values["visible"][seg].copy()

    before, after = ts < t[0], ts > t[-1]
    for name, arr in values.items():
        out[name][before] = arr[0]
        out[name][after] = arr[-1]

    if not smooth_playback:
        near = np.abs(ts[:, None] - t[None, :]) < SNAP_THRESHOLD_MS
        snapped = near.any(axis=1)
        first = near.argmax(axis=1)[snapped]
        for name, arr in values.items():
            out[name][snapped] = arr[first]
    return out
