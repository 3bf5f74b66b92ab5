"""Editor preferences stored via QSettings."""
from __future__ import annotations

import re
from dataclasses import dataclass

from PySide6.QtCore import QSettings

from .core.document import DEFAULT_BACKGROUND_COLOR, DocumentSettings
from .core.history import MAX_HISTORY

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")


@dataclass
class EditorSettings:
    canvas_width: int = 800
    canvas_height: int = 600
    fps: int = 60
    background_color: str = DEFAULT_BACKGROUND_COLOR
    loop_enabled: bool = True
    smooth_playback: bool = False
    history_limit: int = MAX_HISTORY

    def document_settings(self) -> DocumentSettings:
        return DocumentSettings(
            canvas_width=self.canvas_width,
            canvas_height=self.canvas_height,
            fps=self.fps,
            background_color=self.background_color,
        )


def _clamp_canvas(value: int) -> int:
    return max(16, min(4096, int(value)))


def _clamp_fps(value: int) -> int:
    return max(1, min(120, int(value)))


def _clamp_history(value: int) -> int:
    return max(1, min(500, int(value)))


def _parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, str):
        return value.lower() in {"1", "true", "yes", "on"}
    return bool(value)


def _parse_int(raw, clamp, default: int) -> int:
    try:
        return clamp(int(raw))
    except (TypeError, ValueError):
        return default


def load_settings(qsettings: QSettings) -> EditorSettings:
    """Load editor settings from QSettings."""

    defaults = EditorSettings()
    color = qsettings.value("editor/background_color", defaults.background_color)
    if not isinstance(color, str) or not _HEX_COLOR.match(color):
        color = defaults.background_color

    return EditorSettings(
        canvas_width=_parse_int(
            qsettings.value("editor/canvas_width", defaults.canvas_width), _clamp_canvas, defaults.canvas_width
        ),
        canvas_height=_parse_int(
            qsettings.value("editor/canvas_height", defaults.canvas_height), _clamp_canvas, defaults.canvas_height
        ),
        fps=_parse_int(qsettings.value("editor/fps", defaults.fps), _clamp_fps, defaults.fps),
        background_color=color.lower(),
        loop_enabled=_parse_bool(qsettings.value("playback/loop_enabled", defaults.loop_enabled)),
        smooth_playback=_parse_bool(qsettings.value("playback/smooth_playback", defaults.smooth_playback)),
        history_limit=_parse_int(
            qsettings.value("editor/history_limit", defaults.history_limit), _clamp_history, defaults.history_limit
        ),
    )


def save_settings(qsettings: QSettings, settings: EditorSettings) -> None:
    """Persist editor settings to QSettings."""

    qsettings.setValue("editor/canvas_width", _clamp_canvas(settings.canvas_width))
    qsettings.setValue("editor/canvas_height", _clamp_canvas(settings.canvas_height))
    qsettings.setValue("editor/fps", _clamp_fps(settings.fps))
    color = settings.background_color if _HEX_COLOR.match(settings.background_color or "") else DEFAULT_BACKGROUND_COLOR
    qsettings.setValue("editor/background_color", color.lower())
    qsettings.setValue("playback/loop_enabled", bool(settings.loop_enabled))
    qsettings.setValue("playback/smooth_playback", bool(settings.smooth_playback))
    qsettings.setValue("editor/history_limit", _clamp_history(settings.history_limit))
