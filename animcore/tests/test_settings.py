from typing import Any, Dict

from PySide6.QtCore import QSettings

from animcore.settings import EditorSettings, load_settings, save_settings


class DummySettings:
    def __init__(self):
        self.data: Dict[str, Any] = {}

    def value(self, key: str, default: Any = None):
        return self.data.get(key, default)

    def setValue(self, key: str, value: Any) -> None:
        self.data[key] = value


def test_defaults_when_nothing_stored():
    assert load_settings(DummySettings()) == EditorSettings()


def test_load_settings_clamps_and_parses():
    qsettings = DummySettings()
    qsettings.setValue("editor/canvas_width", 99999)
    qsettings.setValue("editor/canvas_height", "480")
    qsettings.setValue("editor/fps", 0)
    qsettings.setValue("editor/background_color", "#ABCDEF")
    qsettings.setValue("editor/history_limit", "junk")
    qsettings.setValue("playback/loop_enabled", "false")
    qsettings.setValue("playback/smooth_playback", "true")

    result = load_settings(qsettings)
    assert result.canvas_width == 4096
    assert result.canvas_height == 480
    assert result.fps == 1
    assert result.background_color == "#abcdef"
    assert result.history_limit == 50
    assert result.loop_enabled is False
    assert result.smooth_playback is True


def test_invalid_color_falls_back_to_default():
    qsettings = DummySettings()
    qsettings.setValue("editor/background_color", "blue")
    assert load_settings(qsettings).background_color == "#2c3e50"


def test_round_trip_through_ini_file(tmp_path):
    path = str(tmp_path / "editor.ini")
    settings = EditorSettings(canvas_width=1280, canvas_height=720, fps=30, smooth_playback=True, history_limit=20)
    qsettings = QSettings(path, QSettings.Format.IniFormat)
    save_settings(qsettings, settings)
    qsettings.sync()

    assert load_settings(QSettings(path, QSettings.Format.IniFormat)) == settings


def test_document_settings_carry_canvas_and_fps():
    doc_settings = EditorSettings(canvas_width=640, fps=24).document_settings()
    assert doc_settings.canvas_width == 640
    assert doc_settings.fps == 24
    assert doc_settings.duration == 5000
