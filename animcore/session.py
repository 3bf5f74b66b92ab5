"""Editing session: the single owner of the live document.

Every mutation goes through :meth:`EditorSession.mutate` so the history can
snapshot the pre-mutation state and the workspace duration stays in sync with
the keyframes. Sampling helpers only read the document.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional

from .core.document import Document, Keyframe, Layer, Properties
from .core.easing import Easing
from .core.history import DocumentHistory
from .core.interpolation import sample_background_color, sample_layer
from .core.timeline import compute_animation_end, recompute_workspace_duration
from .interaction.selection import Selection
from .settings import EditorSettings


logger = logging.getLogger(__name__)


Notifier = Callable[[str, str], None]
Listener = Callable[["EditorSession"], None]

_LOG_LEVELS = {"error": logging.WARNING, "success": logging.INFO, "info": logging.INFO}


@dataclass(frozen=True)
class KeyframeClipboard:
    """Value-only copy of a keyframe; the paste time is chosen later."""

    properties: Properties
    easing: Easing
    source_layer_id: str


class EditorSession:
    def __init__(
        self,
        document: Optional[Document] = None,
        *,
        settings: Optional[EditorSettings] = None,
        notifier: Optional[Notifier] = None,
    ) -> None:
        self.settings = settings or EditorSettings()
        self.document = document if document is not None else self._blank_document()
        self.selection = Selection()
        self.current_time = 0.0
        self.clipboard: Optional[KeyframeClipboard] = None
        self.history = DocumentHistory(self, limit=self.settings.history_limit)
        self._notifier = notifier
        self._listeners: List[Listener] = []
        recompute_workspace_duration(self.document)

    def _blank_document(self) -> Document:
        return Document(
            settings=self.settings.document_settings(),
            loop_enabled=self.settings.loop_enabled,
            smooth_playback=self.settings.smooth_playback,
        )

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------
    def notify(self, message: str, level: str = "info") -> None:
        """Relay a user-facing notice to the UI collaborator."""

        logger.log(_LOG_LEVELS.get(level, logging.INFO), message)
        if self._notifier is None:
            return
        try:
            self._notifier(message, level)
        except Exception:
            logger.exception("Notifier failed for message %r", message)

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit_changed(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("Session listener failed")

    # ------------------------------------------------------------------
    # Mutation choke point
    # ------------------------------------------------------------------
    @contextmanager
    def mutate(self, label: str, *, structural: bool = True) -> Iterator[Document]:
        """Snapshot, hand the document to the caller, then resync derived state.

        If the body raises, the snapshot is restored and dropped again.
        """

        saved = self.history.save_state(label)
        try:
            yield self.document
        except Exception:
            if saved:
                self.history.rollback()
            raise
        self.commit(structural=structural)

    def commit(self, *, structural: bool = True) -> None:
        """Resync after an un-snapshotted write (gesture ticks, drags)."""

        if structural:
            recompute_workspace_duration(self.document)
        self._emit_changed()

    def refresh(self) -> None:
        """Post-restore contract: clamp selection, resize workspace, notify."""

        self.selection.clamp(self.document)
        recompute_workspace_duration(self.document)
        self.current_time = min(max(0.0, self.current_time), self.document.settings.duration)
        self._emit_changed()

    # ------------------------------------------------------------------
    # Project lifecycle
    # ------------------------------------------------------------------
    def new_project(self) -> None:
        with self.mutate("New Project"):
            self.document = self._blank_document()
            self.selection.clear()
            self.current_time = 0.0
        self.clipboard = None

    def load(self, document: Document, selection: Optional[Selection] = None) -> None:
        """Replace the document wholesale (e.g. after deserialization)."""

        self.document = document
        self.selection = selection.copy() if selection is not None else Selection()
        self.current_time = 0.0
        self.clipboard = None
        self.history.clear()
        self.refresh()

    # ------------------------------------------------------------------
    # Playhead and queries
    # ------------------------------------------------------------------
    def set_current_time(self, time: float) -> float:
        self.current_time = min(max(0.0, float(time)), self.document.settings.duration)
        return self.current_time

    @property
    def selected_layer(self) -> Optional[Layer]:
        return self.document.layer_at(self.selection.layer_index)

    @property
    def selected_keyframe(self) -> Optional[Keyframe]:
        layer = self.selected_layer
        idx = self.selection.keyframe_index
        if layer is None or idx is None or not 0 <= idx < len(layer.keyframes):
            return None
        return layer.keyframes[idx]

    def default_properties(self) -> Properties:
        s = self.document.settings
        return Properties(x=s.canvas_width / 2.0, y=s.canvas_height / 2.0)

    def current_properties(self, layer_index: Optional[int] = None) -> Optional[Properties]:
        idx = self.selection.layer_index if layer_index is None else layer_index
        layer = self.document.layer_at(idx)
        if layer is None:
            return None
        return sample_layer(layer, self.current_time, self.document.smooth_playback)

    def current_background_color(self) -> str:
        return sample_background_color(self.document, self.current_time)

    def animation_end(self) -> float:
        return compute_animation_end(self.document)
