from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Tuple

from .document import Document
from .results import EditError, EditResult

if TYPE_CHECKING:  # pragma: no cover
    from ..interaction.selection import Selection
    from ..session import EditorSession

logger = logging.getLogger(__name__)

MAX_HISTORY = 50


@dataclass(frozen=True)
class HistorySnapshot:
    document: Document
    selection: "Selection"
    current_time: float
    label: str


def _snapshot_from_session(session: "EditorSession", label: str) -> HistorySnapshot:
    return HistorySnapshot(
        document=session.document.clone(),
        selection=session.selection.copy(),
        current_time=float(session.current_time),
        label=label,
    )


def _apply_snapshot(session: "EditorSession", snap: HistorySnapshot) -> None:
    # restore copies so the snapshot itself is never mutated by later edits
    session.document = snap.document.clone()
    session.selection = snap.selection.copy()
    session.current_time = snap.current_time


class DocumentHistory:
    """Undo/redo stacks of whole-session snapshots."""

    def __init__(self, session: "EditorSession", limit: int = MAX_HISTORY):
        self._session = session
        self._limit = max(1, int(limit))
        self._undo: List[HistorySnapshot] = []
        self._redo: List[HistorySnapshot] = []
        self._restoring = False
        # (snapshot, evicted, previous redo) of the last save_state, for rollback()
        self._pending: Optional[Tuple[HistorySnapshot, List[HistorySnapshot], List[HistorySnapshot]]] = None

    # ---- push ----
    def save_state(self, label: str = "Action") -> bool:
        """Capture the pre-mutation state as a new undo step."""
        if self._restoring:
            return False
        snap = _snapshot_from_session(self._session, label or "Action")
        self._undo.append(snap)
        evicted: List[HistorySnapshot] = []
        # trim oldest states if above limit
        if len(self._undo) > self._limit:
            evicted = self._undo[: len(self._undo) - self._limit]
            del self._undo[: len(evicted)]
        self._pending = (snap, evicted, self._redo)
        self._redo = []
        logger.debug("State saved: %s (undo stack size %d)", label, len(self._undo))
        return True

    def rollback(self) -> bool:
        """Drop the last saved state and restore it, as if the edit never ran.

        Only valid right after :meth:`save_state`; the stacks are put back
        exactly as they were, redo entries included.
        """
        if self._pending is None or self._restoring:
            return False
        snap, evicted, redo = self._pending
        self._pending = None
        if not self._undo or self._undo[-1] is not snap:
            return False
        self._undo.pop()
        self._undo[:0] = evicted
        self._redo = redo

        self._restoring = True
        try:
            _apply_snapshot(self._session, snap)
            self._session.refresh()
        finally:
            self._restoring = False
        logger.warning("Rolled back failed edit: %s", snap.label)
        return True

    # ---- queries ----
    @property
    def restoring(self) -> bool:
        return self._restoring

    @property
    def limit(self) -> int:
        return self._limit

    def can_undo(self) -> bool:
        return bool(self._undo)

    def can_redo(self) -> bool:
        return bool(self._redo)

    def undo_labels(self) -> List[str]:
        return [snap.label for snap in reversed(self._undo)]

    def redo_labels(self) -> List[str]:
        return [snap.label for snap in reversed(self._redo)]

    def clear(self) -> None:
        self._undo.clear()
        self._redo.clear()
        self._pending = None

    # ---- operations ----
    def undo(self) -> EditResult:
        return self._step(self._undo, self._redo, "Undo", EditError.EMPTY_UNDO)

    def redo(self) -> EditResult:
        return self._step(self._redo, self._undo, "Redo", EditError.EMPTY_REDO)

    def _step(
        self,
        source: List[HistorySnapshot],
        target: List[HistorySnapshot],
        verb: str,
        empty: EditError,
    ) -> EditResult:
        if self._restoring:
            return EditResult.rejected(EditError.UNCHANGED)
        if not source:
            result = EditResult.rejected(empty)
            self._session.notify(result.message, "info")
            return result

        self._pending = None
        self._restoring = True
        try:
            snap = source.pop()
            target.append(_snapshot_from_session(self._session, snap.label))
            if len(target) > self._limit:
                del target[0]
            _apply_snapshot(self._session, snap)
            self._session.refresh()
        finally:
            self._restoring = False

        message = f"{verb}: {snap.label}"
        logger.info(message)
        self._session.notify(message, "info")
        return EditResult.success(message)
