"""Animation end time and editable workspace duration."""

from __future__ import annotations

import logging
import math

from .document import DEFAULT_WORKSPACE_MS, Document

logger = logging.getLogger(__name__)

GROWTH_MARGIN_MS = 1000.0
WORKSPACE_STEP_MS = 5000.0
MIN_WORKSPACE_MS = 5000.0
MAX_WORKSPACE_MS = 60000.0


def compute_animation_end(document: Document) -> float:
    """Latest keyframe time over all layers; background keyframes are ignored."""

    return max((k.time for k in document.iter_keyframes()), default=0.0)


def next_workspace_duration(animation_end: float, current: float) -> float:
    current = float(current) or DEFAULT_WORKSPACE_MS
    if animation_end <= current - GROWTH_MARGIN_MS:
        return current
    grown = math.ceil((animation_end + GROWTH_MARGIN_MS) / WORKSPACE_STEP_MS) * WORKSPACE_STEP_MS
    return float(min(max(grown, MIN_WORKSPACE_MS), MAX_WORKSPACE_MS))


def recompute_workspace_duration(document: Document) -> float:
    end = compute_animation_end(document)
    duration = next_workspace_duration(end, document.settings.duration)
    if duration != document.settings.duration:
        logger.debug(
            "Workspace resized %.1fs -> %.1fs (animation ends at %.1fs)",
            document.settings.duration / 1000.0,
            duration / 1000.0,
            end / 1000.0,
        )
        document.settings.duration = duration
    return duration


def time_to_progress(time: float, duration: float) -> float:
    if duration <= 0.0:
        return 0.0
    return min(1.0, max(0.0, float(time) / float(duration)))


def progress_to_time(progress: float, duration: float) -> float:
    return min(1.0, max(0.0, float(progress))) * max(0.0, float(duration))
