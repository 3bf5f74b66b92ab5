# playback/clock.py
from __future__ import annotations

from typing import NamedTuple

from ..core.timeline import compute_animation_end
from ..session import EditorSession


class PlaybackStep(NamedTuple):
    time: float
    finished: bool


def advance_playhead(
    current: float,
    delta_ms: float,
    animation_end: float,
    *,
    speed: float = 1.0,
    loop: bool = False,
) -> PlaybackStep:
    """Advance by one frame of wall time.

    Past ``animation_end`` the playhead wraps to 0 when looping, otherwise it
    stops on the end and ``finished`` is set.
    """
    t = float(current) + float(delta_ms) * float(speed)
    if t > animation_end:
        if loop:
            return PlaybackStep(0.0, False)
        return PlaybackStep(float(animation_end), True)
    return PlaybackStep(max(0.0, t), False)


def tick(session: EditorSession, delta_ms: float, speed: float = 1.0) -> PlaybackStep:
    """Advance ``session.current_time`` using the document's loop flag."""
    step = advance_playhead(
        session.current_time,
        delta_ms,
        compute_animation_end(session.document),
        speed=speed,
        loop=session.document.loop_enabled,
    )
    session.set_current_time(step.time)
    return step
