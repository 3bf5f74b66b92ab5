from .clock import PlaybackStep, advance_playhead, tick

__all__ = ["PlaybackStep", "advance_playhead", "tick"]
