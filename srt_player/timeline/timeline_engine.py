"""
Timeline Engine for subtitle playback.
Keeps a logical clock and resolves it to the active cue every frame.
"""

import time
import logging
from typing import Optional, Callable, List, Dict, Any

from .models import Cue, PlaybackState, TimeUnit, cue_index
from .scheduler import FrameScheduler, ManualFrameScheduler

logger = logging.getLogger('timeline')

CueChangeCallback = Callable[[str, Cue], None]
StateChangeCallback = Callable[[PlaybackState], None]


def resolve_current_cue(cues: List[Cue], elapsed: float) -> Optional[Cue]:
    """
    Find the cue active at the given elapsed time.

    Scans in list order and returns the cue just before the first cue that
    starts after `elapsed`, or the last cue if none does. The list is not
    assumed to be sorted.
    """
    for i, cue in enumerate(cues):
        if cue.start > elapsed:
            return cues[i - 1] if i > 0 else None
    return cues[-1] if cues else None


class TimelineEngine:
    """
    Subtitle timeline playback engine.

    Owns a logical clock derived from a monotonic time source. While playing,
    the engine keeps exactly one frame requested from its scheduler; each frame
    resolves the elapsed time to a cue and notifies on_cue_change when the
    active cue changes.
    """

    def __init__(
        self,
        cues: List[Cue],
        scheduler: Optional[FrameScheduler] = None,
        clock: Callable[[], float] = time.monotonic,
        on_cue_change: Optional[CueChangeCallback] = None,
    ):
        self._cues: List[Cue] = list(cues)
        self.scheduler: FrameScheduler = scheduler or ManualFrameScheduler()
        self._clock = clock

        # Clock state
        self.is_playing: bool = False
        self._clock_origin: float = 0.0
        self._paused_elapsed: Optional[float] = None

        self._frame_handle: Optional[object] = None
        self._current_cue: Optional[Cue] = None
        self._destroyed: bool = False

        # Callbacks
        self._on_cue_change: Optional[CueChangeCallback] = on_cue_change
        self._on_state_change: Optional[StateChangeCallback] = None

    def set_callbacks(
        self,
        on_cue_change: Optional[CueChangeCallback] = None,
        on_state_change: Optional[StateChangeCallback] = None
    ):
        """Set callback functions for timeline events."""
        self._on_cue_change = on_cue_change
        self._on_state_change = on_state_change

    # === Read-only state ===

    @property
    def cues(self) -> List[Cue]:
        return list(self._cues)

    @property
    def current_cue(self) -> Optional[Cue]:
        """Cue resolved on the most recent tick."""
        return self._current_cue

    @property
    def elapsed(self) -> float:
        """Elapsed time in seconds on the logical clock."""
        if self.is_playing:
            return self._clock() - self._clock_origin
        return self._paused_elapsed if self._paused_elapsed is not None else 0.0

    @property
    def state(self) -> PlaybackState:
        if self._destroyed:
            return PlaybackState.DESTROYED
        if self.is_playing:
            return PlaybackState.PLAYING
        if self._paused_elapsed is not None:
            return PlaybackState.PAUSED
        return PlaybackState.STOPPED

    # === Playback control ===

    def play(self):
        """Start playback with the clock origin at now."""
        if self._check_destroyed("play") or self.is_playing:
            return

        self.is_playing = True
        self._clock_origin = self._clock()
        logger.info(f"Playing ({len(self._cues)} cues)")
        self._notify_state_change()
        self._restart_loop()

    def pause(self):
        """Freeze the clock at the current elapsed time."""
        if self._check_destroyed("pause") or not self.is_playing:
            return

        self._paused_elapsed = self._clock() - self._clock_origin
        self._cancel_frame()
        self.is_playing = False
        logger.info(f"Paused at {self._paused_elapsed:.3f}s")
        self._notify_state_change()

    def resume(self):
        """Continue from the elapsed time recorded by the last pause or seek."""
        if self._check_destroyed("resume") or self.is_playing:
            return
        if self._paused_elapsed is None:
            logger.debug("Resume ignored: nothing to resume from")
            return

        self.is_playing = True
        self._clock_origin = self._clock() - self._paused_elapsed
        logger.info(f"Resumed at {self._paused_elapsed:.3f}s")
        self._notify_state_change()
        self._restart_loop()

    def replay(self):
        """Pause, then play again with a fresh clock origin."""
        self.pause()
        self.play()

    def seek(self, value: float, unit: TimeUnit = TimeUnit.SECONDS):
        """
        Move the clock to a position and resolve the cue there immediately.

        Args:
            value: Position in the given unit
            unit: TimeUnit.SECONDS or TimeUnit.MILLISECONDS
        """
        if self._check_destroyed("seek"):
            return

        seconds = unit.to_seconds(value)
        now = self._clock()
        self._clock_origin = now - seconds
        self._paused_elapsed = seconds
        logger.info(f"Seeked to {seconds:.3f}s")

        self._cancel_frame()
        if self.is_playing:
            self._tick()
        else:
            self._resolve(seconds)

    def set_time_second(self, seconds: float):
        """Seek to a position in seconds."""
        self.seek(seconds, TimeUnit.SECONDS)

    def set_time_millisecond(self, milliseconds: float):
        """Seek to a position in milliseconds."""
        self.seek(milliseconds, TimeUnit.MILLISECONDS)

    def destroy(self):
        """Stop the loop and release the cue list and callbacks."""
        if self._destroyed:
            return

        self._cancel_frame()
        self.is_playing = False
        self._destroyed = True
        self._notify_state_change()

        self._cues = []
        self._current_cue = None
        self._paused_elapsed = None
        self._clock_origin = 0.0
        self._on_cue_change = None
        self._on_state_change = None
        logger.info("Destroyed")

    # === Lookup ===

    def resolve_current_cue(self, elapsed: float) -> Optional[Cue]:
        """Cue active at `elapsed` seconds, or None."""
        return resolve_current_cue(self._cues, elapsed)

    def get_status(self) -> Dict[str, Any]:
        """Get current timeline status for broadcasting."""
        current = self._current_cue
        return {
            "state": self.state.value,
            "elapsed": round(self.elapsed, 3),
            "cue_count": len(self._cues),
            "current_index": cue_index(self._cues, current),
            "current_cue": current.to_dict() if current else None,
        }

    def get_cue_list(self) -> List[Dict[str, Any]]:
        """Get list of all cues as dicts."""
        return [cue.to_dict() for cue in self._cues]

    # === Private Methods ===

    def _tick(self):
        """One frame: resolve the current cue, then request the next frame."""
        self._frame_handle = None
        self._resolve(self.elapsed)
        # The callback may have re-entered seek() and already scheduled a frame
        if self.is_playing and self._frame_handle is None:
            self._frame_handle = self.scheduler.request_frame(self._tick)

    def _resolve(self, elapsed: float):
        cue = self.resolve_current_cue(elapsed)
        if cue is self._current_cue:
            return

        self._current_cue = cue
        if cue is None:
            logger.debug(f"No active cue at {elapsed:.3f}s")
            return

        logger.debug(f"Cue change at {elapsed:.3f}s: {cue.text[:40]!r}")
        if self._on_cue_change:
            try:
                self._on_cue_change(cue.text, cue)
            except Exception as e:
                logger.error(f"Error in cue change callback: {e}")

    def _restart_loop(self):
        self._cancel_frame()
        self._tick()

    def _cancel_frame(self):
        if self._frame_handle is not None:
            self.scheduler.cancel_frame(self._frame_handle)
            self._frame_handle = None

    def _check_destroyed(self, operation: str) -> bool:
        if self._destroyed:
            logger.warning(f"{operation}() called on a destroyed timeline")
        return self._destroyed

    def _notify_state_change(self):
        """Notify listeners of state change."""
        if self._on_state_change:
            self._on_state_change(self.state)
