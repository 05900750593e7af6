"""
Data models for the subtitle timeline.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class TimeUnit(Enum):
    SECONDS = "seconds"
    MILLISECONDS = "milliseconds"

    def to_seconds(self, value: float) -> float:
        """Convert a value expressed in this unit to seconds."""
        if self is TimeUnit.MILLISECONDS:
            return value / 1000
        return float(value)


class PlaybackState(Enum):
    STOPPED = "stopped"
    PLAYING = "playing"
    PAUSED = "paused"
    DESTROYED = "destroyed"


@dataclass(frozen=True, eq=False)
class Cue:
    """
    A single subtitle cue.

    Cues compare by identity: two cues with the same timing and text parsed
    from different blocks are still distinct transitions on the timeline.
    """
    start: float        # seconds from start
    end: float          # seconds from start, not required to exceed start
    text: str = ""      # may contain embedded newlines

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start": self.start,
            "end": self.end,
            "text": self.text,
        }


def cue_index(cues, cue: Optional[Cue]) -> int:
    """Position of a cue in a cue list by identity, or -1."""
    if cue is None:
        return -1
    for i, candidate in enumerate(cues):
        if candidate is cue:
            return i
    return -1
