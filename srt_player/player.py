"""
SrtPlayer - one subtitle track bound to a timeline.

Parses SRT text once, hands the cue list to a renderer sink and forwards
playback control to a TimelineEngine.
"""

import logging
import time
from pathlib import Path
from typing import Callable, List, Optional, Union

from .timeline import Cue, FrameScheduler, TimeUnit, TimelineEngine, parse_srt
from .timeline.cue_parser import read_srt_file
from .timeline.timeline_engine import CueChangeCallback

logger = logging.getLogger('player')

CueSink = Callable[[List[Cue]], None]


class SrtPlayer:
    """
    Subtitle player for a single track.

    Args:
        srt_text: SRT source text
        cue_sink: Called once with the parsed cue list (e.g. to build a display)
        on_cue_change: fn(text, cue) - called when the active cue changes
        scheduler: Frame scheduler driving the timeline
        clock: Monotonic time source in seconds
    """

    @classmethod
    def init(cls, srt_text: str, **kwargs) -> 'SrtPlayer':
        """Create a player from SRT text."""
        return cls(srt_text, **kwargs)

    @classmethod
    def from_file(cls, path: Union[str, Path], encoding: str = 'utf-8-sig', **kwargs) -> 'SrtPlayer':
        """Create a player from an SRT file on disk."""
        return cls(read_srt_file(path, encoding=encoding), **kwargs)

    def __init__(
        self,
        srt_text: str,
        cue_sink: Optional[CueSink] = None,
        on_cue_change: Optional[CueChangeCallback] = None,
        scheduler: Optional[FrameScheduler] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.srt_text = srt_text
        self.engine = TimelineEngine(
            parse_srt(srt_text),
            scheduler=scheduler,
            clock=clock,
            on_cue_change=on_cue_change,
        )
        if not self.engine.cues:
            logger.warning("No valid cues found in subtitle text")
        if cue_sink:
            cue_sink(self.engine.cues)

    @property
    def cues(self) -> List[Cue]:
        return self.engine.cues

    @property
    def current_cue(self) -> Optional[Cue]:
        return self.engine.current_cue

    @property
    def is_playing(self) -> bool:
        return self.engine.is_playing

    def play(self):
        self.engine.play()

    def pause(self):
        self.engine.pause()

    def resume(self):
        self.engine.resume()

    def replay(self):
        self.engine.replay()

    def seek(self, value: float, unit: TimeUnit = TimeUnit.SECONDS):
        self.engine.seek(value, unit)

    def set_time_second(self, seconds: float):
        self.engine.set_time_second(seconds)

    def set_time_millisecond(self, milliseconds: float):
        self.engine.set_time_millisecond(milliseconds)

    def destroy(self):
        """Stop playback and drop the cue list."""
        self.engine.destroy()
        self.srt_text = ""
