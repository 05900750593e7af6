"""
Timeline module for subtitle playback.
Provides SRT parsing, cue lookup, and frame-driven playback control.
"""

from .cue_parser import CueParser, load_srt_file, parse_srt
from .models import Cue, PlaybackState, TimeUnit
from .scheduler import AsyncioFrameScheduler, FrameScheduler, ManualFrameScheduler
from .timeline_engine import TimelineEngine, resolve_current_cue

__all__ = [
    'CueParser',
    'parse_srt',
    'load_srt_file',
    'Cue',
    'PlaybackState',
    'TimeUnit',
    'FrameScheduler',
    'AsyncioFrameScheduler',
    'ManualFrameScheduler',
    'TimelineEngine',
    'resolve_current_cue',
]
