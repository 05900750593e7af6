"""
SRT Player
Synchronizes SRT subtitle cues to a playback clock.
"""

from .player import SrtPlayer
from .timeline import Cue, TimelineEngine, TimeUnit, parse_srt

__all__ = [
    'SrtPlayer',
    'Cue',
    'TimelineEngine',
    'TimeUnit',
    'parse_srt',
]

__version__ = "0.1.0"
