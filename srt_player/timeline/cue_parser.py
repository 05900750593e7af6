"""
Cue Parser for SRT subtitle text.
Turns loosely formatted SRT source into an ordered list of cues.
"""

import logging
import re
from pathlib import Path
from typing import List, Optional, Union

from .models import Cue

logger = logging.getLogger('cue_parser')

LINE_BREAK_RE = re.compile(r'\r\n|\n|\r')
BLOCK_SEPARATOR_RE = re.compile(r'\n{2,}')
SEQUENCE_INDEX_RE = re.compile(r'^\d+$', re.ASCII)
TIME_RANGE_RE = re.compile(
    r'(\d{2}):(\d{2}):(\d{2}),(\d{3})\s*-->\s*(\d{2}):(\d{2}):(\d{2}),(\d{3})',
    re.ASCII,
)


def trim_line(line: str) -> str:
    """Strip whitespace and byte order marks from both ends of a line."""
    return line.strip().strip('\ufeff').strip()


def timestamp_to_seconds(hours: str, minutes: str, seconds: str, millis: str) -> float:
    """Convert HH, MM, SS, mmm components to fractional seconds."""
    return int(hours) * 3600 + int(minutes) * 60 + int(seconds) + int(millis) / 1000


class CueParser:
    """
    Parses SRT text into cues.

    Tolerates CRLF/CR line endings, missing sequence numbers and stray
    whitespace. Blocks that cannot be parsed are skipped; the rest of the
    input is kept. Cues come back in source order, never re-sorted.
    """

    def parse(self, raw_text: Optional[str]) -> List[Cue]:
        """
        Parse SRT text.

        Args:
            raw_text: SRT source. None is treated as empty.

        Returns:
            Cues in block-encounter order (possibly empty)
        """
        if not raw_text:
            return []

        normalized = '\n'.join(trim_line(line) for line in LINE_BREAK_RE.split(raw_text))
        blocks = BLOCK_SEPARATOR_RE.split(normalized)

        cues: List[Cue] = []
        for block_number, block in enumerate(blocks, start=1):
            cue = self._parse_block(block)
            if cue is None:
                if block.strip():
                    logger.debug(f"Skipping malformed block {block_number}: {block[:40]!r}")
                continue
            cues.append(cue)

        logger.info(f"Parsed {len(cues)} cues from {len(blocks)} blocks")
        return cues

    def _parse_block(self, block: str) -> Optional[Cue]:
        lines = [line.strip() for line in block.strip().split('\n') if line.strip()]
        if len(lines) < 2:
            return None

        # Sequence number is optional
        time_idx = 1 if SEQUENCE_INDEX_RE.match(lines[0]) else 0
        match = TIME_RANGE_RE.search(lines[time_idx])
        if not match:
            return None

        groups = match.groups()
        start = timestamp_to_seconds(*groups[:4])
        end = timestamp_to_seconds(*groups[4:])
        text = '\n'.join(lines[time_idx + 1:]).strip()
        return Cue(start=start, end=end, text=text)


def parse_srt(raw_text: Optional[str]) -> List[Cue]:
    """Parse SRT text with a default parser."""
    return CueParser().parse(raw_text)


def read_srt_file(path: Union[str, Path], encoding: str = 'utf-8-sig') -> str:
    """
    Read SRT source text from disk.

    Undecodable bytes are replaced rather than failing the load.
    OSError from reading the file propagates to the caller.
    """
    filepath = Path(path)
    with open(filepath, 'r', encoding=encoding, errors='replace') as f:
        raw_text = f.read()
    logger.info(f"Loaded subtitle file: {filepath}")
    return raw_text


def load_srt_file(path: Union[str, Path], encoding: str = 'utf-8-sig') -> List[Cue]:
    """Read and parse an SRT file."""
    return parse_srt(read_srt_file(path, encoding=encoding))
