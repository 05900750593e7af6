"""
Terminal subtitle display.
Shows the active cue with its neighbours, a progress bar and playback state.
"""

import os
import shutil
import sys
from typing import List, Optional, TextIO

from .timeline.models import Cue, cue_index


def is_vscode_terminal() -> bool:
    """Check if running in VS Code's integrated terminal."""
    return os.environ.get("TERM_PROGRAM") == "vscode"


class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    CYAN = "\033[36m"
    WHITE = "\033[37m"
    BRIGHT_GREEN = "\033[92m"
    BRIGHT_YELLOW = "\033[93m"

    # Cursor control
    HIDE_CURSOR = "\033[?25l"
    SHOW_CURSOR = "\033[?25h"
    CLEAR_LINE = "\033[2K"
    CLEAR_SCREEN = "\033[2J"
    HOME = "\033[H"


def format_timestamp(seconds: float) -> str:
    """Format seconds as HH:MM:SS,mmm."""
    if seconds < 0:
        seconds = 0.0
    total_ms = int(round(seconds * 1000))
    ms = total_ms % 1000
    total_seconds = total_ms // 1000
    s = total_seconds % 60
    total_minutes = total_seconds // 60
    m = total_minutes % 60
    h = total_minutes // 60
    return f"{h:02d}:{m:02d}:{s:02d},{ms:03d}"


class TerminalCueDisplay:
    """
    Multi-line terminal display for a subtitle track.

    Wire set_cues() as the player's cue sink and on_cue_change() as its
    change callback, then call display() once per frame.
    """

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        color: bool = True,
        context_lines: int = 1,
        vscode_mode: bool = None,
    ):
        self._stream = stream or sys.stdout
        self._color = color
        self._context_lines = context_lines
        self._cues: List[Cue] = []
        self._current: Optional[Cue] = None
        self._changes = 0
        self._initialized = False
        self._lines_used = 0
        self._vscode_mode = vscode_mode if vscode_mode is not None else is_vscode_terminal()

        try:
            self._width = shutil.get_terminal_size().columns
        except OSError:
            self._width = 80
        self._bar_width = max(10, min(40, self._width - 30))

        # Enable ANSI on Windows
        if sys.platform == "win32" and stream is None:
            os.system("")

    def _c(self, code: str) -> str:
        return code if self._color else ""

    def set_cues(self, cues: List[Cue]):
        """Receive the parsed cue list."""
        self._cues = list(cues)
        self._current = None

    def on_cue_change(self, text: str, cue: Cue):
        """Track the active cue."""
        self._current = cue
        self._changes += 1

    @property
    def current_cue(self) -> Optional[Cue]:
        return self._current

    @property
    def total_duration(self) -> float:
        return max((cue.end for cue in self._cues), default=0.0)

    def render_lines(self, elapsed: float, state: str = "playing") -> List[str]:
        """Build the display lines for the given clock position."""
        lines = []
        dim, reset = self._c(Colors.DIM), self._c(Colors.RESET)

        header = f"{self._c(Colors.CYAN)}{self._c(Colors.BOLD)}# SRT Player{reset}"
        lines.append(f"{header} {dim}[{state.upper()}]{reset}")
        lines.append(f"{dim}{'─' * min(50, self._width - 2)}{reset}")

        index = cue_index(self._cues, self._current)
        if index < 0:
            lines.append(f"{dim}(no active cue){reset}")
        else:
            first = max(0, index - self._context_lines)
            last = min(len(self._cues), index + self._context_lines + 1)
            for i in range(first, last):
                cue = self._cues[i]
                text = cue.text.replace("\n", " / ")
                if i == index:
                    marker = f"{self._c(Colors.BRIGHT_YELLOW)}{self._c(Colors.BOLD)}>"
                    lines.append(f"{marker} {text}{reset}")
                else:
                    lines.append(f"{dim}  {text}{reset}")

        total = self.total_duration
        fraction = max(0.0, min(1.0, elapsed / total)) if total > 0 else 0.0
        filled = int(fraction * self._bar_width)
        bar = "█" * filled + "░" * (self._bar_width - filled)
        lines.append(f"{dim}{'─' * min(50, self._width - 2)}{reset}")
        lines.append(
            f"{self._c(Colors.BRIGHT_GREEN)}{bar}{reset} "
            f"{format_timestamp(elapsed)} / {format_timestamp(total)}"
        )
        lines.append(f"{dim}Cue {index + 1}/{len(self._cues)}  changes={self._changes}{reset}")
        return lines

    def display(self, elapsed: float, state: str = "playing"):
        """Redraw the display in place."""
        if self._vscode_mode:
            self._stream.write(Colors.HOME)
        elif self._initialized:
            self._stream.write(f"\033[{self._lines_used}A")

        lines = self.render_lines(elapsed, state)
        for line in lines:
            self._stream.write(f"{Colors.CLEAR_LINE}{line}\n")
        self._stream.flush()
        self._lines_used = len(lines)
        self._initialized = True

    def clear(self):
        """Clean up display."""
        if self._vscode_mode:
            self._stream.write(Colors.CLEAR_SCREEN)
            self._stream.write(Colors.HOME)
        elif self._initialized:
            for _ in range(self._lines_used):
                self._stream.write(f"{Colors.CLEAR_LINE}\n")
            self._stream.write(f"\033[{self._lines_used}A")

        self._stream.write(Colors.SHOW_CURSOR)
        self._stream.flush()


def format_cue_list(cues: List[Cue]) -> str:
    """Plain-text listing of cues, one block per cue."""
    blocks = []
    for i, cue in enumerate(cues, start=1):
        blocks.append(f"{i}\n{format_timestamp(cue.start)} --> {format_timestamp(cue.end)}\n{cue.text}")
    return "\n\n".join(blocks)
