"""
Frame schedulers for driving the timeline.

The timeline engine asks for exactly one future tick at a time and cancels it
on pause/seek/destroy. A scheduler only has to provide those two primitives.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional

logger = logging.getLogger('scheduler')

FrameCallback = Callable[[], None]


class FrameScheduler(ABC):
    """Base class for "next frame" scheduling primitives."""

    @abstractmethod
    def request_frame(self, callback: FrameCallback) -> object:
        """Schedule callback for the next frame and return a cancel handle."""
        pass

    @abstractmethod
    def cancel_frame(self, handle: object) -> None:
        """Cancel a pending frame. Unknown or already-fired handles are ignored."""
        pass


class AsyncioFrameScheduler(FrameScheduler):
    """
    Schedules frames on an asyncio event loop at a fixed target rate.

    Args:
        fps: Target frames per second
        loop: Event loop to use. Defaults to the running loop at first request.
    """

    def __init__(self, fps: float = 60.0, loop: Optional[asyncio.AbstractEventLoop] = None):
        if fps <= 0:
            raise ValueError(f"fps must be positive, got: {fps}")
        self.fps = fps
        self.interval = 1.0 / fps
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def request_frame(self, callback: FrameCallback) -> asyncio.TimerHandle:
        return self.loop.call_later(self.interval, callback)

    def cancel_frame(self, handle: object) -> None:
        if isinstance(handle, asyncio.Handle):
            handle.cancel()


class ManualFrameScheduler(FrameScheduler):
    """
    Scheduler that only fires frames when told to.

    Useful for headless playback and tests: call run_frame() to deliver
    the callbacks that were pending at that moment.
    """

    def __init__(self):
        self._pending: Dict[int, FrameCallback] = {}
        self._next_handle = 0
        self.frames_run = 0

    @property
    def pending(self) -> int:
        """Number of frame callbacks waiting to run."""
        return len(self._pending)

    def request_frame(self, callback: FrameCallback) -> int:
        self._next_handle += 1
        self._pending[self._next_handle] = callback
        return self._next_handle

    def cancel_frame(self, handle: object) -> None:
        self._pending.pop(handle, None)

    def run_frame(self) -> int:
        """
        Run every callback pending at call time.

        Callbacks requested while running wait for the next frame.

        Returns:
            Number of callbacks run
        """
        ran = 0
        for handle in list(self._pending):
            # A callback may cancel a later one in the same frame
            callback = self._pending.pop(handle, None)
            if callback is None:
                continue
            callback()
            ran += 1
        self.frames_run += 1
        return ran
