"""
Frame Scheduling
================
A driver never loops on its own: it asks a scheduler for the next frame
and gets back a handle it can cancel. Cancelling is immediate, a cancelled
handle never fires.

Two schedulers ship with the package:
  - ManualScheduler: frames advance only when told to (headless runs, tests)
  - MatplotlibTimerScheduler (in visualization): one single-shot GUI timer
    per frame
"""

from collections import deque
from typing import Callable, Optional, Protocol


FrameCallback = Callable[[], None]


class TickHandle:
    """A single pending frame request."""

    def __init__(self, callback: FrameCallback,
                 on_cancel: Optional[Callable[[], None]] = None):
        self._callback = callback
        self._on_cancel = on_cancel
        self.cancelled = False
        self.fired = False

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)

    def cancel(self):
        if not self.pending:
            return
        self.cancelled = True
        if self._on_cancel is not None:
            self._on_cancel()

    def fire(self):
        if not self.pending:
            return
        self.fired = True
        self._callback()


class FrameScheduler(Protocol):
    def request_frame(self, callback: FrameCallback) -> TickHandle:
        ...


class ManualScheduler:
    """
    Holds frame requests until ``advance`` is called.

    Requests made while a frame is being processed land in the next frame,
    the same way a display's frame callback behaves.
    """

    def __init__(self):
        self._queue = deque()
        self.frame_count = 0

    def request_frame(self, callback: FrameCallback) -> TickHandle:
        handle = TickHandle(callback)
        self._queue.append(handle)
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for h in self._queue if h.pending)

    def advance(self, frames: int = 1) -> int:
        """Process up to ``frames`` frames. Returns how many callbacks fired."""
        fired = 0
        for _ in range(frames):
            batch = [h for h in self._queue if h.pending]
            self._queue.clear()
            if not batch:
                break
            self.frame_count += 1
            for handle in batch:
                if handle.pending:
                    handle.fire()
                    fired += 1
        return fired

    def run_until_idle(self, max_frames: Optional[int] = None) -> int:
        """Advance frames until nothing is pending. Returns frames processed."""
        start = self.frame_count
        while self.pending:
            if max_frames is not None and self.frame_count - start >= max_frames:
                break
            self.advance()
        return self.frame_count - start
