"""Frame schedulers: the seam between the game loop and its host.

A scheduler holds at most one meaningful pending callback per game; the
controller cancels the old handle before issuing a new one.
"""

from __future__ import annotations

import itertools
import logging
import threading
from typing import Callable, Dict, Optional

FrameCallback = Callable[[], None]

logger = logging.getLogger(__name__)


class FrameScheduler:
    def schedule(self, callback: FrameCallback) -> int:
        raise NotImplementedError

    def cancel(self, handle: Optional[int]) -> None:
        raise NotImplementedError

    def close(self) -> None:
        pass


class ManualScheduler(FrameScheduler):
    """Runs callbacks only when ``run_pending``/``run_frames`` is called."""

    def __init__(self):
        self._handles = itertools.count(1)
        self._pending: Dict[int, FrameCallback] = {}
        self.closed = False

    def schedule(self, callback: FrameCallback) -> int:
        handle = next(self._handles)
        self._pending[handle] = callback
        return handle

    def cancel(self, handle: Optional[int]) -> None:
        if handle is not None:
            self._pending.pop(handle, None)

    def close(self) -> None:
        self._pending.clear()
        self.closed = True

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def run_pending(self) -> int:
        """Fire the callbacks pending right now; ones they schedule wait for the next call."""
        batch = list(self._pending.items())
        self._pending.clear()
        for _, callback in batch:
            callback()
        return len(batch)

    def run_frames(self, count: int, on_frame: Optional[Callable[[], None]] = None) -> int:
        ran = 0
        for _ in range(count):
            if not self._pending:
                break
            if on_frame is not None:
                on_frame()
            self.run_pending()
            ran += 1
        return ran


class SocketIOScheduler(FrameScheduler):
    """One background task per game, firing the pending callback every interval.

    ``socketio`` is a Flask-SocketIO instance (anything with
    ``start_background_task`` and ``sleep``). Callbacks run while holding
    ``lock`` so input handlers sharing it never interleave with a frame.
    """

    def __init__(self, socketio, interval_ms: float, lock: Optional[threading.Lock] = None):
        self._socketio = socketio
        self._interval = interval_ms / 1000.0
        self.lock = lock or threading.Lock()
        self._handles = itertools.count(1)
        self._pending = None
        self._started = False
        self._closed = False

    def schedule(self, callback: FrameCallback) -> int:
        if self._closed:
            raise RuntimeError('scheduler is closed')
        handle = next(self._handles)
        self._pending = (handle, callback)
        # one worker per game, whatever start_background_task hands back
        if not self._started:
            self._started = True
            self._socketio.start_background_task(self._run)
        return handle

    def cancel(self, handle: Optional[int]) -> None:
        pending = self._pending
        if pending is not None and pending[0] == handle:
            self._pending = None

    def close(self) -> None:
        self._closed = True
        self._pending = None

    def _run(self) -> None:
        while not self._closed:
            self._socketio.sleep(self._interval)
            with self.lock:
                pending, self._pending = self._pending, None
                if pending is None or self._closed:
                    continue
                try:
                    pending[1]()
                except Exception:
                    logger.exception('[frame] callback failed; loop stopped')
                    self._closed = True
