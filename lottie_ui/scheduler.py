from __future__ import annotations

from collections import deque
import threading
from typing import Callable


class UIScheduler:
    """Bounded hand-off queue that moves callbacks onto the UI thread.

    Worker threads `post` callbacks; the UI thread runs them from `drain`.
    Callbacks run outside the lock so they may post follow-up work. Posts
    marked `required` (future completions) are never refused, so the cap only
    applies to ordinary work.
    """

    def __init__(self, max_pending: int = 4096) -> None:
        if max_pending <= 0:
            raise ValueError("max_pending must be > 0")
        self._max_pending = max_pending
        self._queue: deque[Callable[[], None]] = deque()
        self._lock = threading.Lock()

    def post(self, callback: Callable[[], None], *, required: bool = False) -> None:
        with self._lock:
            if not required and len(self._queue) >= self._max_pending:
                raise RuntimeError(f"ui scheduler queue is full ({self._max_pending} pending callbacks)")
            self._queue.append(callback)

    def drain(self, max_callbacks: int | None = None) -> int:
        if max_callbacks is not None and max_callbacks <= 0:
            raise ValueError("max_callbacks must be > 0")
        ran = 0
        while max_callbacks is None or ran < max_callbacks:
            with self._lock:
                if not self._queue:
                    break
                callback = self._queue.popleft()
            callback()
            ran += 1
        return ran

    def pending_count(self) -> int:
        with self._lock:
            return len(self._queue)
