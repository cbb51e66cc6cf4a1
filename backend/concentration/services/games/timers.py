import heapq
import itertools
from typing import Callable, List, Tuple

from concentration import socketio


class TimerHandle:
    """Cancellable reference to a scheduled callback."""

    def __init__(self) -> None:
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.fired)


class BackgroundScheduler:
    """Runs delayed callbacks on Socket.IO background tasks.

    Callbacks run inside an app context. A cancelled handle never fires.
    """

    def __init__(self, app) -> None:
        self.app = app

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle()

        def _worker():
            socketio.sleep(delay)
            if handle.cancelled:
                return
            handle.fired = True
            with self.app.app_context():
                try:
                    callback()
                except Exception:
                    self.app.logger.exception('[timer-error] callback failed')

        socketio.start_background_task(_worker)
        return handle


class ManualScheduler:
    """Scheduler driven by explicit ``advance`` calls.

    Used under TESTING so timer-driven transitions are deterministic.
    """

    def __init__(self, app=None) -> None:
        self.app = app
        self.now = 0.0
        self._queue: List[Tuple[float, int, TimerHandle, Callable[[], None]]] = []
        self._seq = itertools.count()

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle()
        heapq.heappush(self._queue, (self.now + delay, next(self._seq), handle, callback))
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for _, _, handle, _ in self._queue if handle.active)

    def advance(self, seconds: float) -> None:
        """Move the clock forward, firing every callback that falls due."""
        target = self.now + seconds
        while self._queue and self._queue[0][0] <= target:
            due, _, handle, callback = heapq.heappop(self._queue)
            self.now = due
            if handle.cancelled:
                continue
            handle.fired = True
            callback()
        self.now = target


def create_scheduler(app):
    if app.config.get('TESTING') and not app.config.get('ENABLE_SCHEDULER_IN_TESTS'):
        return ManualScheduler(app)
    return BackgroundScheduler(app)
