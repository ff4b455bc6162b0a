"""
Delayed callbacks for the bot's reply.

The delay is cosmetic (lets a UI show the player's move before the bot answers). Nothing here guarantees the callback
still makes sense when it fires: the game session checks that itself (generation counter).
"""

import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

Callback = Callable[[], None]


class ScheduledTask(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def schedule(self, delay: float, callback: Callback) -> ScheduledTask: ...


class TimerScheduler:
    """Fire-and-forget: every callback runs on its own threading.Timer."""

    def schedule(self, delay: float, callback: Callback) -> threading.Timer:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return timer


@dataclass
class DeferredTask:
    due: float
    callback: Callback
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


class DeferredScheduler:
    """
    Collects callbacks and only runs them when asked to (run_due), in the caller's thread.
    ---

    Used where the owner polls anyway (the game service runs due bot moves on every request), so no other thread
    ever touches a session or the database.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._tasks: list[DeferredTask] = []

    def schedule(self, delay: float, callback: Callback) -> DeferredTask:
        task = DeferredTask(due=self._clock() + delay, callback=callback)
        self._tasks.append(task)
        return task

    @property
    def pending(self) -> int:
        return sum(1 for task in self._tasks if not task.cancelled)

    def run_due(self, now: Optional[float] = None) -> int:
        """Run every task whose delay has passed. Returns the number of callbacks that ran."""
        now = self._clock() if now is None else now
        due = [task for task in self._tasks if task.due <= now]
        # callbacks may schedule new tasks, so detach the due ones before running them
        self._tasks = [task for task in self._tasks if task.due > now]
        ran = 0
        for task in due:
            if task.cancelled:
                continue
            task.callback()
            ran += 1
        return ran

    def run_all(self) -> int:
        """Ignore the delays. Keeps going until callbacks stop scheduling new work."""
        ran = 0
        while self.pending:
            ran += self.run_due(now=float("inf"))
        return ran
