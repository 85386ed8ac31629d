"""Lock-serialized scheduler wrapper for multi-threaded hosts."""

from __future__ import annotations

from threading import Lock

from stepclock.api.scheduler import SchedulerState, StepScheduler, StepSchedulerConfig


class LockedStepScheduler:
    """Serializes ``advance`` and ``snapshot`` on one wrapped scheduler.

    Step callbacks run while the lock is held, so a callback must not call
    back into the same wrapper.
    """

    def __init__(self, inner: StepScheduler) -> None:
        self._inner = inner
        self._lock = Lock()

    @property
    def config(self) -> StepSchedulerConfig:
        return self._inner.config

    def advance(self, delta_ms: float) -> int:
        with self._lock:
            return self._inner.advance(delta_ms)

    def snapshot(self) -> SchedulerState:
        with self._lock:
            return self._inner.snapshot()
