"""Runtime metrics collector for scheduler diagnostics."""

from __future__ import annotations

import math
from collections import deque

from stepclock.api.metrics import AdvanceMetrics, MetricsSnapshot


class NoopMetricsCollector:
    """No-op collector for zero-impact disabled mode."""

    def record_advance(
        self,
        delta_ms: float,
        *,
        clamped: bool,
        steps: int,
        effective_step_ms: float,
    ) -> None:
        _ = (delta_ms, clamped, steps, effective_step_ms)

    def increment_step_exception_count(self, count: int = 1) -> None:
        _ = count

    def snapshot(self) -> MetricsSnapshot:
        return MetricsSnapshot(
            last_advance=None,
            advance_count=0,
            total_steps=0,
            clamped_count=0,
            step_exception_count=0,
            rolling_delta_ms=0.0,
            rolling_frame_rate_hz=0.0,
            rolling_steps_per_advance=0.0,
        )


class MetricsCollector:
    """Small in-memory rolling metrics collector."""

    def __init__(self, *, window_size: int = 60) -> None:
        self._window_size = max(1, int(window_size))
        self._delta_window: deque[float] = deque(maxlen=self._window_size)
        self._steps_window: deque[int] = deque(maxlen=self._window_size)
        self._advance_count = 0
        self._total_steps = 0
        self._clamped_count = 0
        self._step_exception_count = 0
        self._last_advance: AdvanceMetrics | None = None

    def record_advance(
        self,
        delta_ms: float,
        *,
        clamped: bool,
        steps: int,
        effective_step_ms: float,
    ) -> AdvanceMetrics:
        delta = float(delta_ms)
        # Rolling delta window only holds finite samples.
        if math.isfinite(delta):
            self._delta_window.append(delta)
        self._steps_window.append(int(steps))
        self._advance_count += 1
        self._total_steps += int(steps)
        if clamped:
            self._clamped_count += 1
        self._last_advance = AdvanceMetrics(
            advance_index=self._advance_count - 1,
            delta_ms=delta,
            clamped=bool(clamped),
            steps=int(steps),
            effective_step_ms=float(effective_step_ms),
        )
        return self._last_advance

    def increment_step_exception_count(self, count: int = 1) -> None:
        self._step_exception_count += int(count)

    def snapshot(self) -> MetricsSnapshot:
        rolling_delta = (
            (sum(self._delta_window) / len(self._delta_window)) if self._delta_window else 0.0
        )
        rolling_rate = (1000.0 / rolling_delta) if rolling_delta > 0.0 else 0.0
        rolling_steps = (
            (sum(self._steps_window) / len(self._steps_window)) if self._steps_window else 0.0
        )
        return MetricsSnapshot(
            last_advance=self._last_advance,
            advance_count=self._advance_count,
            total_steps=self._total_steps,
            clamped_count=self._clamped_count,
            step_exception_count=self._step_exception_count,
            rolling_delta_ms=rolling_delta,
            rolling_frame_rate_hz=rolling_rate,
            rolling_steps_per_advance=rolling_steps,
        )


def create_metrics_collector(
    *, enabled: bool, window_size: int = 60
) -> MetricsCollector | NoopMetricsCollector:
    """Factory returning enabled collector or no-op implementation."""
    if not enabled:
        return NoopMetricsCollector()
    return MetricsCollector(window_size=window_size)
