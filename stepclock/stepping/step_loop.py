"""Fixed-step loop implementation."""

from __future__ import annotations

import logging
from time import perf_counter

from stepclock.api.loop import SystemSpec
from stepclock.api.metrics import AdvanceMetricsSink
from stepclock.api.scheduler import SchedulerState, StepSchedulerConfig
from stepclock.runtime.metrics import NoopMetricsCollector
from stepclock.stepping.scheduler import FixedStepScheduler

_LOG = logging.getLogger("stepclock.loop")


class RuntimeStepLoop:
    """Ordered system loop driven by a fixed-step scheduler."""

    def __init__(
        self,
        *,
        config: StepSchedulerConfig | None = None,
        metrics: AdvanceMetricsSink | None = None,
    ) -> None:
        self._systems: list[SystemSpec] = []
        self._started_ids: set[str] = set()
        self._cached_order: tuple[SystemSpec, ...] | None = None
        self._metrics: AdvanceMetricsSink = (
            metrics if metrics is not None else NoopMetricsCollector()
        )
        self._scheduler = FixedStepScheduler(self._run_step, config=config, metrics=self._metrics)
        self._step_ms = self._scheduler.config.step_ms
        self._step_timings_ms: dict[str, float] = {}

    @property
    def config(self) -> StepSchedulerConfig:
        return self._scheduler.config

    def add_system(self, spec: SystemSpec) -> None:
        """Register system spec."""
        normalized_id = spec.system_id.strip()
        if not normalized_id:
            raise ValueError("system_id must not be empty")
        if any(existing.system_id == normalized_id for existing in self._systems):
            raise ValueError(f"duplicate system_id: {normalized_id}")
        self._systems.append(
            SystemSpec(system_id=normalized_id, system=spec.system, order=spec.order)
        )
        self._cached_order = None

    def start(self) -> None:
        """Start systems in ascending order."""
        for spec in self._ordered_systems():
            if spec.system_id in self._started_ids:
                continue
            spec.system.start()
            self._started_ids.add(spec.system_id)

    def advance(self, delta_ms: float) -> int:
        """Run one frame and return number of fixed steps executed."""
        self._step_timings_ms = {}
        steps = self._scheduler.advance(delta_ms)
        self._log_step_timings(steps=steps, timings_ms=self._step_timings_ms)
        return steps

    def shutdown(self) -> None:
        """Shutdown started systems in reverse order."""
        for spec in reversed(self._ordered_systems()):
            if spec.system_id not in self._started_ids:
                continue
            spec.system.shutdown()
            self._started_ids.remove(spec.system_id)

    def snapshot(self) -> SchedulerState:
        return self._scheduler.snapshot()

    def _run_step(self) -> None:
        for spec in self._ordered_systems():
            if spec.system_id not in self._started_ids:
                continue
            started_at = perf_counter()
            try:
                spec.system.step(self._step_ms)
            finally:
                elapsed_ms = (perf_counter() - started_at) * 1000.0
                self._step_timings_ms[spec.system_id] = (
                    self._step_timings_ms.get(spec.system_id, 0.0) + elapsed_ms
                )

    def _ordered_systems(self) -> tuple[SystemSpec, ...]:
        if self._cached_order is not None:
            return self._cached_order
        self._cached_order = tuple(
            sorted(
                self._systems,
                key=lambda item: (item.order, item.system_id),
            )
        )
        return self._cached_order

    @staticmethod
    def _log_step_timings(*, steps: int, timings_ms: dict[str, float]) -> None:
        if not timings_ms or not _LOG.isEnabledFor(logging.DEBUG):
            return
        top = sorted(timings_ms.items(), key=lambda item: item[1], reverse=True)[:3]
        top_text = ", ".join(f"{system_id}={elapsed_ms:.3f}ms" for system_id, elapsed_ms in top)
        _LOG.debug("step_timing steps=%d systems=%s", steps, top_text)
