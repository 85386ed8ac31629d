"""Fixed-step scheduler implementation."""

from __future__ import annotations

import logging
import math
from numbers import Real

from stepclock.api.errors import InvalidDeltaError
from stepclock.api.metrics import AdvanceMetricsSink
from stepclock.api.scheduler import SchedulerState, StepCallback, StepSchedulerConfig
from stepclock.runtime.metrics import NoopMetricsCollector
from stepclock.stepping.stabilizer import CadenceStabilizer, round_half_up

_LOG = logging.getLogger("stepclock.scheduler")


def validate_delta(delta_ms: object) -> float:
    """Return ``delta_ms`` as float or raise ``InvalidDeltaError``.

    ``math.inf`` is accepted; it stands for an unbounded stall and is
    clamped by the scheduler.
    """
    if isinstance(delta_ms, bool) or not isinstance(delta_ms, Real):
        raise InvalidDeltaError(f"delta_ms must be a real number, got {delta_ms!r}")
    delta = float(delta_ms)
    if math.isnan(delta):
        raise InvalidDeltaError("delta_ms must not be NaN")
    if delta < 0.0:
        raise InvalidDeltaError(f"delta_ms must be >= 0, got {delta!r}")
    return delta


class FixedStepScheduler:
    """Turns irregular frame deltas into a deterministic count of fixed steps.

    Every call accumulates the clamped delta and emits however many steps
    bring the running total up to ``round_half_up(elapsed / effective_step)``.
    With stabilization enabled the effective step duration follows the
    host's frame cadence (see ``CadenceStabilizer``); whenever it changes the
    step position reached so far is kept as the new origin, so the due-step
    target never moves backwards.

    Not thread-safe. The host loop must serialize calls, or wrap the
    instance in ``LockedStepScheduler``.
    """

    def __init__(
        self,
        on_step: StepCallback | None = None,
        *,
        config: StepSchedulerConfig | None = None,
        metrics: AdvanceMetricsSink | None = None,
        trace: bool = False,
    ) -> None:
        if on_step is not None and not callable(on_step):
            raise TypeError("on_step must be callable")
        self._config = config if config is not None else StepSchedulerConfig()
        self._on_step = on_step
        self._metrics: AdvanceMetricsSink = (
            metrics if metrics is not None else NoopMetricsCollector()
        )
        self._trace = bool(trace)
        self._stabilizer = CadenceStabilizer(
            self._config.step_ms,
            self._config.stabilization_factor,
        )
        self._total_elapsed_ms = 0.0
        self._total_steps = 0
        self._effective_step_ms = self._config.step_ms
        self._origin_elapsed_ms = 0.0
        self._origin_steps = 0.0
        _LOG.debug(
            "scheduler_created step_ms=%.4f max_delta_ms=%.3f stabilization_factor=%.3f",
            self._config.step_ms,
            self._config.max_delta_ms,
            self._config.stabilization_factor,
        )

    @property
    def config(self) -> StepSchedulerConfig:
        return self._config

    @property
    def metrics(self) -> AdvanceMetricsSink:
        return self._metrics

    def snapshot(self) -> SchedulerState:
        return SchedulerState(
            total_elapsed_ms=self._total_elapsed_ms,
            total_steps=self._total_steps,
            effective_step_ms=self._effective_step_ms,
        )

    def advance(self, delta_ms: float) -> int:
        """Consume one frame delta, run the step callback, return the step count."""
        delta = validate_delta(delta_ms)
        max_delta_ms = self._config.max_delta_ms
        clamped = delta > max_delta_ms
        frame_ms = max_delta_ms if clamped else delta

        effective_step_ms = self._stabilizer.adapt(self._effective_step_ms, frame_ms)
        if effective_step_ms != self._effective_step_ms:
            self._origin_steps = self._step_position()
            self._origin_elapsed_ms = self._total_elapsed_ms
            self._effective_step_ms = effective_step_ms

        self._total_elapsed_ms += frame_ms
        target = round_half_up(self._step_position())
        steps = target - self._total_steps
        self._total_steps = target

        self._metrics.record_advance(
            delta,
            clamped=clamped,
            steps=steps,
            effective_step_ms=effective_step_ms,
        )
        if clamped:
            _LOG.debug("advance_clamped delta_ms=%s max_delta_ms=%.3f", delta, max_delta_ms)
        if self._trace and _LOG.isEnabledFor(logging.DEBUG):
            _LOG.debug(
                "advance delta_ms=%.3f steps=%d total_steps=%d effective_step_ms=%.4f",
                frame_ms,
                steps,
                self._total_steps,
                effective_step_ms,
            )
        self._emit(steps)
        return steps

    def _step_position(self) -> float:
        elapsed_since_origin = self._total_elapsed_ms - self._origin_elapsed_ms
        return self._origin_steps + elapsed_since_origin / self._effective_step_ms

    def _emit(self, steps: int) -> None:
        if self._on_step is None:
            return
        for _ in range(steps):
            try:
                self._on_step()
            except Exception:
                self._metrics.increment_step_exception_count(1)
                raise
