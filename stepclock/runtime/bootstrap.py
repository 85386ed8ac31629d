"""Environment-driven scheduler wiring for host processes."""

from __future__ import annotations

from collections.abc import Mapping

from stepclock.api.metrics import AdvanceMetricsSink
from stepclock.api.scheduler import StepCallback, StepSchedulerConfig
from stepclock.runtime.config import load_scheduler_config
from stepclock.runtime.debug_config import load_debug_config
from stepclock.runtime.metrics import create_metrics_collector
from stepclock.stepping.scheduler import FixedStepScheduler


def build_scheduler_from_env(
    on_step: StepCallback | None = None,
    *,
    config: StepSchedulerConfig | None = None,
    metrics: AdvanceMetricsSink | None = None,
    env: Mapping[str, str] | None = None,
) -> FixedStepScheduler:
    """Create a scheduler with config, metrics and trace taken from ``STEPCLOCK_*``.

    ``env`` replaces the process environment for every setting when given.
    Explicit ``config`` and ``metrics`` arguments win over both.
    """
    debug = load_debug_config(env=env)
    resolved_config = config if config is not None else load_scheduler_config(env=env)
    resolved_metrics = (
        metrics if metrics is not None else create_metrics_collector(enabled=debug.metrics_enabled)
    )
    return FixedStepScheduler(
        on_step,
        config=resolved_config,
        metrics=resolved_metrics,
        trace=debug.trace_enabled,
    )
