from __future__ import annotations

import logging
import math
import random

import pytest

from stepclock.api.errors import InvalidDeltaError
from stepclock.api.scheduler import StepSchedulerConfig
from stepclock.runtime.metrics import MetricsCollector
from stepclock.stepping.scheduler import FixedStepScheduler
from stepclock.stepping.stabilizer import DEFAULT_TOLERANCE, round_half_up


def _replay(deltas: list[float], config: StepSchedulerConfig | None = None) -> list[int]:
    calls = {"count": 0}

    def on_step() -> None:
        calls["count"] += 1

    scheduler = FixedStepScheduler(on_step, config=config)
    results: list[int] = []
    for delta in deltas:
        calls["count"] = 0
        steps = scheduler.advance(delta)
        assert calls["count"] == steps
        results.append(steps)
    return results


def test_default_rate_is_one_step_per_60hz_frame() -> None:
    assert _replay([1000 / 60] * 10) == [1] * 10


def test_custom_step_duration_scales_linearly() -> None:
    assert _replay([76.0] * 10, StepSchedulerConfig(step_ms=1.0)) == [76] * 10


def test_low_frame_rate_catches_up_with_multiple_steps() -> None:
    assert _replay([1000 / 30, 1000 / 20]) == [2, 3]


def test_high_frame_rate_staggers_steps() -> None:
    assert _replay([1000 / 120] * 5) == [1, 0, 1, 0, 1]


def test_zero_delta_emits_nothing() -> None:
    assert _replay([0.0, 0.0]) == [0, 0]


def test_unbounded_delta_is_clamped_to_default_max() -> None:
    assert _replay([math.inf]) == [6]


def test_unbounded_delta_respects_raised_max() -> None:
    assert _replay([math.inf], StepSchedulerConfig(max_delta_ms=2000.0)) == [120]


def test_stabilization_absorbs_near_nominal_frame_rates() -> None:
    deltas = [1000 / 58] * 100 + [1000 / 62] * 100
    assert _replay(deltas) == [1] * 200


def test_stabilization_absorbs_jitter_around_two_steps_per_frame() -> None:
    assert _replay([1000 / 29] * 300) == [2] * 300
    assert _replay([1000 / 31] * 300) == [2] * 300


def test_disabled_stabilization_shows_rounding_drift() -> None:
    deltas = [1000 / 58] * 15 + [1000 / 62] * 32
    expected = [1] * 14 + [2] + [0] + [1] * 30 + [0]
    assert _replay(deltas, StepSchedulerConfig(stabilization_factor=0.0)) == expected


def test_disabled_stabilization_keeps_nominal_duration_and_rounding_invariant() -> None:
    config = StepSchedulerConfig(stabilization_factor=0.0)
    scheduler = FixedStepScheduler(config=config)
    rng = random.Random(11)
    for _ in range(500):
        scheduler.advance(rng.uniform(0.0, 40.0))
        state = scheduler.snapshot()
        assert state.effective_step_ms == config.step_ms
        assert state.total_steps == round_half_up(state.total_elapsed_ms / config.step_ms)


def test_stabilization_tracks_sustained_cadence() -> None:
    scheduler = FixedStepScheduler()
    for _ in range(100):
        scheduler.advance(1000 / 58)
    assert scheduler.snapshot().effective_step_ms == pytest.approx(1000 / 58, rel=1e-6)


def test_stabilization_follows_genuine_rate_changes() -> None:
    scheduler = FixedStepScheduler()
    assert [scheduler.advance(1000 / 60) for _ in range(30)] == [1] * 30
    assert [scheduler.advance(1000 / 30) for _ in range(30)] == [2] * 30

    steps = [scheduler.advance(1000 / 45) for _ in range(30)]
    assert set(steps) == {1, 2}
    assert sum(steps) == 40


def test_step_counts_are_non_negative_and_monotonic() -> None:
    config = StepSchedulerConfig()
    scheduler = FixedStepScheduler(config=config)
    rng = random.Random(3)
    choices = [0.0, 1000 / 144, 1000 / 120, 1000 / 61, 1000 / 59, 1000 / 30, 250.0, math.inf]
    bound = math.ceil(config.max_delta_ms / (config.step_ms * (1.0 - DEFAULT_TOLERANCE))) + 1
    previous = scheduler.snapshot()
    emitted = 0
    for _ in range(1000):
        steps = scheduler.advance(rng.choice(choices) * rng.uniform(0.9, 1.1))
        state = scheduler.snapshot()
        assert 0 <= steps <= bound
        assert state.total_elapsed_ms >= previous.total_elapsed_ms
        assert state.total_steps >= previous.total_steps
        emitted += steps
        previous = state
    assert emitted == previous.total_steps


@pytest.mark.parametrize("factor", [0.0, 0.2])
def test_emitted_step_time_never_overshoots_elapsed_by_a_step(factor: float) -> None:
    scheduler = FixedStepScheduler(config=StepSchedulerConfig(stabilization_factor=factor))
    simulated_ms = 0.0
    for delta in [1000 / 58] * 100 + [1000 / 62] * 100 + [1000 / 120] * 50:
        steps = scheduler.advance(delta)
        state = scheduler.snapshot()
        simulated_ms += steps * state.effective_step_ms
        assert simulated_ms - state.total_elapsed_ms <= scheduler.config.step_ms


@pytest.mark.parametrize("delta", [-1.0, -math.inf, math.nan, "16", None, True, object()])
def test_invalid_delta_is_rejected_without_mutating_state(delta: object) -> None:
    scheduler = FixedStepScheduler()
    scheduler.advance(1000 / 60)
    before = scheduler.snapshot()

    with pytest.raises(InvalidDeltaError):
        scheduler.advance(delta)  # type: ignore[arg-type]

    assert scheduler.snapshot() == before


def test_invalid_delta_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        FixedStepScheduler().advance(-0.5)


def test_integer_deltas_are_accepted() -> None:
    scheduler = FixedStepScheduler(config=StepSchedulerConfig(step_ms=10.0))
    assert scheduler.advance(30) == 3
    assert scheduler.snapshot().total_elapsed_ms == 30.0


def test_callback_failure_propagates_after_state_commit() -> None:
    metrics = MetricsCollector()

    def on_step() -> None:
        raise RuntimeError("boom")

    scheduler = FixedStepScheduler(on_step, metrics=metrics)
    with pytest.raises(RuntimeError, match="boom"):
        scheduler.advance(1000 / 30)

    assert scheduler.snapshot().total_steps == 2
    assert metrics.snapshot().step_exception_count == 1
    assert metrics.snapshot().total_steps == 2


def test_non_callable_step_callback_is_rejected() -> None:
    with pytest.raises(TypeError):
        FixedStepScheduler(on_step=42)  # type: ignore[arg-type]


def test_scheduler_records_metrics_per_advance() -> None:
    metrics = MetricsCollector(window_size=4)
    scheduler = FixedStepScheduler(metrics=metrics)
    scheduler.advance(1000 / 60)
    scheduler.advance(math.inf)

    snap = metrics.snapshot()
    assert snap.advance_count == 2
    assert snap.total_steps == 7
    assert snap.clamped_count == 1
    assert snap.last_advance is not None
    assert snap.last_advance.clamped is True
    assert snap.last_advance.steps == 6


def test_trace_logging_emits_advance_lines(caplog) -> None:
    scheduler = FixedStepScheduler(trace=True)
    with caplog.at_level(logging.DEBUG, logger="stepclock.scheduler"):
        scheduler.advance(1000 / 60)
        scheduler.advance(500.0)

    messages = [record.getMessage() for record in caplog.records]
    assert any(message.startswith("advance delta_ms=") for message in messages)
    assert any(message.startswith("advance_clamped") for message in messages)


def test_trace_disabled_skips_advance_lines(caplog) -> None:
    scheduler = FixedStepScheduler()
    with caplog.at_level(logging.DEBUG, logger="stepclock.scheduler"):
        scheduler.advance(1000 / 60)

    assert not any(record.getMessage().startswith("advance delta_ms=") for record in caplog.records)
