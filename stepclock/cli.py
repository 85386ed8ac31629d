"""Replay frame deltas through a fixed-step scheduler."""

from __future__ import annotations

import argparse
import json
import math
import sys
from pathlib import Path

from stepclock.api.errors import InvalidDeltaError, SchedulerConfigError
from stepclock.api.scheduler import StepSchedulerConfig
from stepclock.runtime.bootstrap import build_scheduler_from_env
from stepclock.runtime.config import load_scheduler_config
from stepclock.runtime.logging import get_logger, setup_logging
from stepclock.runtime.metrics import MetricsCollector

_LOG = get_logger("stepclock.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stepclock",
        description="Replay frame deltas (ms) and print the fixed steps due for each.",
    )
    parser.add_argument("deltas", nargs="*", help="Frame deltas in milliseconds; 'inf' is allowed.")
    parser.add_argument(
        "--deltas-file",
        type=Path,
        default=None,
        help="File with one delta per line; blank lines and '#' comments are skipped.",
    )
    parser.add_argument("--step-ms", type=float, default=None, help="Fixed step duration in ms.")
    parser.add_argument(
        "--rate-hz",
        type=float,
        default=None,
        help="Fixed step rate; ignored when --step-ms is given.",
    )
    parser.add_argument(
        "--max-delta-ms",
        type=float,
        default=None,
        help="Largest delta accepted by one advance.",
    )
    parser.add_argument(
        "--stabilization-factor",
        type=float,
        default=None,
        help="Cadence stabilization blend weight in [0, 1]; 0 disables it.",
    )
    parser.add_argument("--json", action="store_true", help="Emit one JSON object per advance.")
    parser.add_argument("--summary", action="store_true", help="Print totals after the replay.")
    return parser


def _parse_delta(text: str) -> float:
    try:
        return float(text.strip())
    except ValueError as exc:
        raise InvalidDeltaError(f"delta is not a number: {text!r}") from exc


def _collect_deltas(args: argparse.Namespace) -> list[float]:
    values = [_parse_delta(item) for item in args.deltas]
    if args.deltas_file is not None:
        for line in args.deltas_file.read_text(encoding="utf-8").splitlines():
            content = line.split("#", 1)[0].strip()
            if content:
                values.append(_parse_delta(content))
    return values


def _resolve_config(args: argparse.Namespace) -> StepSchedulerConfig:
    base = load_scheduler_config()
    max_delta_ms = base.max_delta_ms if args.max_delta_ms is None else args.max_delta_ms
    factor = (
        base.stabilization_factor
        if args.stabilization_factor is None
        else args.stabilization_factor
    )
    if args.step_ms is None and args.rate_hz is not None:
        return StepSchedulerConfig.from_rate(
            args.rate_hz,
            max_delta_ms=max_delta_ms,
            stabilization_factor=factor,
        )
    return StepSchedulerConfig(
        step_ms=base.step_ms if args.step_ms is None else args.step_ms,
        max_delta_ms=max_delta_ms,
        stabilization_factor=factor,
    )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging()

    try:
        config = _resolve_config(args)
        deltas = _collect_deltas(args)
    except (SchedulerConfigError, InvalidDeltaError, OSError) as exc:
        print(f"stepclock: {exc}", file=sys.stderr)
        return 2

    metrics = MetricsCollector(window_size=max(1, len(deltas)))
    scheduler = build_scheduler_from_env(config=config, metrics=metrics)
    _LOG.debug("replay_start advances=%d step_ms=%.4f", len(deltas), config.step_ms)

    for index, delta in enumerate(deltas):
        try:
            steps = scheduler.advance(delta)
        except InvalidDeltaError as exc:
            print(f"stepclock: advance {index}: {exc}", file=sys.stderr)
            return 2
        state = scheduler.snapshot()
        if args.json:
            print(
                json.dumps(
                    {
                        "index": index,
                        "delta_ms": delta if math.isfinite(delta) else None,
                        "clamped": delta > config.max_delta_ms,
                        "steps": steps,
                        "total_steps": state.total_steps,
                        "effective_step_ms": state.effective_step_ms,
                    },
                    ensure_ascii=True,
                )
            )
        else:
            print(f"{index} {delta:g} {steps} {state.total_steps}")

    if args.summary:
        snap = metrics.snapshot()
        state = scheduler.snapshot()
        print(
            f"advances={snap.advance_count} total_steps={state.total_steps} "
            f"clamped={snap.clamped_count} elapsed_ms={state.total_elapsed_ms:.3f} "
            f"effective_step_ms={state.effective_step_ms:.4f}"
        )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
