"""Step-clock runtime support modules."""

from stepclock.runtime.config import load_scheduler_config
from stepclock.runtime.debug_config import DebugConfig, load_debug_config
from stepclock.runtime.logging import configure_logging, get_logger, setup_logging
from stepclock.runtime.metrics import (
    MetricsCollector,
    NoopMetricsCollector,
    create_metrics_collector,
)

__all__ = [
    "DebugConfig",
    "MetricsCollector",
    "NoopMetricsCollector",
    "configure_logging",
    "create_metrics_collector",
    "get_logger",
    "load_debug_config",
    "load_scheduler_config",
    "setup_logging",
]
