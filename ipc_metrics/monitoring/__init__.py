"""
Metrics registry for ipc_metrics.

This module provides the clock, identifiers, registry and backends
(in-memory, Prometheus, console) that call measurements record into.
"""

from .backends import (
    ConsoleMetricsBackend,
    MemoryMetricsBackend,
    MetricPoint,
    MetricsBackendInterface,
    PrometheusMetricsBackend,
    create_metrics_backend,
)
from .clock import Clock, ManualClock, SystemClock
from .ids import Id
from .registry import (
    Registry,
    RegistryConfig,
    configure_registry,
    default_ipc_timer_record,
    get_registry,
)

__all__ = [
    "Clock",
    "SystemClock",
    "ManualClock",
    "Id",
    "Registry",
    "RegistryConfig",
    "default_ipc_timer_record",
    "get_registry",
    "configure_registry",
    "MetricPoint",
    "MetricsBackendInterface",
    "MemoryMetricsBackend",
    "PrometheusMetricsBackend",
    "ConsoleMetricsBackend",
    "create_metrics_backend",
]
