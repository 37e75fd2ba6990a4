"""
Metrics backends that receive recorded timings.

A backend only stores or exports what the registry hands it; aggregation and
export formats are the backend's own business.
"""

import logging
import re
import time
import weakref
from abc import ABC, abstractmethod
from collections import defaultdict, deque
from dataclasses import dataclass, field
from threading import Lock
from typing import Any, Callable, Deque, Dict, List, Mapping, Optional, Sequence, Tuple

import prometheus_client

from ..config.models import MetricBackend
from ..exceptions import BackendError

logger = logging.getLogger(__name__)

# Histograms already registered, per Prometheus registry and exported name
_histograms = weakref.WeakKeyDictionary()
_histograms_lock = Lock()


@dataclass
class MetricPoint:
    """Individual timing data point."""
    name: str
    value: float
    timestamp: float
    tags: Dict[str, str] = field(default_factory=dict)


class MetricsBackendInterface(ABC):
    """Abstract interface for metrics backends."""

    @abstractmethod
    def record_timer(self, name: str, value: float, tags: Optional[Dict[str, str]] = None) -> None:
        """Record a duration in seconds."""


class MemoryMetricsBackend(MetricsBackendInterface):
    """In-memory metrics backend for testing and development."""

    def __init__(self, max_points: int = 10000):
        """
        Initialize memory metrics backend.

        Args:
            max_points: Maximum number of metric points to store per name
        """
        self.max_points = max_points
        self.metrics: Dict[str, Deque[MetricPoint]] = defaultdict(lambda: deque(maxlen=max_points))
        self.lock = Lock()

    def record_timer(self, name: str, value: float, tags: Optional[Dict[str, str]] = None) -> None:
        """Record timer metric."""
        with self.lock:
            point = MetricPoint(
                name=name,
                value=value,
                timestamp=time.time(),
                tags=dict(tags or {}),
            )
            self.metrics[name].append(point)

    def get_metrics(self, name: Optional[str] = None) -> Dict[str, List[MetricPoint]]:
        """Get stored metrics."""
        with self.lock:
            if name:
                return {name: list(self.metrics.get(name, []))}
            return {k: list(v) for k, v in self.metrics.items()}

    def find(self, name: str, **tags: str) -> List[MetricPoint]:
        """Points recorded under ``name`` whose tags include ``tags``."""
        with self.lock:
            return [
                point for point in self.metrics.get(name, [])
                if all(point.tags.get(key) == value for key, value in tags.items())
            ]

    def get_summary(self) -> Dict[str, Any]:
        """Get metrics summary."""
        with self.lock:
            summary = {}
            for name, points in self.metrics.items():
                if not points:
                    continue

                values = [p.value for p in points]
                summary[name] = {
                    "count": len(values),
                    "sum": sum(values),
                    "avg": sum(values) / len(values),
                    "min": min(values),
                    "max": max(values),
                    "latest": values[-1],
                }

            return summary

    def clear(self) -> None:
        """Drop all stored points."""
        with self.lock:
            self.metrics.clear()


def _sanitize(name: str) -> str:
    """Map a dotted metric or tag name onto the Prometheus name charset."""
    sanitized = re.sub(r"[^a-zA-Z0-9_]", "_", name)
    if sanitized and sanitized[0].isdigit():
        sanitized = f"_{sanitized}"
    return sanitized


class PrometheusMetricsBackend(MetricsBackendInterface):
    """
    Prometheus metrics backend.

    Each metric name becomes one histogram. Prometheus needs a fixed label set
    per metric, so labels are taken from ``label_names`` when configured and
    from the first recording otherwise. Missing tags are exported as empty
    labels; tags outside the label set are dropped.

    Histograms are shared by every backend writing to the same Prometheus
    registry, so a backend built after another one has already exported a
    metric keeps feeding the existing histogram and its label set.
    """

    def __init__(
        self,
        registry: Optional[prometheus_client.CollectorRegistry] = None,
        label_names: Optional[Mapping[str, Sequence[str]]] = None,
        namespace: str = "",
    ) -> None:
        """
        Initialize Prometheus metrics backend.

        Args:
            registry: Prometheus registry to use
            label_names: Fixed tag keys per metric name
            namespace: Prefix for exported metric names
        """
        self.registry = registry or prometheus_client.REGISTRY
        self.label_names = {name: tuple(labels) for name, labels in (label_names or {}).items()}
        self.namespace = namespace
        self.histograms: Dict[str, Tuple[Any, Tuple[str, ...]]] = {}

    def _get_or_create_histogram(self, name: str, tags: Dict[str, str]) -> Tuple[Any, Tuple[str, ...]]:
        """Get the registry's histogram for ``name``, registering it on first use."""
        metric_name = f"{_sanitize(name)}_seconds"
        if self.namespace:
            metric_name = f"{self.namespace}_{metric_name}"

        with _histograms_lock:
            entry = self.histograms.get(name)
            if entry is not None:
                return entry

            histograms = _histograms.setdefault(self.registry, {})
            entry = histograms.get(metric_name)
            if entry is None:
                labels = self.label_names.get(name) or tuple(sorted(tags))
                histogram = prometheus_client.Histogram(
                    metric_name,
                    f"Timer metric for {name}",
                    labelnames=[_sanitize(label) for label in labels],
                    registry=self.registry,
                )
                entry = (histogram, labels)
                histograms[metric_name] = entry
            elif name in self.label_names and self.label_names[name] != entry[1]:
                logger.warning(
                    "Histogram %s already registered with labels %s, ignoring %s",
                    metric_name,
                    list(entry[1]),
                    list(self.label_names[name]),
                )
            self.histograms[name] = entry
            return entry

    def record_timer(self, name: str, value: float, tags: Optional[Dict[str, str]] = None) -> None:
        """Record timer metric."""
        tags = tags or {}
        histogram, labels = self._get_or_create_histogram(name, tags)

        dropped = set(tags) - set(labels)
        if dropped:
            logger.debug("Dropping tags %s not in label set of %s", sorted(dropped), name)

        if labels:
            histogram.labels(**{_sanitize(label): tags.get(label, "") for label in labels}).observe(value)
        else:
            histogram.observe(value)


class ConsoleMetricsBackend(MetricsBackendInterface):
    """Console metrics backend for debugging."""

    def __init__(self, print_func: Callable[[str], Any] = print):
        """
        Initialize console metrics backend.

        Args:
            print_func: Function to use for printing metrics
        """
        self.print_func = print_func

    def record_timer(self, name: str, value: float, tags: Optional[Dict[str, str]] = None) -> None:
        """Record timer metric."""
        tags_str = f" {tags}" if tags else ""
        self.print_func(f"TIMER {name}: {value:.6f}s{tags_str}")


def create_metrics_backend(backend_type: MetricBackend, **kwargs: Any) -> MetricsBackendInterface:
    """
    Create metrics backend of specified type.

    Args:
        backend_type: Type of metrics backend
        **kwargs: Backend-specific configuration

    Returns:
        Configured metrics backend

    Raises:
        BackendError: If the backend type is unknown
    """
    try:
        backend_type = MetricBackend(backend_type)
    except ValueError as e:
        raise BackendError(f"Unsupported backend type: {backend_type}", backend_type=str(backend_type)) from e

    if backend_type == MetricBackend.MEMORY:
        return MemoryMetricsBackend(max_points=kwargs.get("max_points", 10000))
    elif backend_type == MetricBackend.PROMETHEUS:
        return PrometheusMetricsBackend(
            registry=kwargs.get("registry"),
            label_names=kwargs.get("label_names"),
            namespace=kwargs.get("namespace", ""),
        )
    else:
        return ConsoleMetricsBackend(print_func=kwargs.get("print_func", print))
