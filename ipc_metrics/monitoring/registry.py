"""
Metrics registry consumed by the IPC instrumentation.

The registry supplies the clock used to time calls, builds identifiers, and
fans recorded timings out to its backends. How outbound call timings are
recorded is pluggable through ``RegistryConfig.ipc_timer_record``.
"""

import logging
from dataclasses import dataclass, field, replace
from threading import Lock
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from ..config.models import MetricsConfig
from .backends import MemoryMetricsBackend, MetricsBackendInterface, create_metrics_backend
from .clock import Clock, SystemClock
from .ids import Id

logger = logging.getLogger(__name__)

NANOS_PER_SECOND = 1_000_000_000

IpcTimerRecord = Callable[["Registry", Id, int], None]


def default_ipc_timer_record(registry: "Registry", id: Id, duration_ns: int) -> None:
    """Record an outbound call duration as a plain timer on ``registry``."""
    registry.record_timer(id, duration_ns)


@dataclass
class RegistryConfig:
    """Runtime configuration of a registry."""

    ipc_timer_record: IpcTimerRecord = default_ipc_timer_record
    common_tags: Dict[str, str] = field(default_factory=dict)
    backends: List[MetricsBackendInterface] = field(default_factory=list)


class Registry:
    """Clock, identifier factory and timer sink shared by call measurements."""

    def __init__(
        self,
        config: Optional[RegistryConfig] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        """
        Initialize registry.

        Args:
            config: Registry configuration, copied (a memory backend is used
                when it lists no backends)
            clock: Timestamp source, monotonic system clock by default
        """
        config = config or RegistryConfig()
        self._config = replace(
            config,
            common_tags=dict(config.common_tags),
            backends=list(config.backends) or [MemoryMetricsBackend()],
        )
        self._clock = clock or SystemClock()
        self._lock = Lock()
        self.enabled = True
        self.timer_count = 0
        self.error_count = 0

    @classmethod
    def from_config(
        cls,
        config: MetricsConfig,
        clock: Optional[Clock] = None,
        label_names: Optional[Mapping[str, Sequence[str]]] = None,
        **backend_kwargs: Any,
    ) -> "Registry":
        """
        Build a registry from a metrics configuration.

        Args:
            config: Metrics configuration
            clock: Timestamp source
            label_names: Fixed tag keys per metric name for label-based backends
            **backend_kwargs: Extra backend-specific settings

        Returns:
            Configured registry
        """
        backends = [
            create_metrics_backend(
                backend_type,
                max_points=config.max_points,
                label_names=label_names,
                **backend_kwargs,
            )
            for backend_type in config.backends
        ]
        registry = cls(
            RegistryConfig(common_tags=dict(config.common_tags), backends=backends),
            clock=clock,
        )
        registry.enabled = config.enabled
        return registry

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def config(self) -> RegistryConfig:
        return self._config

    @property
    def backends(self) -> List[MetricsBackendInterface]:
        return self._config.backends

    def new_id(self, name: str, tags: Optional[Mapping[str, str]] = None) -> Id:
        """Create an identifier for ``name`` carrying ``tags``."""
        return Id.of(name, tags)

    def record_timer(self, id: Id, duration_ns: int) -> None:
        """
        Record a duration under ``id`` across all backends.

        Common tags are applied underneath the identifier's own tags. A
        failing backend is logged and skipped.
        """
        if not self.enabled:
            return

        tags = dict(self._config.common_tags)
        tags.update(id.tags)
        seconds = duration_ns / NANOS_PER_SECOND

        with self._lock:
            self.timer_count += 1

        for backend in self._config.backends:
            try:
                backend.record_timer(id.name, seconds, tags)
            except Exception:
                with self._lock:
                    self.error_count += 1
                logger.warning(
                    "Metrics backend %s failed to record %s",
                    type(backend).__name__,
                    id.name,
                    exc_info=True,
                )

    def get_summary(self) -> Dict[str, Any]:
        """Get registry and backend summary."""
        summary: Dict[str, Any] = {
            "enabled": self.enabled,
            "timers_recorded": self.timer_count,
            "backend_errors": self.error_count,
        }

        for i, backend in enumerate(self._config.backends):
            get_backend_summary = getattr(backend, "get_summary", None)
            if get_backend_summary is not None:
                summary[f"backend_{i}"] = get_backend_summary()

        return summary

    def enable(self) -> None:
        """Enable metrics recording."""
        self.enabled = True

    def disable(self) -> None:
        """Disable metrics recording."""
        self.enabled = False


# Global registry instance
_global_registry: Optional[Registry] = None
_global_lock = Lock()


def get_registry() -> Registry:
    """Get global registry instance."""
    global _global_registry

    with _global_lock:
        if _global_registry is None:
            _global_registry = Registry()
        return _global_registry


def configure_registry(registry: Optional[Registry]) -> None:
    """Replace the global registry (``None`` resets it to a fresh default)."""
    global _global_registry

    with _global_lock:
        _global_registry = registry
