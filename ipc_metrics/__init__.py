"""
Metrics for outbound network calls.

This package times each outbound call attempt made by a client and records
it under the ``ipc.client.call`` metric, tagged with the normalized endpoint
path, HTTP method and status, outcome and retry attempt.

Features:
- Low-cardinality endpoint paths extracted from arbitrary URLs
- Per-attempt measurements with immutable, copy-on-write identifiers
- Outcome classification for HTTP status codes and client exceptions
- aiohttp ``TraceConfig`` integration and a ``track_call`` context manager
- In-memory, Prometheus and console backends
- Configuration via pydantic models, YAML/JSON files and environment variables
"""

from .bootstrap import configure
from .config import GlobalConfig, LoggingConfig, MetricBackend, MetricsConfig, load_config
from .exceptions import BackendError, ConfigurationError, IpcMetricsError
from .ipc import (
    IPC_CLIENT_CALL,
    CallMeasurement,
    IpcAttempt,
    IpcResult,
    IpcStatus,
    IpcTagKey,
    create_trace_config,
    path_from_url,
    status_for_exception,
    status_for_http_code,
    track_call,
)
from .monitoring import (
    Id,
    ManualClock,
    MemoryMetricsBackend,
    Registry,
    RegistryConfig,
    SystemClock,
    configure_registry,
    get_registry,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "configure",
    # Configuration
    "GlobalConfig",
    "LoggingConfig",
    "MetricBackend",
    "MetricsConfig",
    "load_config",
    # Exceptions
    "IpcMetricsError",
    "ConfigurationError",
    "BackendError",
    # Instrumentation
    "IPC_CLIENT_CALL",
    "CallMeasurement",
    "IpcAttempt",
    "IpcResult",
    "IpcStatus",
    "IpcTagKey",
    "create_trace_config",
    "path_from_url",
    "status_for_exception",
    "status_for_http_code",
    "track_call",
    # Registry
    "Id",
    "ManualClock",
    "MemoryMetricsBackend",
    "Registry",
    "RegistryConfig",
    "SystemClock",
    "configure_registry",
    "get_registry",
]
