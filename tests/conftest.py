"""
Shared test fixtures and configuration for the ipc_metrics test suite.
"""

from typing import Generator

import pytest

from ipc_metrics.logging import cleanup_logging
from ipc_metrics.monitoring import (
    ManualClock,
    MemoryMetricsBackend,
    Registry,
    RegistryConfig,
    configure_registry,
)


@pytest.fixture
def clock() -> ManualClock:
    """Manual clock starting at an arbitrary non-zero timestamp."""
    return ManualClock(1_000_000)


@pytest.fixture
def memory_backend() -> MemoryMetricsBackend:
    """In-memory backend for inspecting recorded timings."""
    return MemoryMetricsBackend()


@pytest.fixture
def registry(clock: ManualClock, memory_backend: MemoryMetricsBackend) -> Registry:
    """Registry recording into ``memory_backend`` and timed by ``clock``."""
    return Registry(RegistryConfig(backends=[memory_backend]), clock=clock)


@pytest.fixture(autouse=True)
def reset_global_state() -> Generator[None, None, None]:
    """Keep the global registry and logging handlers from leaking across tests."""
    yield
    configure_registry(None)
    cleanup_logging()
