"""
Configuration management for ipc_metrics.

This module provides configuration models and loading from files and
environment variables.
"""

from .loader import ConfigLoader, load_config
from .models import (
    GlobalConfig,
    LoggingConfig,
    LogLevel,
    MetricBackend,
    MetricsConfig,
)

__all__ = [
    "ConfigLoader",
    "load_config",
    "GlobalConfig",
    "LoggingConfig",
    "LogLevel",
    "MetricBackend",
    "MetricsConfig",
]
