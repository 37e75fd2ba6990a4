"""
Logging system for ipc_metrics.

This module provides structured logging with console and rotating file
outputs and masking of credentials found in URLs.
"""

from .filters import RateLimitFilter, SensitiveDataFilter
from .formatters import ColoredFormatter, StructuredFormatter
from .manager import LoggingManager, cleanup_logging, get_logger, setup_logging

__all__ = [
    "LoggingManager",
    "setup_logging",
    "get_logger",
    "cleanup_logging",
    "StructuredFormatter",
    "ColoredFormatter",
    "SensitiveDataFilter",
    "RateLimitFilter",
]
