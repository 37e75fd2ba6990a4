"""
Exception types for ipc_metrics.

The instrumentation core (path extraction, call measurements, status
classification) never raises. These exceptions cover the surrounding
machinery: loading configuration and building metrics backends.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union


class IpcMetricsError(Exception):
    """
    Base exception for all ipc_metrics errors.

    Attributes:
        message: Human-readable error message
        details: Additional error details as keyword arguments
    """

    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details = kwargs


class ConfigurationError(IpcMetricsError):
    """
    Raised when configuration cannot be loaded or saved.

    Attributes:
        path: Configuration file involved in the failure (if any)
    """

    def __init__(
        self,
        message: str,
        path: Optional[Union[str, Path]] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.path = Path(path) if path is not None else None


class BackendError(IpcMetricsError):
    """Raised when a metrics backend cannot be created."""

    def __init__(
        self, message: str, backend_type: Optional[str] = None, **kwargs: Any
    ) -> None:
        super().__init__(message, **kwargs)
        self.backend_type = backend_type
