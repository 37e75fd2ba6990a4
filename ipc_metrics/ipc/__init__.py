"""
Outbound call instrumentation.

This module provides the per-call measurement, endpoint path extraction,
outcome classification and the aiohttp integration.
"""

from .measurement import CallMeasurement
from .path import path_from_url
from .status import status_for_exception, status_for_http_code
from .tags import (
    IPC_CLIENT_CALL,
    IPC_TAG_KEYS,
    OWNER,
    IpcAttempt,
    IpcResult,
    IpcStatus,
    IpcTagKey,
)
from .tracing import create_trace_config
from .tracking import track_call

__all__ = [
    "CallMeasurement",
    "path_from_url",
    "status_for_exception",
    "status_for_http_code",
    "IPC_CLIENT_CALL",
    "IPC_TAG_KEYS",
    "OWNER",
    "IpcAttempt",
    "IpcResult",
    "IpcStatus",
    "IpcTagKey",
    "create_trace_config",
    "track_call",
]
