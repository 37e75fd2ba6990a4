"""
Classification of call outcomes into ``ipc.status`` labels.

Labels are coarse on purpose: they end up as tag values and must stay
low-cardinality, so raw exception messages are never used.
"""

import asyncio

import aiohttp

from .tags import IpcStatus


def status_for_http_code(status_code: int) -> IpcStatus:
    """
    Classify an HTTP response status code.

    Args:
        status_code: HTTP status code of the response

    Returns:
        ``SUCCESS`` for anything below 400, otherwise the matching failure
    """
    if status_code < 400:
        return IpcStatus.SUCCESS
    if status_code in (401, 403):
        return IpcStatus.ACCESS_DENIED
    if status_code == 429:
        return IpcStatus.THROTTLED
    if status_code < 500:
        return IpcStatus.BAD_REQUEST
    if status_code == 503:
        return IpcStatus.UNAVAILABLE
    if status_code == 504:
        return IpcStatus.TIMEOUT
    return IpcStatus.UNEXPECTED_ERROR


def status_for_exception(exc: BaseException) -> IpcStatus:
    """
    Classify an exception raised while performing a call.

    Args:
        exc: Exception raised by the transport or the caller

    Returns:
        Failure status; ``UNEXPECTED_ERROR`` when nothing more specific fits
    """
    # Timeouts first: asyncio.TimeoutError is an OSError on recent Pythons
    # and aiohttp.ServerTimeoutError is also a connection error.
    if isinstance(exc, (asyncio.TimeoutError, aiohttp.ServerTimeoutError)):
        return IpcStatus.TIMEOUT
    if isinstance(exc, asyncio.CancelledError):
        return IpcStatus.CANCELLED
    if isinstance(exc, aiohttp.ClientResponseError):
        # Too many redirects carries the last 3xx status
        status = status_for_http_code(exc.status)
        if status is IpcStatus.SUCCESS:
            return IpcStatus.UNEXPECTED_ERROR
        return status
    if isinstance(exc, (aiohttp.ClientConnectionError, OSError)):
        return IpcStatus.CONNECTION_ERROR
    return IpcStatus.UNEXPECTED_ERROR
