"""
Context manager for measuring a call made by hand.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from ..monitoring.registry import Registry, get_registry
from .measurement import CallMeasurement
from .status import status_for_exception

logger = logging.getLogger(__name__)


@contextmanager
def track_call(
    method: str,
    url: str,
    registry: Optional[Registry] = None,
) -> Iterator[CallMeasurement]:
    """
    Measure the call made inside the ``with`` block.

    The measurement is always finalized. If the block raises and no result
    was recorded yet, the exception is classified into ``ipc.status`` before
    it propagates.

    Args:
        method: HTTP method
        url: Request URL
        registry: Registry to record into (global registry if None)

    Yields:
        CallMeasurement for the call

    Example:
        ```python
        with track_call("GET", url) as measurement:
            response = session.get(url)
            measurement.record_response(response.status_code)
        ```
    """
    measurement = CallMeasurement(registry or get_registry(), method, url)
    try:
        yield measurement
    except BaseException as e:
        if not measurement.has_result():
            status = status_for_exception(e)
            logger.debug("Call %s %s failed with %s", method, url, status.value)
            measurement.record_error(status)
        raise
    finally:
        measurement.finalize()
