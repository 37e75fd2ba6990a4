"""
aiohttp integration.

Attach the trace config returned by ``create_trace_config`` to a
``ClientSession`` and every request made through it is measured. Retry
metadata is picked up from the per-request trace context:

```python
session = aiohttp.ClientSession(trace_configs=[create_trace_config()])
for attempt in range(3):
    ctx = {"attempt": attempt, "final": attempt == 2}
    async with session.get(url, trace_request_ctx=ctx) as response:
        ...
```

``final`` counts only when it is ``True`` or the string ``"true"`` in any case.

One request yields one measurement. Redirects are followed inside it, so the
endpoint comes from the URL the request started with while the status is
that of the last response.
"""

import logging
from collections.abc import Mapping
from types import SimpleNamespace
from typing import Any, Optional

import aiohttp

from ..monitoring.registry import Registry, get_registry
from .measurement import CallMeasurement
from .status import status_for_exception

logger = logging.getLogger(__name__)

_CTX_ATTR = "ipc_measurement"


def _record_attempt(measurement: CallMeasurement, request_ctx: Any) -> None:
    """Copy attempt metadata from a ``trace_request_ctx`` mapping, if any."""
    if not isinstance(request_ctx, Mapping) or "attempt" not in request_ctx:
        return
    try:
        attempt = int(request_ctx["attempt"])
    except (TypeError, ValueError):
        logger.debug("Ignoring non-integer attempt %r", request_ctx["attempt"])
        return
    final = request_ctx.get("final", False)
    if isinstance(final, str):
        final = final.strip().lower() == "true"
    measurement.record_attempt(attempt, final is True)


def create_trace_config(registry: Optional[Registry] = None) -> aiohttp.TraceConfig:
    """
    Build an ``aiohttp.TraceConfig`` that measures every request.

    Args:
        registry: Registry to record into (global registry at request time if None)

    Returns:
        Trace config for ``aiohttp.ClientSession(trace_configs=[...])``
    """
    trace_config = aiohttp.TraceConfig()

    async def on_request_start(
        session: aiohttp.ClientSession,
        ctx: SimpleNamespace,
        params: aiohttp.TraceRequestStartParams,
    ) -> None:
        measurement = CallMeasurement(registry or get_registry(), params.method, str(params.url))
        _record_attempt(measurement, getattr(ctx, "trace_request_ctx", None))
        setattr(ctx, _CTX_ATTR, measurement)

    async def on_request_end(
        session: aiohttp.ClientSession,
        ctx: SimpleNamespace,
        params: aiohttp.TraceRequestEndParams,
    ) -> None:
        measurement: Optional[CallMeasurement] = getattr(ctx, _CTX_ATTR, None)
        if measurement is None:
            return
        measurement.record_response(params.response.status)
        measurement.finalize()
        delattr(ctx, _CTX_ATTR)

    async def on_request_exception(
        session: aiohttp.ClientSession,
        ctx: SimpleNamespace,
        params: aiohttp.TraceRequestExceptionParams,
    ) -> None:
        measurement: Optional[CallMeasurement] = getattr(ctx, _CTX_ATTR, None)
        if measurement is None:
            return
        measurement.record_error(status_for_exception(params.exception))
        measurement.finalize()
        delattr(ctx, _CTX_ATTR)

    trace_config.on_request_start.append(on_request_start)
    trace_config.on_request_end.append(on_request_end)
    trace_config.on_request_exception.append(on_request_exception)

    return trace_config
