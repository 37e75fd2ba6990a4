"""
Per-attempt measurement of an outbound call.

A ``CallMeasurement`` is created when a request starts, collects outcome
tags while the request runs, and is finalized once to record the call
duration in the registry.
"""

from __future__ import annotations

from typing import Dict, Union

from ..monitoring.ids import Id
from ..monitoring.registry import Registry
from .path import path_from_url
from .status import status_for_http_code
from .tags import (
    IPC_CLIENT_CALL,
    OWNER,
    UNKNOWN_STATUS_CODE,
    IpcAttempt,
    IpcResult,
    IpcStatus,
    IpcTagKey,
)


class CallMeasurement:
    """
    Timing and outcome tags for one outbound call attempt.

    Owned by a single call flow; not safe for concurrent mutation. Every tag
    setter swaps in a new identifier, so identifiers already handed to the
    registry are never affected by later updates.

    Example:
        ```python
        measurement = CallMeasurement(registry, "GET", "https://api.example.com/v1/items?page=2")
        measurement.record_attempt(0, final=False)
        measurement.record_status_code(200)
        measurement.record_success()
        measurement.finalize()
        ```
    """

    def __init__(self, registry: Registry, method: str, url: str) -> None:
        """
        Start measuring a call.

        Args:
            registry: Registry supplying the clock and receiving the timing
            method: HTTP method of the request
            url: Request URL; only its path is kept
        """
        self._registry = registry
        self._start = registry.clock.nanos()
        self._id = registry.new_id(
            IPC_CLIENT_CALL,
            {
                IpcTagKey.OWNER.value: OWNER,
                IpcTagKey.ENDPOINT.value: path_from_url(url),
                IpcTagKey.HTTP_METHOD.value: method,
                IpcTagKey.HTTP_STATUS.value: UNKNOWN_STATUS_CODE,
            },
        )

    @property
    def registry(self) -> Registry:
        return self._registry

    @property
    def start(self) -> int:
        """Start timestamp in nanoseconds, from the registry clock."""
        return self._start

    @property
    def id(self) -> Id:
        return self._id

    @property
    def tags(self) -> Dict[str, str]:
        return self._id.tags

    def record_status_code(self, status_code: int) -> None:
        """Set ``http.status``."""
        self._id = self._id.with_tag(IpcTagKey.HTTP_STATUS.value, str(status_code))

    def record_success(self) -> None:
        """Mark the call as successful."""
        self._id = self._id.with_tags({
            IpcTagKey.RESULT.value: IpcResult.SUCCESS.value,
            IpcTagKey.STATUS.value: IpcStatus.SUCCESS.value,
        })

    def record_error(self, error: Union[str, IpcStatus]) -> None:
        """
        Mark the call as failed.

        Args:
            error: Classification label for ``ipc.status``, e.g. an
                ``IpcStatus``; not a raw exception message
        """
        label = error.value if isinstance(error, IpcStatus) else str(error)
        self._id = self._id.with_tags({
            IpcTagKey.RESULT.value: IpcResult.FAILURE.value,
            IpcTagKey.STATUS.value: label,
        })

    def record_attempt(self, attempt_number: int, final: bool) -> None:
        """
        Record retry metadata.

        Args:
            attempt_number: Zero-based attempt number
            final: Whether no further attempt will follow
        """
        self._id = self._id.with_tags({
            IpcTagKey.ATTEMPT.value: IpcAttempt.for_attempt(attempt_number).value,
            IpcTagKey.ATTEMPT_FINAL.value: "true" if final else "false",
        })

    def record_response(self, status_code: int) -> None:
        """Record the status code and the success or failure it implies."""
        self.record_status_code(status_code)
        status = status_for_http_code(status_code)
        if status is IpcStatus.SUCCESS:
            self.record_success()
        else:
            self.record_error(status)

    def has_result(self) -> bool:
        """Whether success or failure has been recorded."""
        return IpcTagKey.RESULT.value in self.tags

    def finalize(self) -> None:
        """
        Record the elapsed time under the current tags.

        Calling it again records another timing with whatever tags are
        current at that point.
        """
        duration = self._registry.clock.nanos() - self._start
        registry = self._registry
        registry.config.ipc_timer_record(registry, self._id, duration)

    def __repr__(self) -> str:
        return f"CallMeasurement({self._id})"
