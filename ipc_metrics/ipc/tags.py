"""
Tag vocabulary for outbound call metrics.

The string values are what metrics consumers query on; they must not change.
"""

from enum import Enum

IPC_CLIENT_CALL = "ipc.client.call"
"""Metric name of the outbound call timer."""

OWNER = "ipc-metrics-py"
"""Value of the ``owner`` tag: identifies this library as the producer."""

UNKNOWN_STATUS_CODE = "-1"


class IpcTagKey(str, Enum):
    """Tag keys set on outbound call measurements."""

    OWNER = "owner"
    ENDPOINT = "ipc.endpoint"
    HTTP_METHOD = "http.method"
    HTTP_STATUS = "http.status"
    RESULT = "ipc.result"
    STATUS = "ipc.status"
    ATTEMPT = "ipc.attempt"
    ATTEMPT_FINAL = "ipc.attempt.final"


class IpcResult(str, Enum):
    """Overall outcome of a call."""

    SUCCESS = "success"
    FAILURE = "failure"


class IpcAttempt(str, Enum):
    """Retry attempt bucket."""

    INITIAL = "initial"
    SECOND = "second"
    THIRD_UP = "third_up"

    @classmethod
    def for_attempt(cls, attempt_number: int) -> "IpcAttempt":
        """
        Bucket a zero-based attempt number.

        Everything other than 0 and 1 lands in ``THIRD_UP``, negative numbers
        included.
        """
        if attempt_number == 0:
            return cls.INITIAL
        if attempt_number == 1:
            return cls.SECOND
        return cls.THIRD_UP


class IpcStatus(str, Enum):
    """Classification of a call outcome, reported in ``ipc.status``."""

    SUCCESS = "success"
    BAD_REQUEST = "bad_request"
    UNEXPECTED_ERROR = "unexpected_error"
    CONNECTION_ERROR = "connection_error"
    UNAVAILABLE = "unavailable"
    THROTTLED = "throttled"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"
    ACCESS_DENIED = "access_denied"


IPC_TAG_KEYS = tuple(key.value for key in IpcTagKey)
