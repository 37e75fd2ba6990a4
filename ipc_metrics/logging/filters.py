"""
Custom logging filters for ipc_metrics.

Outbound call URLs routinely carry credentials and tokens, so everything that
reaches a handler goes through ``SensitiveDataFilter`` first.
"""

import logging
import re
import threading
import time
from collections import defaultdict
from typing import Dict, List, Pattern, Tuple


class SensitiveDataFilter(logging.Filter):
    """Filter to mask sensitive data in log messages."""

    def __init__(self) -> None:
        """Initialize sensitive data filter."""
        super().__init__()

        self.rules: List[Tuple[Pattern[str], str]] = [
            # URLs with credentials
            (re.compile(r"([a-z][a-z0-9+.-]*://[^:/@\s]+):([^@/\s]+)@", re.IGNORECASE),
             r"\1:***MASKED***@"),
            # Secrets in query strings
            (re.compile(r"([?&;](?:api[_-]?key|token|access_token|secret|password)=)([^&#;\s]+)",
                        re.IGNORECASE),
             r"\1***MASKED***"),
            # Bearer tokens
            (re.compile(r"(bearer\s+)([a-zA-Z0-9+/=._-]{20,})", re.IGNORECASE),
             r"\1***MASKED***"),
            # key=value / key: value secrets
            (re.compile(r'((?:api[_-]?key|token|secret|password)["\s]*[:=]["\s]*)([^\s"\'&]+)',
                        re.IGNORECASE),
             r"\1***MASKED***"),
        ]

    def filter(self, record: logging.LogRecord) -> bool:
        """Filter log record to mask sensitive data."""
        try:
            message = record.getMessage()
        except (TypeError, ValueError):
            # Malformed format args; let the handler report it
            return True

        for pattern, replacement in self.rules:
            message = pattern.sub(replacement, message)

        record.msg = message
        record.args = ()
        return True


class RateLimitFilter(logging.Filter):
    """Filter to rate limit log messages."""

    def __init__(self, max_messages_per_second: float = 10.0):
        """
        Initialize rate limit filter.

        Args:
            max_messages_per_second: Maximum messages per second
        """
        super().__init__()
        self.max_messages_per_second = max_messages_per_second
        self.min_interval = 1.0 / max_messages_per_second
        self._last_log_time: Dict[str, float] = defaultdict(float)
        self._dropped_counts: Dict[str, int] = defaultdict(int)
        self._lock = threading.Lock()

    def filter(self, record: logging.LogRecord) -> bool:
        """Filter log record based on rate limits."""
        with self._lock:
            key = f"{record.name}:{record.levelname}:{record.funcName}"

            current_time = time.monotonic()
            last_time = self._last_log_time.get(key)

            if last_time is None or current_time - last_time >= self.min_interval:
                self._last_log_time[key] = current_time

                dropped = self._dropped_counts.pop(key, 0)
                if dropped > 0:
                    record.msg = (
                        f"{record.getMessage()} (dropped {dropped} similar messages)"
                    )
                    record.args = ()

                return True

            self._dropped_counts[key] += 1
            return False
