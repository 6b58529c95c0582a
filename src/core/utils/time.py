"""
Time helpers.

Timestamps are UTC ISO-8601 strings with an explicit offset, so they sort
lexicographically in DynamoDB and serialize to JSON unchanged. Object keys
use unix milliseconds instead.
"""

import time
from datetime import datetime, timezone


def utc_now_iso() -> str:
    """Return current UTC time in ISO-8601 format.

    Example:
        2024-01-15T10:42:31.123456+00:00
    """
    return datetime.now(timezone.utc).isoformat()


def unix_millis() -> int:
    """Milliseconds since the epoch, as embedded in object keys."""
    return time.time_ns() // 1_000_000
