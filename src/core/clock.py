from __future__ import annotations

import time
from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def monotonic() -> float:
    """Seconds from a monotonic clock, for idle-time bookkeeping."""
    return time.monotonic()
