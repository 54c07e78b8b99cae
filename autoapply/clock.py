"""Time source for the policy loop; swapped for a fake one in tests."""
from __future__ import annotations

import threading
from datetime import datetime, timezone


class Clock:
    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def sleep(self, seconds: float, stop: threading.Event) -> bool:
        """Wait up to ``seconds``; returns True if ``stop`` was set meanwhile."""
        if seconds <= 0:
            return stop.is_set()
        return stop.wait(seconds)
