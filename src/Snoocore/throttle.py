# === NAVMAP v1 ===
# {
#   "module": "Snoocore.throttle",
#   "purpose": "Fixed-rate call scheduler shared by every endpoint of one client",
#   "sections": [
#     {"id": "throttlescheduler", "name": "ThrottleScheduler", "anchor": "class-throttlescheduler", "kind": "class"}
#   ]
# }
# === /NAVMAP ===

"""Fixed-rate call scheduler shared by every endpoint of one client.

**Model**
---------
A single counter holds "time until the next free slot" in milliseconds.  It
starts at 1, a non-zero sentinel distinct from "no delay".  Each call start
adds one throttle unit and waits for the value the counter held *before* the
increment; each completion subtracts the unit again.  Concurrent callers
therefore receive strictly increasing waits (1, 1+unit, 1+2*unit, ...) and
depart one unit apart, in the order they acquired their slot.

**Contract**
------------
- ``acquire()`` reserves a slot, sleeps outside the lock, returns the wait.
- ``release()`` returns the slot; it must run on every exit path, which
  ``slot()`` guarantees.
- Completions free capacity for future callers only; already-queued callers
  keep the wait they were given.
- No queue bound, no cancellation, no timeout.  A call that never completes
  keeps its unit on the counter indefinitely.
"""

from __future__ import annotations

import logging
import threading
import time
from contextlib import contextmanager
from typing import Callable, Iterator

logger = logging.getLogger(__name__)

INITIAL_DELAY_MS = 1


class ThrottleScheduler:
    """Thread-safe fixed-spacing scheduler for outgoing calls."""

    def __init__(
        self,
        throttle_ms: int,
        *,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the scheduler.

        Args:
            throttle_ms: Throttle unit; minimum spacing between departures.
            sleep: Blocking sleep taking seconds (injectable for tests).
        """
        if throttle_ms < 0:
            raise ValueError(f"throttle must be >= 0 ms, got {throttle_ms}")
        self.throttle_ms = throttle_ms
        self._sleep = sleep
        self._lock = threading.Lock()
        self._delay_ms = INITIAL_DELAY_MS

    @property
    def delay_ms(self) -> int:
        """Current counter value (time until the next free slot)."""
        with self._lock:
            return self._delay_ms

    def acquire(self) -> float:
        """Reserve a slot and block until it departs.

        If the wait is interrupted the slot is returned before re-raising.

        Returns:
            The wait in seconds.
        """
        with self._lock:
            wait_ms = self._delay_ms
            self._delay_ms += self.throttle_ms

        logger.debug("Throttle slot acquired", extra={"wait_ms": wait_ms})
        wait_s = wait_ms / 1000.0
        try:
            self._sleep(wait_s)
        except BaseException:
            self.release()
            raise
        return wait_s

    def release(self) -> None:
        with self._lock:
            self._delay_ms -= self.throttle_ms

    @contextmanager
    def slot(self) -> Iterator[float]:
        """Hold a slot for the duration of the block; released on every exit."""
        wait_s = self.acquire()
        try:
            yield wait_s
        finally:
            self.release()


__all__ = ["INITIAL_DELAY_MS", "ThrottleScheduler"]
