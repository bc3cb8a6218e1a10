# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
Staleness gate.

Decides whether enough time has passed since the last *attempt* to justify
another remote fetch. Timestamps are epoch milliseconds.
"""

import time
from typing import Callable, Optional

Clock = Callable[[], float]


def now_ms() -> float:
    """Current wall-clock time in epoch milliseconds."""
    return time.time() * 1000


def should_refresh(
    last_attempt_ms: float,
    min_interval_ms: float,
    force: bool = False,
    now: Optional[float] = None,
) -> bool:
    """True iff ``force`` or more than ``min_interval_ms`` has elapsed."""
    if force:
        return True
    current = now_ms() if now is None else now
    return current - last_attempt_ms > min_interval_ms


class StalenessGate:
    """
    Minimum-interval gate bound to a clock.

    ``claim`` checks the gate and returns the new attempt stamp in one
    synchronous step. Callers must store the stamp before their first
    await so a concurrent caller sees the window as taken.
    """

    def __init__(self, min_interval_ms: float, clock: Clock = now_ms):
        self.min_interval_ms = min_interval_ms
        self._clock = clock

    def should_refresh(self, last_attempt_ms: float, force: bool = False) -> bool:
        return should_refresh(
            last_attempt_ms, self.min_interval_ms, force, now=self._clock()
        )

    def claim(self, last_attempt_ms: float, force: bool = False) -> Optional[int]:
        """
        Return the attempt stamp to record, or None if the refresh is not due.

        The stamp never moves backwards, even if the clock does.
        """
        now = self._clock()
        if not should_refresh(last_attempt_ms, self.min_interval_ms, force, now=now):
            return None
        return int(max(now, last_attempt_ms))
