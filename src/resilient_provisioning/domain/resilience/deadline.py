"""Absolute deadline value object."""

import time
from collections.abc import Callable
from dataclasses import dataclass, field

Clock = Callable[[], float]


@dataclass(frozen=True)
class Deadline:
    """
    Absolute point in time after which no further attempts or polls are made.

    Deadlines are measured on a monotonic clock and cannot be extended or
    shortened once created.
    """

    started_at: float
    expires_at: float
    clock: Clock = field(default=time.monotonic, compare=False, repr=False)

    @classmethod
    def after(cls, timeout: float, clock: Clock = time.monotonic) -> "Deadline":
        """Create a deadline ``timeout`` seconds from now."""
        now = clock()
        return cls(started_at=now, expires_at=now + max(0.0, float(timeout)), clock=clock)

    @property
    def timeout(self) -> float:
        return self.expires_at - self.started_at

    def remaining(self) -> float:
        """Seconds left before the deadline, never negative."""
        return max(0.0, self.expires_at - self.clock())

    def expired(self) -> bool:
        return self.clock() >= self.expires_at

    def elapsed(self) -> float:
        return self.clock() - self.started_at
