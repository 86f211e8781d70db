"""
Backoff wait descriptors.

A wait descriptor is a callable built from a ``RetryPolicy``: each call
sleeps the current delay and advances it toward ``max_wait``. The same
primitive paces both the retry executor and the state poller.
"""

import random
import time
from collections.abc import Callable
from typing import Optional

from resilient_provisioning.domain.resilience import RetryPolicy

Sleep = Callable[[float], None]


class WaitDescriptor:
    """
    Stateful backoff owned by a single call.

    Not thread-safe and never shared between concurrent operations; every
    call builds its own descriptor.
    """

    def __init__(
        self,
        policy: RetryPolicy,
        sleep: Sleep = time.sleep,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.policy = policy
        self._sleep = sleep
        self._rng = rng or random.Random()
        self._current = policy.initial_wait
        self.waits = 0
        self.total_slept = 0.0

    @property
    def current(self) -> float:
        """Delay the next call will sleep, before jitter and limits."""
        return self._current

    def _jittered(self, delay: float) -> float:
        ratio = self.policy.jitter_ratio
        if ratio <= 0:
            return delay
        delay = delay * (1.0 + self._rng.uniform(-ratio, ratio))
        # Jitter never shortens a wait below the policy's first wait
        return max(delay, self.policy.initial_wait)

    def __call__(self, limit: Optional[float] = None) -> float:
        """
        Sleep the current delay and advance it.

        Args:
            limit: Upper bound for this sleep, typically the time left before
                the caller's deadline

        Returns:
            Seconds actually slept
        """
        delay = self._jittered(self._current)
        if self.policy.max_wait is not None:
            delay = min(delay, self.policy.max_wait)
        if limit is not None:
            delay = max(0.0, min(delay, limit))

        if delay > 0:
            self._sleep(delay)
        self.waits += 1
        self.total_slept += delay
        self._current = self.policy.next_wait(self._current)
        return delay


def build_wait(policy: RetryPolicy, sleep: Sleep = time.sleep) -> WaitDescriptor:
    """Build a wait descriptor for ``policy``."""
    return WaitDescriptor(policy, sleep=sleep)


def incremental_wait(
    initial_wait: float, increment: float, sleep: Sleep = time.sleep
) -> WaitDescriptor:
    """Wait descriptor growing linearly and without a cap (bounded by the caller's deadline)."""
    policy = RetryPolicy(initial_wait=initial_wait, increment=increment, timeout=0)
    return WaitDescriptor(policy, sleep=sleep)


def exponential_wait(
    initial_wait: float,
    growth_factor: float,
    max_wait: float,
    jitter_ratio: float = 0.0,
    sleep: Sleep = time.sleep,
) -> WaitDescriptor:
    """Wait descriptor growing geometrically up to ``max_wait`` with optional jitter."""
    policy = RetryPolicy(
        initial_wait=initial_wait,
        growth_factor=growth_factor,
        max_wait=max_wait,
        jitter_ratio=jitter_ratio,
        timeout=0,
    )
    return WaitDescriptor(policy, sleep=sleep)
