"""
Retry executor.

Runs a zero-argument operation until it succeeds, until the error classifier
marks a failure as non-transient, or until the call's deadline elapses.
Retries are unbounded in count and bounded only by elapsed time.
"""

import functools
import time
from collections.abc import Callable, Iterable
from typing import Any, Optional, TypeVar

from resilient_provisioning.config.schemas import RetryConfig
from resilient_provisioning.domain.base.ports import LoggingPort
from resilient_provisioning.domain.errors import DeadlineExceededError, ErrorKind, OperationError
from resilient_provisioning.domain.resilience import Clock, Deadline, RetryPolicy
from resilient_provisioning.infrastructure.resilience.backoff import Sleep, WaitDescriptor
from resilient_provisioning.infrastructure.resilience.classifier import ErrorClassifier

T = TypeVar("T")


class RetryExecutor:
    """
    Blocking retry loop with incremental backoff.

    Guarantees:
    - at least one attempt is made, even with a deadline already in the past;
    - no attempt starts once the deadline is reached (an attempt in flight
      finishes);
    - non-transient errors propagate on first occurrence;
    - transient errors only add latency unless the deadline runs out, in
      which case ``DeadlineExceededError`` wrapping the last error is raised.
    """

    def __init__(
        self,
        classifier: ErrorClassifier,
        logger: LoggingPort,
        retry_config: Optional[RetryConfig] = None,
        default_timeout: float = 600.0,
        sleep: Sleep = time.sleep,
        clock: Clock = time.monotonic,
    ) -> None:
        self._classifier = classifier
        self._logger = logger
        self._retry_config = retry_config or RetryConfig()
        self._default_timeout = default_timeout
        self._sleep = sleep
        self._clock = clock

    def default_policy(self, timeout: Optional[float] = None) -> RetryPolicy:
        """Build a fresh policy from configuration, bounded by ``timeout``."""
        return self._retry_config.to_policy(
            self._default_timeout if timeout is None else timeout
        )

    def run(
        self,
        operation: Callable[[], T],
        timeout: Optional[float] = None,
        policy: Optional[RetryPolicy] = None,
        extra_transient_codes: Iterable[str] = (),
        action: Optional[str] = None,
    ) -> T:
        """
        Execute ``operation`` with retries.

        Args:
            operation: Performs one attempt; returns the result or raises
            timeout: Total time budget in seconds; overrides ``policy.timeout``
            policy: Backoff policy; defaults to the configured policy
            extra_transient_codes: Call-site specific transient codes
            action: Label used in logs and errors

        Returns:
            The operation's result

        Raises:
            OperationError: First non-transient failure, with its kind set
            DeadlineExceededError: Deadline elapsed while failures were transient
        """
        if policy is None:
            policy = self.default_policy(timeout)
        elif timeout is not None:
            policy = policy.with_timeout(timeout)

        action = action or getattr(operation, "__name__", "operation")
        extra_codes = tuple(extra_transient_codes)
        deadline = Deadline.after(policy.timeout, clock=self._clock)
        wait = WaitDescriptor(policy, sleep=self._sleep)
        attempts = 0

        while True:
            attempts += 1
            try:
                result = operation()
            except Exception as e:
                error = self._classifier.resolve(e, extra_codes)
            else:
                if attempts > 1:
                    self._logger.info("%s succeeded after %d attempts", action, attempts)
                return result

            if error.kind is not ErrorKind.TRANSIENT:
                self._logger.debug(
                    "%s failed with %s error on attempt %d: %s",
                    action,
                    error.kind.value,
                    attempts,
                    error.message,
                )
                raise error

            # No attempt may start at or after the deadline
            if wait.current >= deadline.remaining():
                raise self._deadline_exceeded(action, error, attempts, deadline)

            self._logger.warning(
                "%s failed with retryable error on attempt %d (code=%s): %s. Retrying in %.1fs",
                action,
                attempts,
                error.provider_code or "-",
                error.message,
                wait.current,
            )
            wait(limit=deadline.remaining())

    def _deadline_exceeded(
        self, action: str, error: OperationError, attempts: int, deadline: Deadline
    ) -> DeadlineExceededError:
        elapsed = deadline.elapsed()
        self._logger.error(
            "%s gave up after %d attempts in %.1fs: %s", action, attempts, elapsed, error.message
        )
        return DeadlineExceededError(
            f"{action} did not succeed within {deadline.timeout:.0f}s "
            f"after {attempts} attempts; last error: {error.message}",
            last_error=error,
            attempts=attempts,
            elapsed=elapsed,
            origin=action,
        )


def retry(
    executor: RetryExecutor,
    timeout: Optional[float] = None,
    policy: Optional[RetryPolicy] = None,
    extra_transient_codes: Iterable[str] = (),
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Decorator running the wrapped function through ``executor``.

    Example:
        @retry(executor, timeout=300, extra_transient_codes=["OperationConflict"])
        def delete_volume(volume_id): ...
    """
    extra_codes = tuple(extra_transient_codes)

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            return executor.run(
                lambda: func(*args, **kwargs),
                timeout=timeout,
                policy=policy,
                extra_transient_codes=extra_codes,
                action=func.__name__,
            )

        return wrapper

    return decorator
