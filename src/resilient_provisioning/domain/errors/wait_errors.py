"""Wait-specific outcomes raised by the retry executor and the state poller."""

from collections.abc import Iterable
from typing import Any, Optional

from .operation_error import (
    FAILED_TO_REACH_TARGET_STATUS,
    WAIT_TIMEOUT_MSG,
    ErrorKind,
    OperationError,
)


class FailStateReachedError(OperationError):
    """The awaited resource entered a state from which the target is unreachable."""

    def __init__(self, resource_id: str, state: Any, snapshot: Any = None) -> None:
        super().__init__(
            f"Resource {resource_id} failed to reach target status. "
            + FAILED_TO_REACH_TARGET_STATUS % (state,),
            kind=ErrorKind.FATAL,
        )
        self.resource_id = resource_id
        self.state = state
        self.snapshot = snapshot


class DeadlineExceededError(OperationError):
    """
    The deadline elapsed before the operation could complete.

    Distinguishable from a plain operation failure: the last error observed,
    if any, is kept as the cause.
    """

    def __init__(
        self,
        message: str,
        *,
        last_error: Optional[BaseException] = None,
        attempts: int = 0,
        elapsed: float = 0.0,
        origin: Optional[str] = None,
    ) -> None:
        provider_code = last_error.provider_code if isinstance(last_error, OperationError) else None
        super().__init__(
            message,
            kind=ErrorKind.FATAL,
            provider_code=provider_code,
            cause=last_error,
            origin=origin,
        )
        self.last_error = last_error
        self.attempts = attempts
        self.elapsed = elapsed


class WaitTimeoutError(DeadlineExceededError):
    """A state wait ran out of time; carries the last observation for diagnosis."""

    def __init__(
        self,
        resource_id: str,
        action: str,
        timeout: float,
        last_observed: Any,
        expected: Iterable[Any],
        *,
        attempts: int = 0,
        elapsed: float = 0.0,
        last_error: Optional[BaseException] = None,
    ) -> None:
        self.expected = sorted(str(value) for value in expected)
        super().__init__(
            (
                WAIT_TIMEOUT_MSG
                % (resource_id, action, int(timeout), last_observed, self.expected, "")
            ).rstrip(),
            last_error=last_error,
            attempts=attempts,
            elapsed=elapsed,
        )
        self.resource_id = resource_id
        self.last_observed = last_observed
