"""
State poller.

A single parameterized wait-for-state loop: resource types differ only in
the describe call, the accessor and their target/fail vocabularies.
"""

import time
from collections.abc import Iterable
from typing import Any, Optional

from resilient_provisioning.config.schemas import PollingConfig
from resilient_provisioning.domain.base.ports import LoggingPort
from resilient_provisioning.domain.errors import (
    DeadlineExceededError,
    ErrorKind,
    FailStateReachedError,
    OperationError,
    WaitTimeoutError,
    not_found_message,
)
from resilient_provisioning.domain.resilience import (
    AccessorSpec,
    Clock,
    Deadline,
    Describe,
    PollTarget,
    RetryPolicy,
)
from resilient_provisioning.infrastructure.resilience.accessors import as_accessor
from resilient_provisioning.infrastructure.resilience.backoff import Sleep, WaitDescriptor
from resilient_provisioning.infrastructure.resilience.classifier import ErrorClassifier

_NOTHING_OBSERVED = "<none>"


class StatePoller:
    """
    Blocks the calling thread until a resource reaches a target state.

    Each call resolves exactly once: with the snapshot that satisfied the
    target check, with ``FailStateReachedError``, with ``WaitTimeoutError``,
    or by propagating a non-transient describe failure. Transient describe
    failures only cost a poll. Snapshots are never cached across polls.
    """

    def __init__(
        self,
        classifier: ErrorClassifier,
        logger: LoggingPort,
        polling_config: Optional[PollingConfig] = None,
        default_timeout: float = 600.0,
        sleep: Sleep = time.sleep,
        clock: Clock = time.monotonic,
    ) -> None:
        self._classifier = classifier
        self._logger = logger
        self._polling = polling_config or PollingConfig()
        self._default_timeout = default_timeout
        self._sleep = sleep
        self._clock = clock

    def wait_for(
        self,
        resource_id: str,
        describe: Describe,
        accessor: AccessorSpec,
        targets: Iterable[Any] = (),
        fail_states: Iterable[Any] = (),
        timeout: Optional[float] = None,
        policy: Optional[RetryPolicy] = None,
        action: str = "WaitForState",
        delay: Optional[float] = None,
        not_found_checks: Optional[int] = None,
    ) -> Any:
        """
        Wait until ``accessor(describe(resource_id))`` is one of ``targets``.

        Args:
            resource_id: Identifier passed to ``describe``
            describe: Fetches a fresh snapshot; raising a not-found error (or
                returning ``None``) means the resource is absent. Transient
                errors and ``DeadlineExceededError`` are retried until the
                wait times out; other errors propagate
            accessor: Callable or dotted path extracting the state value
            targets: Success states; include ``DELETED`` to wait for absence;
                empty means any non-fail state is acceptable
            fail_states: States that abort the wait
            timeout: Seconds before giving up
            policy: Backoff between polls; defaults to the polling config
            action: Label used in logs and errors
            delay: Seconds to sleep before the first poll
            not_found_checks: Consecutive absences tolerated when not waiting
                for deletion

        Returns:
            The snapshot that satisfied the target check, or ``None`` when
            the wait was for deletion
        """
        timeout = self._default_timeout if timeout is None else timeout
        target = PollTarget(
            resource_id=resource_id,
            describe=describe,
            accessor=as_accessor(accessor),
            targets=targets,
            fail_states=fail_states,
            deadline=Deadline.after(timeout, clock=self._clock),
            policy=policy or self._polling.to_policy(timeout),
            action=action,
            delay=self._polling.delay if delay is None else delay,
            not_found_checks=(
                self._polling.not_found_checks if not_found_checks is None else not_found_checks
            ),
        )
        return self.wait(target)

    def wait(self, target: PollTarget) -> Any:
        """Run the poll loop for a prepared ``PollTarget``."""
        policy = target.policy or self._polling.to_policy(self._default_timeout)
        deadline = target.deadline or Deadline.after(policy.timeout, clock=self._clock)
        wait = WaitDescriptor(policy, sleep=self._sleep)

        self._logger.debug(
            "Waiting for %s %s: targets=%s fail_states=%s timeout=%.0fs",
            target.resource_id,
            target.action,
            sorted(map(str, target.targets)) or "<any>",
            sorted(map(str, target.fail_states)),
            deadline.timeout,
        )

        if target.delay > 0:
            self._sleep(min(target.delay, deadline.remaining()))

        polls = 0
        absences = 0
        last_observed: Any = _NOTHING_OBSERVED
        last_error: Optional[OperationError] = None

        while True:
            polls += 1
            snapshot: Any = None
            failed: Optional[OperationError] = None
            missing: Optional[OperationError] = None
            try:
                snapshot = target.describe(target.resource_id)
            except Exception as e:
                error = self._classifier.resolve(e)
                if error.kind is ErrorKind.NOT_FOUND:
                    missing = error
                elif error.kind is ErrorKind.TRANSIENT or isinstance(error, DeadlineExceededError):
                    failed = error
                else:
                    raise error
            absent = failed is None and (missing is not None or snapshot is None)

            if failed is not None:
                last_error = failed
                self._logger.warning(
                    "Describing %s failed on poll %d, polling again: %s",
                    target.resource_id,
                    polls,
                    failed.message,
                )
            elif absent:
                if target.waits_for_deletion:
                    self._logger.debug(
                        "%s no longer exists after %d polls", target.resource_id, polls
                    )
                    return None
                absences += 1
                last_observed = _NOTHING_OBSERVED
                last_error = missing
                if absences > target.not_found_checks:
                    raise missing or OperationError(
                        not_found_message("resource", target.resource_id),
                        kind=ErrorKind.NOT_FOUND,
                        origin=target.action,
                    )
            else:
                absences = 0
                last_error = None
                value = target.accessor(snapshot)
                last_observed = value
                if target.is_fail_state(value):
                    self._logger.error(
                        "%s entered fail state %s while waiting for %s",
                        target.resource_id,
                        value,
                        sorted(map(str, target.targets)),
                    )
                    raise FailStateReachedError(target.resource_id, value, snapshot)
                if target.is_target(value):
                    self._logger.debug(
                        "%s reached state %s after %d polls", target.resource_id, value, polls
                    )
                    return snapshot
                self._logger.debug(
                    "%s is %s, waiting for %s",
                    target.resource_id,
                    value,
                    sorted(map(str, target.targets)),
                )

            if deadline.expired():
                raise self._timeout(target, deadline, last_observed, polls, last_error)
            wait(limit=deadline.remaining())
            if deadline.expired():
                raise self._timeout(target, deadline, last_observed, polls, last_error)

    def _timeout(
        self,
        target: PollTarget,
        deadline: Deadline,
        last_observed: Any,
        polls: int,
        last_error: Optional[OperationError],
    ) -> WaitTimeoutError:
        self._logger.error(
            "Timed out waiting for %s %s after %d polls; last state %s",
            target.resource_id,
            target.action,
            polls,
            last_observed,
        )
        return WaitTimeoutError(
            target.resource_id,
            target.action,
            deadline.timeout,
            last_observed,
            target.targets,
            attempts=polls,
            elapsed=deadline.elapsed(),
            last_error=last_error,
        )
