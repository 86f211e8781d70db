"""
AWS resource handler base class.

Resource handlers combine the transport, the retry executor and the state
poller into create/read/delete operations for one resource type. Subclasses
only declare the service, the state vocabulary and the request shapes.
"""

import time
from collections.abc import Callable, Iterable
from typing import Any, ClassVar, Optional

from resilient_provisioning.config.schemas import TimeoutsConfig
from resilient_provisioning.domain.base.ports import LoggingPort
from resilient_provisioning.domain.errors import (
    DEFAULT_ERROR_MSG,
    ErrorKind,
    OperationError,
    wrap_error,
)
from resilient_provisioning.domain.resilience import Clock, Deadline
from resilient_provisioning.infrastructure.resilience import (
    ErrorClassifier,
    RetryExecutor,
    StatePoller,
    path_accessor,
)
from resilient_provisioning.providers.aws.infrastructure.aws_client import AWSClient
from resilient_provisioning.providers.aws.resource_states import ResourceStateVocabulary

# Called with the AlreadyExists error; returns the id of the existing resource
OnExists = Callable[[OperationError], str]


class ResourceHandler:
    """
    Base handler for one AWS resource type.

    Errors surfacing from the public operations are wrapped once with the
    resource id and the action; the classified error stays reachable as the
    cause.
    """

    service: ClassVar[str] = "ec2"
    vocabulary: ClassVar[Optional[ResourceStateVocabulary]] = None
    # Consecutive absences tolerated while waiting after a create; None uses the poller default
    create_not_found_checks: ClassVar[Optional[int]] = None

    def __init__(
        self,
        aws_client: AWSClient,
        classifier: ErrorClassifier,
        retry_executor: RetryExecutor,
        poller: StatePoller,
        logger: LoggingPort,
        timeouts: Optional[TimeoutsConfig] = None,
        clock: Clock = time.monotonic,
    ) -> None:
        """
        Initialize the handler with its collaborators.

        Args:
            aws_client: Transport for API operations
            classifier: Error classifier shared with executor and poller
            retry_executor: Retries transient failures of single calls
            poller: Waits for the resource to reach a state
            logger: Logging port for operation logging
            timeouts: Per-operation deadlines
            clock: Monotonic clock used for create/delete deadlines
        """
        self.aws_client = aws_client
        self._classifier = classifier
        self._retry = retry_executor
        self._poller = poller
        self._logger = logger
        self.timeouts = timeouts or TimeoutsConfig()
        self._clock = clock

    # Single calls

    def call(
        self,
        action: str,
        parameters: Optional[dict[str, Any]] = None,
        timeout: Optional[float] = None,
        extra_transient_codes: Iterable[str] = (),
        service: Optional[str] = None,
    ) -> dict[str, Any]:
        """
        Invoke one API action with retries on transient failures.

        Raises:
            OperationError: The classified failure, or ``DeadlineExceededError``
        """
        service = service or self.service
        return self._retry.run(
            lambda: self.aws_client.invoke(service, action, parameters),
            timeout=self.timeouts.read if timeout is None else timeout,
            extra_transient_codes=extra_transient_codes,
            action=f"{service}.{action}",
        )

    def describe(self, resource_id: str, timeout: Optional[float] = None) -> Any:
        """Fetch a fresh snapshot; ``None`` when the describe call returns nothing."""
        vocabulary = self._require_vocabulary()
        response = self.call(
            vocabulary.describe_action,
            vocabulary.describe_parameters(resource_id),
            timeout=timeout,
        )
        return vocabulary.extract(response)

    # Lifecycle operations

    def read(self, resource_id: str) -> Optional[Any]:
        """Return the current snapshot, or ``None`` when the resource no longer exists."""
        try:
            return self.describe(resource_id)
        except OperationError as e:
            if self._classifier.is_not_found(e):
                self._logger.debug("%s %s not found on read", self._type_name(), resource_id)
                return None
            raise self._surface(e, resource_id, "Read")

    def create_and_wait(
        self,
        action: str,
        parameters: dict[str, Any],
        id_path: str,
        timeout: Optional[float] = None,
        on_exists: Optional[OnExists] = None,
        extra_transient_codes: Iterable[str] = (),
    ) -> Any:
        """
        Create a resource and wait until it reaches a target state.

        Args:
            action: Create action (e.g. ``RunInstances``)
            parameters: Create request
            id_path: Path of the new resource id inside the create response
            timeout: Deadline for create plus wait; defaults to ``timeouts.create``
            on_exists: Called when the resource already exists; returns the
                id of the existing resource to adopt instead of failing
            extra_transient_codes: Call-site specific transient codes

        Returns:
            The snapshot that reached a target state
        """
        vocabulary = self._require_vocabulary()
        deadline = Deadline.after(
            self.timeouts.create if timeout is None else timeout, clock=self._clock
        )

        try:
            response = self.call(
                action,
                parameters,
                timeout=deadline.timeout,
                extra_transient_codes=extra_transient_codes,
            )
            resource_id = path_accessor(id_path)(response)
        except OperationError as e:
            if on_exists is None or e.kind is not ErrorKind.ALREADY_EXISTS:
                raise self._surface(e, "", "Create")
            resource_id = on_exists(e)
            self._logger.info(
                "%s already exists, adopting %s", self._type_name(), resource_id
            )

        if not resource_id:
            raise self._surface(
                OperationError(f"{action} response has no value at {id_path}"), "", "Create"
            )

        self._logger.info("Created %s %s", self._type_name(), resource_id)
        return self.wait_for_state(
            resource_id,
            targets=vocabulary.targets,
            fail_states=vocabulary.fail_states,
            timeout=deadline.remaining(),
            action="Create",
            not_found_checks=self.create_not_found_checks,
        )

    def delete_and_wait(
        self,
        resource_id: str,
        action: str,
        parameters: Optional[dict[str, Any]] = None,
        timeout: Optional[float] = None,
        extra_transient_codes: Iterable[str] = (),
    ) -> None:
        """
        Delete a resource and wait until it is gone.

        A resource that is already missing counts as deleted.
        """
        vocabulary = self._require_vocabulary()
        deadline = Deadline.after(
            self.timeouts.delete if timeout is None else timeout, clock=self._clock
        )

        try:
            self.call(
                action,
                parameters,
                timeout=deadline.timeout,
                extra_transient_codes=extra_transient_codes,
            )
        except OperationError as e:
            if e.kind is ErrorKind.NOT_FOUND:
                self._logger.info("%s %s already deleted", self._type_name(), resource_id)
                return
            raise self._surface(e, resource_id, "Delete")

        self.wait_for_state(
            resource_id,
            targets=vocabulary.deletion_targets(),
            fail_states=vocabulary.delete_fail_states,
            timeout=deadline.remaining(),
            action="Delete",
        )
        self._logger.info("Deleted %s %s", self._type_name(), resource_id)

    def wait_for_state(
        self,
        resource_id: str,
        targets: Iterable[Any],
        fail_states: Iterable[Any] = (),
        timeout: Optional[float] = None,
        action: str = "WaitForState",
        not_found_checks: Optional[int] = None,
    ) -> Any:
        """
        Wait for ``resource_id`` to reach one of ``targets``.

        ``timeout`` defaults to ``timeouts.create``. Each describe retries for
        at most ``timeouts.read`` and never past the end of the wait.
        """
        vocabulary = self._require_vocabulary()
        timeout = self.timeouts.create if timeout is None else timeout
        deadline = Deadline.after(timeout, clock=self._clock)

        def describe(target_id: str) -> Any:
            return self.describe(target_id, timeout=min(self.timeouts.read, deadline.remaining()))

        try:
            return self._poller.wait_for(
                resource_id,
                describe,
                vocabulary.accessor(),
                targets=targets,
                fail_states=fail_states,
                timeout=timeout,
                action=action,
                not_found_checks=not_found_checks,
            )
        except OperationError as e:
            raise self._surface(e, resource_id, action)

    # Helpers

    def _require_vocabulary(self) -> ResourceStateVocabulary:
        if self.vocabulary is None:
            raise NotImplementedError(f"{type(self).__name__} does not declare a vocabulary")
        return self.vocabulary

    def _type_name(self) -> str:
        return self.vocabulary.resource_type if self.vocabulary else self.service

    def _surface(self, error: OperationError, resource_id: str, action: str) -> OperationError:
        self._logger.error(
            "%s %s %s failed: %s", self._type_name(), resource_id or "-", action, error
        )
        return wrap_error(
            error,
            (DEFAULT_ERROR_MSG % (resource_id or self._type_name(), action, "")).rstrip(),
            origin=f"{type(self).__name__}.{action}",
        )
