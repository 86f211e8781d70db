"""Poll target value object and state sentinels."""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from .deadline import Deadline
from .retry_policy import RetryPolicy

# Target meaning "the resource no longer exists".
DELETED = "#DELETED"
# Value produced by presence accessors when the watched attribute is populated.
CHECKSET = "#CHECKSET"

Describe = Callable[[str], Any]
Accessor = Callable[[Any], Any]
AccessorSpec = Union[str, Accessor]


def _state_set(values: Optional[Iterable[Any]]) -> frozenset:
    if values is None:
        return frozenset()
    if isinstance(values, (str, bytes)):
        return frozenset([values])
    return frozenset(values)


@dataclass(frozen=True)
class PollTarget:
    """
    A pending wait-for-state operation.

    Created at the start of a wait and discarded when it resolves; it has no
    lifecycle beyond a single call.

    Attributes:
        resource_id: Opaque identifier of the awaited resource
        describe: Fetches a fresh snapshot for ``resource_id``
        accessor: Extracts the comparable state value from a snapshot
        targets: State values that resolve the wait successfully; empty means
            any non-fail state is acceptable
        fail_states: State values that abort the wait
        deadline: Absolute deadline of the wait
        policy: Backoff policy used between polls
        action: Short label used in diagnostics (e.g. ``Create``)
        delay: Seconds to sleep before the first poll
        not_found_checks: Consecutive absences tolerated while not waiting
            for deletion
    """

    resource_id: str
    describe: Describe
    accessor: Accessor
    targets: frozenset = field(default_factory=frozenset)
    fail_states: frozenset = field(default_factory=frozenset)
    deadline: Optional[Deadline] = None
    policy: Optional[RetryPolicy] = None
    action: str = "WaitForState"
    delay: float = 0.0
    not_found_checks: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "targets", _state_set(self.targets))
        object.__setattr__(self, "fail_states", _state_set(self.fail_states))
        overlap = self.targets & self.fail_states
        if overlap:
            raise ValueError(f"States cannot be both target and fail states: {sorted(overlap)}")
        if self.not_found_checks < 0:
            raise ValueError("not_found_checks must not be negative")

    @property
    def waits_for_deletion(self) -> bool:
        return DELETED in self.targets

    def is_target(self, value: Any) -> bool:
        if not self.targets:
            return True
        return value in self.targets

    def is_fail_state(self, value: Any) -> bool:
        return value in self.fail_states
