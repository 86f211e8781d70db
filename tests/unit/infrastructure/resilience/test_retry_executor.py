"""Unit tests for RetryExecutor."""

from unittest.mock import Mock

import pytest

from resilient_provisioning.config.schemas import RetryConfig
from resilient_provisioning.domain.errors import DeadlineExceededError, ErrorKind, OperationError
from resilient_provisioning.domain.resilience import RetryPolicy
from resilient_provisioning.infrastructure.resilience import RetryExecutor, retry


def throttled():
    return OperationError(
        "Request was denied due to request throttling.", provider_code="Throttling"
    )


class FlakyOperation:
    """Raises the given errors in order, then returns ``result``."""

    def __init__(self, errors, result="ok"):
        self.errors = list(errors)
        self.result = result
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return self.result


@pytest.mark.unit
class TestRetryExecutor:
    """Test cases for RetryExecutor."""

    @pytest.fixture
    def executor(self, generic_classifier, logger, clock):
        return RetryExecutor(
            generic_classifier,
            logger,
            retry_config=RetryConfig(initial_wait=3, increment=3),
            default_timeout=600,
            sleep=clock.sleep,
            clock=clock,
        )

    def test_success_on_first_attempt(self, executor, clock):
        operation = FlakyOperation([])

        assert executor.run(operation) == "ok"
        assert operation.calls == 1
        assert clock.sleeps == []

    def test_recovers_after_transient_failures(self, executor, clock, logger):
        operation = FlakyOperation([throttled(), throttled(), throttled()], result={"Id": "i-1"})

        result = executor.run(operation, timeout=300)

        assert result == {"Id": "i-1"}
        assert operation.calls == 4
        assert clock.sleeps == [3, 6, 9]
        logger.info.assert_called_once()

    def test_throttling_until_deadline(self, executor, clock):
        operation = FlakyOperation([throttled() for _ in range(100)])

        with pytest.raises(DeadlineExceededError) as excinfo:
            executor.run(operation, timeout=30, action="CreateInstance")

        error = excinfo.value
        assert operation.calls == 4
        assert clock.sleeps == [3, 6, 9]
        assert clock.now == 18
        assert error.attempts == 4
        assert error.provider_code == "Throttling"
        assert error.last_error.kind is ErrorKind.TRANSIENT
        assert error.cause is error.last_error
        assert "CreateInstance" in error.message

    def test_non_transient_error_is_raised_immediately(self, executor, clock):
        operation = FlakyOperation([OperationError("bad", provider_code="InvalidParameter")])

        with pytest.raises(OperationError) as excinfo:
            executor.run(operation)

        assert excinfo.value.kind is ErrorKind.FATAL
        assert not isinstance(excinfo.value, DeadlineExceededError)
        assert operation.calls == 1
        assert clock.sleeps == []

    def test_not_found_is_not_retried(self, executor):
        operation = FlakyOperation([OperationError("gone", provider_code="NotFound")])

        with pytest.raises(OperationError) as excinfo:
            executor.run(operation)

        assert excinfo.value.kind is ErrorKind.NOT_FOUND
        assert operation.calls == 1

    def test_raw_exceptions_are_translated(self, executor):
        operation = FlakyOperation([ConnectionResetError("reset"), KeyError("x")])

        with pytest.raises(OperationError) as excinfo:
            executor.run(operation)

        assert operation.calls == 2
        assert isinstance(excinfo.value.cause, KeyError)

    def test_zero_timeout_still_attempts_once(self, executor, clock):
        operation = FlakyOperation([throttled()])

        with pytest.raises(DeadlineExceededError):
            executor.run(operation, timeout=0)

        assert operation.calls == 1
        assert clock.sleeps == []

    def test_attempt_in_flight_is_not_interrupted(self, executor, clock):
        def slow_operation():
            clock.advance(50)
            return "done"

        assert executor.run(slow_operation, timeout=10) == "done"

    def test_extra_transient_codes(self, executor):
        operation = FlakyOperation(
            [OperationError("busy", provider_code="IncorrectInstanceStatus")]
        )

        assert executor.run(operation, extra_transient_codes=["IncorrectInstanceStatus"]) == "ok"
        assert operation.calls == 2

    def test_explicit_policy(self, executor, clock):
        operation = FlakyOperation([throttled(), throttled()])
        policy = RetryPolicy.exponential(initial_wait=1, growth_factor=2, timeout=60)

        executor.run(operation, policy=policy)

        assert clock.sleeps == [1, 2]

    def test_timeout_overrides_policy_timeout(self, executor):
        operation = FlakyOperation([throttled() for _ in range(10)])
        policy = RetryPolicy(initial_wait=5, timeout=600)

        with pytest.raises(DeadlineExceededError) as excinfo:
            executor.run(operation, policy=policy, timeout=10)

        assert excinfo.value.attempts == 2

    def test_gives_up_when_next_wait_reaches_deadline(self, executor, clock):
        operation = FlakyOperation([throttled() for _ in range(10)])
        policy = RetryPolicy(initial_wait=4, timeout=10)

        with pytest.raises(DeadlineExceededError) as excinfo:
            executor.run(operation, policy=policy)

        assert operation.calls == 3
        assert clock.sleeps == [4, 4]
        assert clock.now == 8
        assert excinfo.value.elapsed == 8

    def test_retry_decorator(self, executor):
        calls = Mock(side_effect=[throttled(), "created"])

        @retry(executor, timeout=60)
        def create_volume(size):
            return calls(size)

        assert create_volume(10) == "created"
        assert calls.call_count == 2
        assert create_volume.__name__ == "create_volume"
