"""Error taxonomy of the resilience layer."""

from .operation_error import (
    DEFAULT_ERROR_MSG,
    FAILED_TO_REACH_TARGET_STATUS,
    NOT_FOUND_MSG,
    WAIT_TIMEOUT_MSG,
    ErrorKind,
    OperationError,
    not_found_message,
    wrap_error,
)
from .wait_errors import DeadlineExceededError, FailStateReachedError, WaitTimeoutError


class ConfigurationError(Exception):
    """Configuration could not be loaded or failed validation."""


__all__ = [
    "DEFAULT_ERROR_MSG",
    "FAILED_TO_REACH_TARGET_STATUS",
    "NOT_FOUND_MSG",
    "WAIT_TIMEOUT_MSG",
    "ConfigurationError",
    "DeadlineExceededError",
    "ErrorKind",
    "FailStateReachedError",
    "OperationError",
    "WaitTimeoutError",
    "not_found_message",
    "wrap_error",
]
