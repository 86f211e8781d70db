"""Resilient-operation layer: classification, retry and state polling."""

from .accessors import as_accessor, checkset_accessor, path_accessor
from .backoff import WaitDescriptor, build_wait, exponential_wait, incremental_wait
from .classifier import ErrorClassifier
from .retry_executor import RetryExecutor, retry
from .state_poller import StatePoller
from .translation import check_embedded_failure, translate_error

__all__ = [
    "ErrorClassifier",
    "RetryExecutor",
    "StatePoller",
    "WaitDescriptor",
    "as_accessor",
    "build_wait",
    "check_embedded_failure",
    "checkset_accessor",
    "exponential_wait",
    "incremental_wait",
    "path_accessor",
    "retry",
    "translate_error",
]
