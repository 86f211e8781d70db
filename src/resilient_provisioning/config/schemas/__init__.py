"""Configuration schemas."""

from .resilience_schema import (
    AppConfig,
    AWSClientConfig,
    ErrorClassificationConfig,
    LoggingConfig,
    PollingConfig,
    RetryConfig,
    TimeoutsConfig,
)

__all__ = [
    "AWSClientConfig",
    "AppConfig",
    "ErrorClassificationConfig",
    "LoggingConfig",
    "PollingConfig",
    "RetryConfig",
    "TimeoutsConfig",
]
