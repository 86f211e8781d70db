"""Resilience layer configuration schemas."""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from resilient_provisioning.domain.resilience import RetryPolicy


class ErrorClassificationConfig(BaseModel):
    """
    Error classification tables for one API family.

    Constructed once at startup and passed by reference to the classifier.
    Instances are frozen; use ``merged_with`` to extend a table set.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    not_found_codes: tuple[str, ...] = Field(
        default=(), description="Provider codes that mean the resource does not exist"
    )
    forbidden_not_found_codes: tuple[str, ...] = Field(
        default=(),
        description="Access-denied codes returned for resources that no longer exist",
    )
    not_found_code_prefixes: tuple[str, ...] = Field(
        default=(), description="Provider code prefixes that mean not found (e.g. NoSuch)"
    )
    not_found_phrases: tuple[str, ...] = Field(
        default=(), description="Case-insensitive message fragments that mean not found"
    )
    already_exists_patterns: tuple[str, ...] = Field(
        default=(),
        description="Lower-case fragments of code or message that mean already exists",
    )
    transient_codes: tuple[str, ...] = Field(
        default=(), description="Throttling/unavailable codes that are always retried"
    )
    transient_code_patterns: tuple[str, ...] = Field(
        default=(), description="Regular expressions searched in the provider code"
    )
    transient_message_patterns: tuple[str, ...] = Field(
        default=(), description="Regular expressions searched in the message"
    )
    non_transient_message_patterns: tuple[str, ...] = Field(
        default=(), description="Message fragments that are never retried"
    )
    server_error_message_pattern: Optional[str] = Field(
        default=None, description="Regular expression matching a 5xx status embedded in text"
    )
    retry_on_server_error: bool = Field(True, description="Treat HTTP 5xx as transient")

    def merged_with(self, other: "ErrorClassificationConfig") -> "ErrorClassificationConfig":
        """Return a new table set holding the entries of both, ``other`` winning on scalars."""
        merged: dict = {}
        for name in type(self).model_fields:
            mine = getattr(self, name)
            theirs = getattr(other, name)
            if isinstance(mine, tuple):
                merged[name] = tuple(dict.fromkeys(mine + theirs))
            elif name in other.model_fields_set:
                merged[name] = theirs
            else:
                merged[name] = mine
        return type(self)(**merged)


class RetryConfig(BaseModel):
    """Default backoff used by the retry executor."""

    model_config = ConfigDict(frozen=True)

    initial_wait: float = Field(3.0, gt=0, description="First sleep between attempts, seconds")
    increment: float = Field(3.0, ge=0, description="Seconds added after each sleep")
    max_wait: Optional[float] = Field(None, gt=0, description="Cap for a single sleep")
    jitter_ratio: float = Field(0.0, ge=0.0, lt=1.0)

    @model_validator(mode="after")
    def _check_max_wait(self) -> "RetryConfig":
        if self.max_wait is not None and self.max_wait < self.initial_wait:
            raise ValueError("retry.max_wait must not be smaller than retry.initial_wait")
        return self

    def to_policy(self, timeout: float) -> RetryPolicy:
        return RetryPolicy(
            initial_wait=self.initial_wait,
            increment=self.increment,
            max_wait=self.max_wait,
            timeout=timeout,
            jitter_ratio=self.jitter_ratio,
        )


class PollingConfig(BaseModel):
    """Default poll cadence used by the state poller."""

    model_config = ConfigDict(frozen=True)

    delay: float = Field(5.0, ge=0, description="Sleep before the first poll, seconds")
    interval: float = Field(3.0, gt=0, description="First sleep between polls, seconds")
    increment: float = Field(2.0, ge=0, description="Seconds added after each poll")
    max_interval: float = Field(10.0, gt=0, description="Cap for a single sleep between polls")
    not_found_checks: int = Field(
        0, ge=0, description="Consecutive absences tolerated while not waiting for deletion"
    )

    @model_validator(mode="after")
    def _check_max_interval(self) -> "PollingConfig":
        if self.max_interval < self.interval:
            raise ValueError("polling.max_interval must not be smaller than polling.interval")
        return self

    def to_policy(self, timeout: float) -> RetryPolicy:
        return RetryPolicy(
            initial_wait=self.interval,
            increment=self.increment,
            max_wait=self.max_interval,
            timeout=timeout,
        )


class TimeoutsConfig(BaseModel):
    """Per-operation deadlines, seconds."""

    model_config = ConfigDict(frozen=True)

    create: float = Field(600.0, ge=0)
    read: float = Field(300.0, ge=0)
    update: float = Field(600.0, ge=0)
    delete: float = Field(600.0, ge=0)

    def for_operation(self, operation: str) -> float:
        try:
            return getattr(self, operation.lower())
        except AttributeError:
            raise ValueError(f"Unknown operation for timeout lookup: {operation}") from None


class AWSClientConfig(BaseModel):
    """Settings for the boto3-backed transport."""

    model_config = ConfigDict(frozen=True)

    region: str = Field("us-east-1", description="AWS region")
    profile: Optional[str] = Field(None, description="Named profile from the shared config")
    endpoint_url: Optional[str] = Field(None, description="Override endpoint (e.g. localstack)")
    connect_timeout: int = Field(5, gt=0)
    read_timeout: int = Field(10, gt=0)
    sdk_max_attempts: int = Field(
        1, ge=1, description="botocore's own attempts; the retry executor owns retries"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(frozen=True)

    level: str = Field("INFO", description="Root log level")
    destination: Literal["stdout", "file", "both"] = Field("stdout")
    log_dir: str = Field("./logs")
    log_filename: str = Field("resilient_provisioning.log")
    format: str = Field("%(asctime)s %(levelname)s [%(name)s] %(message)s")


class AppConfig(BaseModel):
    """Root configuration."""

    model_config = ConfigDict(frozen=True)

    provider: Literal["generic", "aws"] = Field("aws", description="Active API family")
    classification: ErrorClassificationConfig = Field(
        default_factory=ErrorClassificationConfig,
        description="Extra classification entries merged over the provider defaults",
    )
    retry: RetryConfig = Field(default_factory=RetryConfig)
    polling: PollingConfig = Field(default_factory=PollingConfig)
    timeouts: TimeoutsConfig = Field(default_factory=TimeoutsConfig)
    aws: AWSClientConfig = Field(default_factory=AWSClientConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
