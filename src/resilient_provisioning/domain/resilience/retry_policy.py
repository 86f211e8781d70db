"""Retry policy value object."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class RetryPolicy(BaseModel):
    """
    Immutable backoff configuration for a single call.

    A policy either grows its wait by a fixed ``increment`` (incremental
    backoff), multiplies it by ``growth_factor`` (exponential backoff), or,
    when neither is given, keeps it constant. ``max_wait`` caps every single
    sleep; ``timeout`` bounds the whole call and is turned into an absolute
    deadline when the call starts.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    initial_wait: float = Field(3.0, gt=0, description="First sleep, in seconds")
    increment: Optional[float] = Field(
        None, ge=0, description="Seconds added to the wait after each sleep"
    )
    growth_factor: Optional[float] = Field(
        None, ge=1.0, description="Multiplier applied to the wait after each sleep"
    )
    max_wait: Optional[float] = Field(None, gt=0, description="Upper bound for a single sleep")
    timeout: float = Field(600.0, ge=0, description="Total duration of the call, in seconds")
    jitter_ratio: float = Field(
        0.0, ge=0.0, lt=1.0, description="Random +/- fraction applied to each sleep"
    )

    @model_validator(mode="after")
    def _check_growth(self) -> "RetryPolicy":
        if self.increment is not None and self.growth_factor is not None:
            raise ValueError("increment and growth_factor are mutually exclusive")
        if self.max_wait is not None and self.max_wait < self.initial_wait:
            raise ValueError("max_wait must not be smaller than initial_wait")
        return self

    @classmethod
    def incremental(
        cls,
        initial_wait: float,
        increment: float,
        timeout: float,
        max_wait: Optional[float] = None,
    ) -> "RetryPolicy":
        """Policy whose wait grows linearly by ``increment``."""
        return cls(
            initial_wait=initial_wait, increment=increment, timeout=timeout, max_wait=max_wait
        )

    @classmethod
    def exponential(
        cls,
        initial_wait: float,
        growth_factor: float,
        timeout: float,
        max_wait: Optional[float] = None,
        jitter_ratio: float = 0.0,
    ) -> "RetryPolicy":
        """Policy whose wait grows geometrically by ``growth_factor``."""
        return cls(
            initial_wait=initial_wait,
            growth_factor=growth_factor,
            timeout=timeout,
            max_wait=max_wait,
            jitter_ratio=jitter_ratio,
        )

    def with_timeout(self, timeout: float) -> "RetryPolicy":
        """Return a copy of this policy bounded by ``timeout`` seconds."""
        return self.model_copy(update={"timeout": timeout})

    def next_wait(self, current: float) -> float:
        """Wait that follows ``current`` under this policy, capped by ``max_wait``."""
        if self.increment is not None:
            value = current + self.increment
        elif self.growth_factor is not None:
            value = current * self.growth_factor
        else:
            value = current
        if self.max_wait is not None:
            value = min(value, self.max_wait)
        return value
