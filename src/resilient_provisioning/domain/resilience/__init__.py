"""Resilience value objects."""

from .deadline import Clock, Deadline
from .poll_target import CHECKSET, DELETED, Accessor, AccessorSpec, Describe, PollTarget
from .retry_policy import RetryPolicy

__all__ = [
    "CHECKSET",
    "DELETED",
    "Accessor",
    "AccessorSpec",
    "Clock",
    "Deadline",
    "Describe",
    "PollTarget",
    "RetryPolicy",
]
