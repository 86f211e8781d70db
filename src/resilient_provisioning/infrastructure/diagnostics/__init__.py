"""Diagnostics sink for provider attempts."""

from .debug_sink import DebugSink

__all__ = ["DebugSink"]
