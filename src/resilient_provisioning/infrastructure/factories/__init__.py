"""Factories assembling the resilience layer."""

from .resilience_factory import ResilienceLayer, build_resilience_layer

__all__ = ["ResilienceLayer", "build_resilience_layer"]
