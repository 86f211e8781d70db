"""Domain ports - abstractions implemented by the infrastructure layer."""

from .logging_port import LoggingPort
from .transport_port import TransportPort

__all__ = ["LoggingPort", "TransportPort"]
