"""Domain port for the provider transport collaborator."""

from abc import ABC, abstractmethod
from typing import Any, Optional


class TransportPort(ABC):
    """
    Synchronous request/response client for a cloud provider API.

    The resilience layer treats a transport as an opaque function
    ``(action, parameters) -> response``. Implementations must raise
    ``OperationError`` (or an SDK error the translation boundary understands)
    on failure, including responses that report failure inside a successful
    HTTP body.
    """

    @abstractmethod
    def invoke(self, action: str, parameters: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """
        Perform a single API call.

        Args:
            action: Provider API action name (e.g. ``DescribeInstances``)
            parameters: Request parameters

        Returns:
            Decoded response payload
        """
