"""AWS provider infrastructure."""

from .aws_client import AWSClient, ServiceTransport

__all__ = ["AWSClient", "ServiceTransport"]
