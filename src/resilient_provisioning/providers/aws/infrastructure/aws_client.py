"""AWS client wrapper acting as the provider transport."""

import threading
from typing import Any, Optional

import boto3
from botocore import xform_name
from botocore.config import Config

from resilient_provisioning.config.schemas import AWSClientConfig
from resilient_provisioning.domain.base.ports import LoggingPort, TransportPort
from resilient_provisioning.domain.errors import ErrorKind, OperationError
from resilient_provisioning.infrastructure.diagnostics import DebugSink
from resilient_provisioning.infrastructure.resilience import (
    check_embedded_failure,
    translate_error,
)


class AWSClient:
    """
    Wrapper for boto3 service clients.

    Every call goes through ``invoke``, which performs exactly one API call:
    botocore's own retries are limited by ``sdk_max_attempts`` so that the
    retry executor alone decides when to try again. Failures leave this
    class as ``OperationError`` instances.
    """

    def __init__(
        self,
        config: Optional[AWSClientConfig] = None,
        logger: Optional[LoggingPort] = None,
        debug_sink: Optional[DebugSink] = None,
        session: Optional[boto3.Session] = None,
    ) -> None:
        """
        Initialize AWS client wrapper.

        Args:
            config: Region, profile, endpoint and timeouts
            logger: Logger for logging messages
            debug_sink: Receives every request with its response or error
            session: Pre-built boto3 session; built from ``config`` when omitted
        """
        self.config = config or AWSClientConfig()
        self._logger = logger
        self._debug_sink = debug_sink

        self.region_name = self.config.region
        self.profile_name = self.config.profile
        self.boto_config = Config(
            region_name=self.region_name,
            retries={"max_attempts": self.config.sdk_max_attempts, "mode": "standard"},
            connect_timeout=self.config.connect_timeout,
            read_timeout=self.config.read_timeout,
        )
        self.session = session or boto3.Session(
            region_name=self.region_name, profile_name=self.profile_name
        )

        self._clients: dict[str, Any] = {}
        self._client_lock = threading.RLock()

        if self._logger:
            self._logger.info(
                "AWS client initialized with region: %s, profile: %s, sdk attempts: %d, "
                "timeouts: connect=%ds, read=%ds",
                self.region_name,
                self.profile_name or "default",
                self.config.sdk_max_attempts,
                self.config.connect_timeout,
                self.config.read_timeout,
            )

    def client(self, service: str) -> Any:
        """Return the boto3 client for ``service``, creating it on first use."""
        with self._client_lock:
            if service not in self._clients:
                if self._logger:
                    self._logger.debug("Initializing %s client on first use", service)
                self._clients[service] = self.session.client(
                    service,
                    config=self.boto_config,
                    endpoint_url=self.config.endpoint_url,
                )
            return self._clients[service]

    def invoke(
        self,
        service: str,
        action: str,
        parameters: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        """
        Perform a single API call.

        Args:
            service: boto3 service name (e.g. ``ec2``)
            action: API action name as documented by AWS (e.g. ``RunInstances``)
            parameters: Request parameters

        Returns:
            The decoded response

        Raises:
            OperationError: The call failed; raw SDK errors are translated
        """
        origin = f"{service}.{action}"
        parameters = parameters or {}
        method = getattr(self.client(service), xform_name(action), None)
        if method is None:
            raise OperationError(
                f"Unknown action {action} for service {service}",
                kind=ErrorKind.FATAL,
                origin=origin,
            )

        try:
            response = check_embedded_failure(method(**parameters), origin)
        except Exception as e:
            error = translate_error(e, origin=origin)
            self._record(origin, parameters, error=error)
            raise error

        self._record(origin, parameters, response=response)
        return response

    def for_service(self, service: str) -> TransportPort:
        """Return a transport bound to ``service``."""
        return ServiceTransport(self, service)

    def _record(
        self,
        origin: str,
        request: dict[str, Any],
        response: Any = None,
        error: Optional[BaseException] = None,
    ) -> None:
        if self._debug_sink is not None:
            self._debug_sink.record(origin, request=request, response=response, error=error)


class ServiceTransport(TransportPort):
    """``TransportPort`` view of an ``AWSClient`` restricted to one service."""

    def __init__(self, client: AWSClient, service: str) -> None:
        self.client = client
        self.service = service

    def invoke(self, action: str, parameters: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        return self.client.invoke(self.service, action, parameters)
