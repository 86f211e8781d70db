"""
Translation boundary between provider SDK errors and OperationError.

This is the only module that inspects SDK-specific exception shapes. Every
error leaving a transport is an ``OperationError`` carrying the provider
code, message, HTTP status and request id that classification needs.
"""

from typing import Any, Optional

from botocore.exceptions import (
    ClientError,
    ConnectionClosedError,
    ConnectTimeoutError,
    EndpointConnectionError,
    ReadTimeoutError,
)

from resilient_provisioning.domain.errors import ErrorKind, OperationError

_CONNECTION_ERRORS = (
    EndpointConnectionError,
    ConnectionClosedError,
    ConnectTimeoutError,
    ReadTimeoutError,
    ConnectionError,
    TimeoutError,
)


def translate_error(error: BaseException, origin: Optional[str] = None) -> OperationError:
    """
    Convert any error raised by a transport into an ``OperationError``.

    Args:
        error: The raised error
        origin: Optional diagnostic tag (subsystem or call-site name)

    Returns:
        ``error`` itself when it already is an ``OperationError``, otherwise a
        new ``OperationError`` wrapping it. Connection and timeout failures
        are marked transient here; everything else is left unclassified.
    """
    if isinstance(error, OperationError):
        return error

    if isinstance(error, ClientError):
        return _from_client_error(error, origin)

    if isinstance(error, _CONNECTION_ERRORS):
        return OperationError(
            str(error) or type(error).__name__,
            kind=ErrorKind.TRANSIENT,
            cause=error,
            origin=origin,
        )

    return OperationError(str(error) or type(error).__name__, cause=error, origin=origin)


def _from_client_error(error: ClientError, origin: Optional[str]) -> OperationError:
    response = error.response or {}
    details = response.get("Error", {}) or {}
    metadata = response.get("ResponseMetadata", {}) or {}

    status = metadata.get("HTTPStatusCode")
    try:
        http_status = int(status) if status is not None else None
    except (TypeError, ValueError):
        http_status = None

    return OperationError(
        details.get("Message") or str(error),
        provider_code=details.get("Code") or None,
        cause=error,
        origin=origin,
        http_status=http_status,
        request_id=metadata.get("RequestId"),
    )


def check_embedded_failure(response: Any, action: str) -> Any:
    """
    Raise for a successful HTTP response whose body reports a failure.

    Some APIs answer HTTP 200 with ``{"Success": false, "Code": ..., "Message": ...}``.
    Such bodies are turned into the same ``OperationError`` a transport-level
    failure would produce, so they classify identically.

    Returns:
        ``response`` unchanged when it does not encode a failure
    """
    if not isinstance(response, dict):
        return response

    success = response.get("Success", response.get("success"))
    if success is not False and success != "false":
        return response

    code = response.get("Code", response.get("code"))
    message = response.get("Message", response.get("message")) or f"{action} reported failure"
    status = response.get("HttpStatusCode", response.get("httpStatusCode"))
    try:
        http_status = int(status) if status is not None else None
    except (TypeError, ValueError):
        http_status = None

    raise OperationError(
        str(message),
        provider_code=str(code) if code not in (None, "") else None,
        origin=action,
        http_status=http_status,
        request_id=response.get("RequestId", response.get("requestId")),
    )
