"""
Operation error taxonomy.

``OperationError`` is the single unit of failure information flowing through
the resilience layer. Provider SDK exceptions are translated into it once, at
the transport boundary, so the rest of the system never inspects SDK types.
"""

import inspect
import os
from collections.abc import Iterator
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Stable classification of an operation failure."""

    TRANSIENT = "transient"
    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    FATAL = "fatal"
    UNCLASSIFIED = "unclassified"

    def __str__(self) -> str:
        return self.value


# Message templates shared by resource handlers and the poller.
DEFAULT_ERROR_MSG = "Resource %s %s Failed!!! %s"
NOT_FOUND_MSG = "The specified %s %s is not found."
WAIT_TIMEOUT_MSG = "Resource %s %s Timeout In %d Seconds. Got: %s Expected: %s !!! %s"
FAILED_TO_REACH_TARGET_STATUS = "Failed to reach target status. Last status: %s."


def not_found_message(product: str, resource_id: str) -> str:
    """Build the standard not-found message for a product and identifier."""
    return NOT_FOUND_MSG % (product, resource_id)


def _caller_origin(depth: int) -> Optional[str]:
    """Return ``path:line`` of the frame ``depth`` levels above the caller."""
    frame = inspect.currentframe()
    try:
        for _ in range(depth + 1):
            if frame is None:
                return None
            frame = frame.f_back
        if frame is None:
            return None
        parts = frame.f_code.co_filename.split(os.sep)
        path = "/".join(parts[-3:])
        return f"{path}:{frame.f_lineno}"
    finally:
        del frame


class OperationError(Exception):
    """
    Failure of a single provider operation.

    Attributes:
        kind: Classification of the failure
        provider_code: Raw error code returned by the remote API, if any
        message: Human-readable description
        cause: The wrapped underlying error (one cause per error)
        origin: Diagnostic source-location tag, never used for classification
        http_status: HTTP status code observed at the boundary, if any
        request_id: Provider request id, if any
    """

    def __init__(
        self,
        message: str,
        *,
        kind: ErrorKind = ErrorKind.UNCLASSIFIED,
        provider_code: Optional[str] = None,
        cause: Optional[BaseException] = None,
        origin: Optional[str] = None,
        http_status: Optional[int] = None,
        request_id: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.kind = ErrorKind(kind)
        self.provider_code = provider_code
        self.cause = cause
        self.origin = origin
        self.http_status = http_status
        self.request_id = request_id
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        text = self.message
        if self.provider_code:
            text = f"Code: {self.provider_code} Message: {text}"
        if self.origin:
            text = f"[ERROR] {self.origin}: {text}" if text else f"[ERROR] {self.origin}"
        if self.cause is not None:
            text = f"{text}:\n{self.cause}" if text else str(self.cause)
        return text

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(kind={self.kind.value!r}, "
            f"provider_code={self.provider_code!r}, message={self.message!r})"
        )

    def chain(self) -> Iterator[BaseException]:
        """Iterate the wrap chain from this error to its innermost cause."""
        seen: set[int] = set()
        node: Optional[BaseException] = self
        while node is not None:
            if id(node) in seen:
                raise ValueError("OperationError chain contains a cycle")
            seen.add(id(node))
            yield node
            node = node.cause if isinstance(node, OperationError) else None

    def root_cause(self) -> BaseException:
        """Return the innermost error of the chain."""
        *_, last = self.chain()
        return last

    @property
    def is_classified(self) -> bool:
        return self.kind is not ErrorKind.UNCLASSIFIED

    def with_kind(self, kind: ErrorKind) -> "OperationError":
        """Return a copy of this node with ``kind`` set; the cause chain is shared."""
        return OperationError(
            self.message,
            kind=kind,
            provider_code=self.provider_code,
            cause=self.cause,
            origin=self.origin,
            http_status=self.http_status,
            request_id=self.request_id,
        )


def wrap_error(
    cause: Optional[BaseException],
    message: Optional[str] = None,
    *args: object,
    origin: Optional[str] = None,
    kind: Optional[ErrorKind] = None,
) -> Optional[OperationError]:
    """
    Wrap an error with context and the caller's source location.

    Args:
        cause: Error being wrapped; ``None`` with no message yields ``None``
        message: Optional %-style message describing the failed step
        *args: Arguments for ``message``
        origin: Explicit origin tag; defaults to the caller's ``path:line``
        kind: Explicit classification for the wrap; defaults to unclassified

    Returns:
        A new ``OperationError`` node whose cause is ``cause``
    """
    if cause is None and not (message and message.strip()):
        return None
    if origin is None:
        origin = _caller_origin(1)
    text = message % args if (message and args) else (message or "")
    return OperationError(
        text,
        kind=kind or ErrorKind.UNCLASSIFIED,
        cause=cause,
        origin=origin,
    )
