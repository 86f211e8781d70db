"""Structured debug log of every provider attempt."""

import json
from typing import Any, Optional

from resilient_provisioning.domain.base.ports import LoggingPort

REDACTED = "***"
SENSITIVE_KEYS = frozenset({"password", "secret", "secretaccesskey", "sessiontoken", "token"})


def _redact(data: Any) -> Any:
    if isinstance(data, dict):
        return {
            key: REDACTED if str(key).lower() in SENSITIVE_KEYS else _redact(value)
            for key, value in data.items()
        }
    if isinstance(data, (list, tuple)):
        return [_redact(item) for item in data]
    return data


def _format_debug_data(data: Any) -> str:
    try:
        return json.dumps(_redact(data), default=str, indent=2, sort_keys=True)
    except (TypeError, ValueError):
        return str(data)


class DebugSink:
    """
    Fire-and-forget sink for request/response/error records.

    Recording never raises and never changes control flow: problems while
    rendering a record are reported through the logger and dropped.
    """

    def __init__(self, logger: LoggingPort, enabled: bool = True) -> None:
        self._logger = logger
        self.enabled = enabled

    def record(
        self,
        action: str,
        request: Any = None,
        response: Any = None,
        error: Optional[BaseException] = None,
    ) -> None:
        if not self.enabled:
            return
        try:
            if error is not None:
                self._logger.debug(
                    "%s failed: %s\nRequest:\n%s",
                    action,
                    error,
                    _format_debug_data(request),
                )
            else:
                self._logger.debug(
                    "%s response:\n%s\nRequest:\n%s",
                    action,
                    _format_debug_data(response),
                    _format_debug_data(request),
                )
        except Exception as e:
            self._logger.warning("Failed to record debug data for %s: %s", action, e)
