"""Logging adapter implementing LoggingPort."""

from typing import Any, Optional

from resilient_provisioning.domain.base.ports import LoggingPort
from resilient_provisioning.infrastructure.logging.logger import get_logger


class LoggingAdapter(LoggingPort):
    """
    Adapter that implements LoggingPort on top of the package logger.

    Context bound with ``bind`` (resource id, action, ...) is attached to
    every record through ``extra`` so formatters and handlers can use it.
    """

    def __init__(self, name: str = "resilience", context: Optional[dict[str, Any]] = None) -> None:
        """Initialize with logger name and bound context."""
        self._name = name
        self._logger = get_logger(name)
        self._context: dict[str, Any] = dict(context or {})

    @property
    def context(self) -> dict[str, Any]:
        """Copy of the bound context."""
        return dict(self._context)

    def bind(self, **context: Any) -> "LoggingAdapter":
        """Return an adapter that adds ``context`` to every record."""
        return LoggingAdapter(self._name, {**self._context, **context})

    def _prepare_kwargs(self, kwargs: dict[str, Any]) -> dict[str, Any]:
        """Prepare kwargs with default stacklevel and bound context."""
        kwargs.setdefault("stacklevel", 2)
        if self._context:
            kwargs["extra"] = {**self._context, **kwargs.get("extra", {})}
        return kwargs

    def debug(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Log debug message."""
        self._logger.debug(message, *args, **self._prepare_kwargs(kwargs))

    def info(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Log info message."""
        self._logger.info(message, *args, **self._prepare_kwargs(kwargs))

    def warning(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Log warning message."""
        self._logger.warning(message, *args, **self._prepare_kwargs(kwargs))

    def error(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Log error message."""
        self._logger.error(message, *args, **self._prepare_kwargs(kwargs))

    def critical(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Log critical message."""
        self._logger.critical(message, *args, **self._prepare_kwargs(kwargs))

    def exception(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Log exception with traceback."""
        self._logger.exception(message, *args, **self._prepare_kwargs(kwargs))

    def log(self, level: int, message: str, *args: Any, **kwargs: Any) -> None:
        """Log message at specified level."""
        self._logger.log(level, message, *args, **self._prepare_kwargs(kwargs))
