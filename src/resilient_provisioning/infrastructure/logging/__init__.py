"""Logging infrastructure."""

from .logger import ROOT_LOGGER_NAME, get_logger, setup_logging

__all__ = ["ROOT_LOGGER_NAME", "get_logger", "setup_logging"]
