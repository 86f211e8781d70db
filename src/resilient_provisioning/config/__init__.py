"""Configuration package."""

from .defaults import GENERIC_CLASSIFICATION
from .manager import ConfigurationManager, load_config
from .schemas import AppConfig, ErrorClassificationConfig

__all__ = [
    "GENERIC_CLASSIFICATION",
    "AppConfig",
    "ConfigurationManager",
    "ErrorClassificationConfig",
    "load_config",
]
