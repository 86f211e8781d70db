import logging
import os
import sys
from typing import Optional

from resilient_provisioning.config.schemas import LoggingConfig

ROOT_LOGGER_NAME = "resilient_provisioning"


def setup_logging(config: Optional[LoggingConfig] = None) -> logging.Logger:
    """
    Set up logging for the package.

    :param config: Logging configuration; defaults are used when omitted.
    :return: The configured package root logger.
    """
    config = config or LoggingConfig()
    root = logging.getLogger(ROOT_LOGGER_NAME)

    # Replace handlers installed by an earlier call
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    handlers: list[logging.Handler] = []
    if config.destination in ("file", "both"):
        os.makedirs(config.log_dir, exist_ok=True)
        handlers.append(
            logging.FileHandler(os.path.join(config.log_dir, config.log_filename), encoding="utf-8")
        )
    if config.destination in ("stdout", "both"):
        handlers.append(logging.StreamHandler(sys.stdout))

    formatter = logging.Formatter(config.format)
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    root.setLevel(getattr(logging, config.level.upper(), logging.INFO))
    root.propagate = False
    return root


def get_logger(name: str) -> logging.Logger:
    """Return a logger below the package root logger."""
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
