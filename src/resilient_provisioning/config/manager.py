"""Configuration loading."""

import json
import os
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import ValidationError

from resilient_provisioning.config.schemas import AppConfig
from resilient_provisioning.domain.errors import ConfigurationError

CONFIG_PATH_ENV = "RESILIENT_PROVISIONING_CONFIG"

# Environment variable -> dotted configuration key
ENV_OVERRIDES = {
    "RP_PROVIDER": "provider",
    "RP_LOG_LEVEL": "logging.level",
    "RP_LOG_DESTINATION": "logging.destination",
    "RP_LOG_DIR": "logging.log_dir",
    "RP_AWS_REGION": "aws.region",
    "RP_AWS_PROFILE": "aws.profile",
    "RP_AWS_ENDPOINT_URL": "aws.endpoint_url",
}


class ConfigurationManager:
    """
    Loads and validates the application configuration.

    Sources, lowest precedence first: schema defaults, a YAML or JSON file
    (explicit path or ``RESILIENT_PROVISIONING_CONFIG``), ``RP_*`` environment
    variables. The result is a frozen ``AppConfig`` that is built once and
    passed by reference to the components that need it.
    """

    def __init__(
        self,
        config_path: Optional[Union[str, Path]] = None,
        environ: Optional[dict[str, str]] = None,
    ) -> None:
        self._environ = dict(os.environ) if environ is None else environ
        path = config_path or self._environ.get(CONFIG_PATH_ENV)
        self.config_path: Optional[Path] = Path(path) if path else None
        self._config: Optional[AppConfig] = None

    def get_config(self) -> AppConfig:
        """Return the validated configuration, loading it on first use."""
        if self._config is None:
            self._config = self._load()
        return self._config

    def _load(self) -> AppConfig:
        data: dict[str, Any] = {}
        if self.config_path is not None:
            data = self._read_file(self.config_path)
        self._apply_env_overrides(data)
        try:
            return AppConfig.model_validate(data)
        except ValidationError as e:
            source = self.config_path or "environment"
            raise ConfigurationError(f"Invalid configuration in {source}: {e}") from e

    @staticmethod
    def _read_file(path: Path) -> dict[str, Any]:
        if not path.exists():
            raise ConfigurationError(f"Configuration file not found: {path}")
        try:
            with open(path, encoding="utf-8") as f:
                if path.suffix.lower() == ".json":
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Invalid configuration file {path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Invalid configuration file {path}: expected a mapping at top level"
            )
        return data

    def _apply_env_overrides(self, data: dict[str, Any]) -> None:
        for env_name, dotted_key in ENV_OVERRIDES.items():
            value = self._environ.get(env_name)
            if value is None or value == "":
                continue
            section = data
            *parents, leaf = dotted_key.split(".")
            for parent in parents:
                section = section.setdefault(parent, {})
                if not isinstance(section, dict):
                    raise ConfigurationError(
                        f"Cannot apply {env_name}: '{parent}' is not a mapping"
                    )
            section[leaf] = value


def load_config(
    config_path: Optional[Union[str, Path]] = None,
    environ: Optional[dict[str, str]] = None,
) -> AppConfig:
    """Load configuration in one call."""
    return ConfigurationManager(config_path, environ).get_config()
