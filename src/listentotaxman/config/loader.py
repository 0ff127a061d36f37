"""Configuration loader wrapping the shared schema models."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .schema import ConfigDefaults, Configuration, ConfigurationError

CONFIG_ENV_VAR = "LISTENTOTAXMAN_CONFIG"
CONFIG_FILENAME = "config.yaml"

_LOGGER = logging.getLogger(__name__)


def default_config_path() -> Path:
    """Return the configuration file location, honouring the environment override."""

    override = os.getenv(CONFIG_ENV_VAR, "").strip()
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "listentotaxman" / CONFIG_FILENAME


def _load_yaml(path: Path) -> dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except yaml.YAMLError as error:
        raise ConfigurationError(f"Failed to parse {path}: {error}") from error
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Configuration file {path} must define a mapping at the top level"
        )
    return data


def load_config(path: Path | None = None) -> Configuration:
    """Load the configuration file, or return documented defaults when absent."""

    config_file = path or default_config_path()
    if not config_file.exists():
        _LOGGER.debug("No configuration file at %s; using built-in defaults", config_file)
        return Configuration()

    raw_config = _load_yaml(config_file)

    try:
        configuration = Configuration.model_validate(raw_config)
    except ValidationError as error:
        raise ConfigurationError(
            f"Configuration validation failed for {config_file}: {error}"
        ) from error

    _LOGGER.debug("Loaded configuration from %s", config_file)
    return configuration


def load_defaults(path: Path | None = None) -> ConfigDefaults:
    """Shortcut returning only the ``defaults`` section."""

    return load_config(path).defaults


__all__ = [
    "CONFIG_ENV_VAR",
    "CONFIG_FILENAME",
    "default_config_path",
    "load_config",
    "load_defaults",
]
