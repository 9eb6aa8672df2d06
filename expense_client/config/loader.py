"""Configuration loading utilities."""

from __future__ import annotations

import json
import logging
import os

from pydantic import ValidationError

from ..constants import CONFIG_FILE_ENV, DEFAULT_CONFIG_FILE
from ..errors.internal import ConfigError
from .model import ClientConfig


def config_file_path() -> str:
    return os.environ.get(CONFIG_FILE_ENV, DEFAULT_CONFIG_FILE)


def load_config(config_file: str | None = None) -> ClientConfig:
    """Load and validate the client configuration.

    A missing file yields the defaults from ``constants`` (themselves
    environment-overridable).

    Args:
        config_file: Path to the JSON configuration file. Defaults to the
            path named by ``EXPENSE_CLIENT_CONF_FILE``.

    Returns:
        Validated ClientConfig.

    Raises:
        ConfigError: If the file is unreadable, not a JSON object, or fails validation.
    """
    path = config_file or config_file_path()
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        logging.debug(f"📁 No config file at {path}, using defaults")
        return ClientConfig()
    except (OSError, ValueError) as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a JSON object")
    try:
        config = ClientConfig.from_dict(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e
    logging.debug(f"✅ Configuration loaded from {path} base_url={config.base_url}")
    return config
