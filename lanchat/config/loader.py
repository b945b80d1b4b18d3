"""Configuration loading utilities."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..errors.internal import ConfigError
from .model import ServerConfig

CONFIG_FILE_ENV = "LANCHAT_CONF_FILE"

# Environment variables that override values from the config file
ENV_OVERRIDES: dict[str, str] = {
    "host": "LANCHAT_HOST",
    "port": "LANCHAT_PORT",
    "max_line_length": "MAX_LINE_LENGTH",
    "inbound_queue_size": "INBOUND_QUEUE_SIZE",
    "broadcast_capacity": "BROADCAST_CAPACITY",
    "read_chunk_size": "READ_CHUNK_SIZE",
    "bind_attempts": "BIND_MAX_ATTEMPTS",
    "connection_close_timeout": "CONNECTION_CLOSE_TIMEOUT_SECONDS",
}


def read_config_file(path: str | os.PathLike[str]) -> dict[str, Any]:
    """Read a JSON object from ``path``.

    Returns an empty dict when the file does not exist.

    Raises:
        ConfigError: If the file cannot be read or is not a JSON object.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        logging.info(f"📁 No configuration file at {path}, using defaults")
        return {}
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Failed to read config file {path}: {e}", data={"path": str(path)}) from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a JSON object", data={"path": str(path)})
    return data


def env_overrides() -> dict[str, str]:
    """Collect non-empty override values from the environment."""
    overrides: dict[str, str] = {}
    for field, env_name in ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value is not None and value.strip():
            overrides[field] = value.strip()
    return overrides


def load_config(path: str | os.PathLike[str] | None = None) -> ServerConfig:
    """Build the effective server configuration.

    Precedence, lowest first: built-in defaults, the JSON config file (``path``
    or ``$LANCHAT_CONF_FILE``), then environment overrides.

    Raises:
        ConfigError: If the file is unreadable or the merged values are invalid.
    """
    if path is None:
        path = os.environ.get(CONFIG_FILE_ENV) or None
    raw: dict[str, Any] = read_config_file(path) if path is not None else {}
    raw.update(env_overrides())
    try:
        return ServerConfig.from_dict(raw)
    except ValidationError as e:
        source = str(Path(path)) if path is not None else "environment"
        raise ConfigError(f"Invalid configuration from {source}: {e}", data={"source": source}) from e


def print_config_summary(config: ServerConfig) -> None:
    """Log the effective configuration."""
    logging.info("⚙️ Configuration summary")
    logging.info(f"  listen={config.host}:{config.port}")
    logging.info(f"  max_line_length={config.max_line_length} read_chunk_size={config.read_chunk_size}")
    logging.info(
        f"  inbound_queue_size={config.inbound_queue_size} "
        f"broadcast_capacity={config.broadcast_capacity}"
    )
    logging.info(f"  connection_close_timeout={config.connection_close_timeout}s")
