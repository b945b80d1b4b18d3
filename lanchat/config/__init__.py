"""Configuration package exports."""

from .loader import (  # noqa: F401
    CONFIG_FILE_ENV,
    env_overrides,
    load_config,
    print_config_summary,
    read_config_file,
)
from .model import ServerConfig

__all__ = [
    "CONFIG_FILE_ENV",
    "ServerConfig",
    "env_overrides",
    "load_config",
    "print_config_summary",
    "read_config_file",
]
