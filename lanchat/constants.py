"""
Configuration constants for the LAN chat server

This module contains all configurable constants used throughout the application.
Each constant can be overridden by setting an environment variable with the same name.
"""

import os


def _get_env_int(name: str, default: int) -> int:
    """Retrieve an integer value from an environment variable.

    Attempts to parse the environment variable as an integer. If the variable
    is not set or cannot be parsed, prints a warning and returns the default value.

    Args:
        name: The name of the environment variable to read.
        default: The default integer value to return if parsing fails.

    Returns:
        The parsed integer value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return int(value)
        except ValueError:
            print(
                f"Warning: Invalid integer value for {name}='{value}', using default {default}"
            )
    return default


def _get_env_str(name: str, default: str) -> str:
    """Retrieve a non-empty string value from an environment variable."""
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


# Network/listener constants
LANCHAT_HOST = _get_env_str("LANCHAT_HOST", "0.0.0.0")  # Interface to listen on
LANCHAT_PORT = _get_env_int("LANCHAT_PORT", 3000)  # TCP port to listen on
BIND_MAX_ATTEMPTS = _get_env_int(
    "BIND_MAX_ATTEMPTS", 3
)  # Attempts to bind the listening socket before giving up

# Protocol constants
MAX_LINE_LENGTH = _get_env_int(
    "MAX_LINE_LENGTH", 4096
)  # Maximum line length in bytes, including the terminating CRLF
MIN_LINE_LENGTH = 3  # CRLF plus at least one byte of content
READ_CHUNK_SIZE = _get_env_int(
    "READ_CHUNK_SIZE", 4096
)  # Bytes requested per socket read
DEFAULT_NICKNAME = "unknown"  # Identity rendered for connections that never sent NICK

# Channel sizing constants
INBOUND_QUEUE_SIZE = _get_env_int(
    "INBOUND_QUEUE_SIZE", 100
)  # Bounded queue between connections and the server actor
BROADCAST_CAPACITY = _get_env_int(
    "BROADCAST_CAPACITY", 10
)  # Lines retained by the broadcast fanout before slow readers lag

# Shutdown constants
CONNECTION_CLOSE_TIMEOUT_SECONDS = _get_env_int(
    "CONNECTION_CLOSE_TIMEOUT_SECONDS", 5
)  # Upper bound on waiting for a socket to close
