"""Error hierarchy and error-handling helpers."""

from .handling import (  # noqa: F401
    categorize_error,
    handle_retryable_error,
    is_retryable_error,
    log_error,
)
from .internal import (  # noqa: F401
    BroadcastClosedError,
    BroadcastError,
    BroadcastLaggedError,
    ChatError,
    CodecError,
    ConfigError,
    InvalidEncodingError,
    LineTooLongError,
    ParseMessageError,
)

__all__ = [
    "BroadcastClosedError",
    "BroadcastError",
    "BroadcastLaggedError",
    "ChatError",
    "CodecError",
    "ConfigError",
    "InvalidEncodingError",
    "LineTooLongError",
    "ParseMessageError",
    "categorize_error",
    "handle_retryable_error",
    "is_retryable_error",
    "log_error",
]
