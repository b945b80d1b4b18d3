"""Centralized internal error hierarchy.

These exceptions provide semantic categories for the protocol engine and the
connection layer. Framing and grammar failures are raised by the codec and
handled inside the connection bridge; they never reach the server actor.

Classes:
  ChatError              – Base for all internal errors.
  CodecError             – Any failure decoding one line from the byte stream.
  LineTooLongError       – Line exceeded the configured maximum length.
  InvalidEncodingError   – A complete line was not valid UTF-8.
  ParseMessageError      – A complete line did not match the grammar.
  BroadcastError         – Base for broadcast fanout conditions.
  BroadcastLaggedError   – A subscriber fell behind and skipped lines.
  BroadcastClosedError   – The fanout was shut down.
  ConfigError            – Configuration could not be loaded or validated.
"""

from __future__ import annotations

from collections.abc import Mapping


class ChatError(Exception):
    """Base class for all internal application errors with metadata support.

    Attributes:
        data: Dictionary containing arbitrary structured context data.

    Args:
        message: Descriptive error message.
        data: Optional mapping of additional context data.
    """

    data: dict[str, object]

    def __init__(
        self, message: str, *, data: Mapping[str, object] | None = None
    ) -> None:
        super().__init__(message)
        # Copy into a plain dict to avoid unexpected mutations from caller.
        self.data = dict(data) if data else {}


class CodecError(ChatError):
    """Raised when a line cannot be produced from the byte stream.

    Every subclass is line-scoped: the decoder stays usable after raising it.
    """


class LineTooLongError(CodecError):
    """Raised when no CRLF was found within the maximum line length.

    The decoder enters discard mode and drops bytes up to the next CRLF.
    """

    def __init__(self, max_length: int) -> None:
        super().__init__(
            f"Maximum line length exceeded ({max_length} bytes)",
            data={"max_length": max_length},
        )
        self.max_length = max_length


class InvalidEncodingError(CodecError):
    """Raised when a complete line is not valid UTF-8."""


class ParseMessageError(CodecError):
    """Raised when a line does not match the protocol grammar.

    The cause (unrecognized command, wrong parameters, malformed prefix) is
    described in the message and in ``data["reason"]`` only; callers treat
    every parse failure the same way.
    """

    def __init__(self, message: str, *, reason: str = "malformed") -> None:
        super().__init__(message, data={"reason": reason})
        self.reason = reason


class BroadcastError(ChatError):
    """Base class for broadcast fanout conditions."""


class BroadcastLaggedError(BroadcastError):
    """Raised by a subscriber that fell behind the fanout's retained window.

    The subscriber has already been moved to the oldest retained line; the next
    receive returns it.

    Args:
        skipped: Number of lines the subscriber will never see.
    """

    def __init__(self, skipped: int) -> None:
        super().__init__(
            f"Subscriber lagged behind by {skipped} line(s)", data={"skipped": skipped}
        )
        self.skipped = skipped


class BroadcastClosedError(BroadcastError):
    """Raised when receiving from a fanout that has been closed and drained."""


class ConfigError(ChatError):
    """Raised when configuration cannot be read or fails validation."""


__all__ = [
    "ChatError",
    "CodecError",
    "LineTooLongError",
    "InvalidEncodingError",
    "ParseMessageError",
    "BroadcastError",
    "BroadcastLaggedError",
    "BroadcastClosedError",
    "ConfigError",
]
