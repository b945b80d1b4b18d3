"""CRLF line codec for the chat protocol.

The decoder pulls complete lines out of a growing ``bytearray`` and parses
them. A line that grows past ``max_length`` without a CRLF is reported once
with ``LineTooLongError``; the decoder then discards bytes until the next CRLF
and resumes normal decoding after it.
"""

from __future__ import annotations

from enum import Enum, auto

from ..constants import MAX_LINE_LENGTH, MIN_LINE_LENGTH
from ..errors.internal import InvalidEncodingError, LineTooLongError
from .message import ParsedMessage, parse_message

_CRLF = b"\r\n"
_CR = 0x0D


class DecoderState(Enum):
    NORMAL = auto()
    DISCARDING = auto()


class LineCodec:
    """Stateful decoder/encoder for CRLF-terminated protocol lines.

    Args:
        max_length: Maximum line length in bytes, including the CRLF.
    """

    def __init__(self, max_length: int = MAX_LINE_LENGTH) -> None:
        if max_length < MIN_LINE_LENGTH:
            raise ValueError(f"max_length must be at least {MIN_LINE_LENGTH} bytes, CRLF included")
        self.max_length = max_length
        self.state = DecoderState.NORMAL
        # Bytes before this index are known not to start a CRLF
        self.next_index = 0

    @property
    def is_discarding(self) -> bool:
        return self.state is DecoderState.DISCARDING

    def decode(self, buf: bytearray) -> ParsedMessage | None:
        """Decode the next message from ``buf``, consuming its bytes.

        Returns ``None`` when no complete line is buffered yet; call again
        after more bytes arrive.

        Raises:
            LineTooLongError: no CRLF within ``max_length``; discard mode begins.
            InvalidEncodingError: the line was consumed but is not UTF-8.
            ParseMessageError: the line was consumed but is not a valid message.
        """
        while True:
            read_to = min(self.max_length + 1, len(buf))
            end = buf.find(_CRLF, self.next_index, read_to)

            if self.state is DecoderState.DISCARDING:
                if end >= 0:
                    del buf[: end + 2]
                    self.state = DecoderState.NORMAL
                    self.next_index = 0
                    continue
                drop = read_to
                # A trailing CR may be the first half of the CRLF we are looking for
                if drop and buf[drop - 1] == _CR:
                    drop -= 1
                del buf[:drop]
                self.next_index = 0
                if not buf or drop == 0:
                    return None
                continue

            if end >= 0:
                line = bytes(buf[:end])
                del buf[: end + 2]
                self.next_index = 0
                return self._parse_line(line)

            if len(buf) > self.max_length:
                self.state = DecoderState.DISCARDING
                raise LineTooLongError(self.max_length)

            self.next_index = max(read_to - 1, 0)
            return None

    @staticmethod
    def _parse_line(line: bytes) -> ParsedMessage:
        try:
            text = line.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidEncodingError(
                "Unable to decode input as UTF-8", data={"length": len(line)}
            ) from e
        return parse_message(text)

    @staticmethod
    def encode(line: str, dst: bytearray) -> None:
        """Append an already rendered, CRLF-terminated line to ``dst``."""
        dst += line.encode("utf-8")

    def reset(self) -> None:
        self.state = DecoderState.NORMAL
        self.next_index = 0
