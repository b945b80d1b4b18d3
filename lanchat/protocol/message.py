"""Protocol messages: optional origin prefix plus a command.

Message  ::= (Prefix Space)? Command
Prefix   ::= ':' Nickname
Nickname ::= ascii_alphabetical+
"""

from __future__ import annotations

from dataclasses import dataclass

from ..errors.internal import ParseMessageError
from .command import Command, parse_command, render_command, take_letters

CRLF = "\r\n"


@dataclass(frozen=True, slots=True)
class ParsedMessage:
    """A protocol line after parsing.

    ``prefix`` names the originating nickname and is only attached by the
    server when it rebroadcasts a message.
    """

    command: Command
    prefix: str | None = None

    def render(self) -> str:
        """Render as a complete wire line, CRLF included."""
        body = render_command(self.command)
        if self.prefix is not None:
            return f":{self.prefix} {body}{CRLF}"
        return f"{body}{CRLF}"


def parse_prefix(text: str) -> tuple[str | None, str]:
    """Strip a leading ``:nickname `` prefix if present."""
    if not text.startswith(":"):
        return None, text
    nickname, rest = take_letters(text[1:])
    if not nickname or not rest.startswith(" "):
        raise ParseMessageError("Malformed prefix", reason="malformed_prefix")
    return nickname, rest[1:]


def parse_message(line: str) -> ParsedMessage:
    """Parse one CRLF-stripped line.

    Raises:
        ParseMessageError: if the line does not match the grammar or the
            command's parameter shape.
    """
    prefix, rest = parse_prefix(line)
    return ParsedMessage(command=parse_command(rest), prefix=prefix)
