"""Chat commands and their parameter grammar.

Command ::= Letter+ Params*
Params  ::= (Space Middle)* (Space ':' Trailing)?
Middle  ::= NoColonCRLFSpace (':' | NoColonCRLFSpace)*
Trailing ::= ( ':' | Space | NoColonCRLFSpace )*
"""

from __future__ import annotations

import string
from dataclasses import dataclass, field

from ..errors.internal import ParseMessageError

_LETTERS = frozenset(string.ascii_letters)
_MIDDLE_STOP = frozenset(" \r\n")
_TRAILING_STOP = frozenset("\r\n")


@dataclass(frozen=True, slots=True)
class SetNickname:
    nickname: str


@dataclass(frozen=True, slots=True)
class SendText:
    text: str


@dataclass(frozen=True, slots=True)
class Disconnect:
    pass


Command = SetNickname | SendText | Disconnect


@dataclass(slots=True)
class Params:
    middle: list[str] = field(default_factory=list)
    trailing: str | None = None


def is_nickname(value: str) -> bool:
    """Return True when ``value`` is one or more ASCII letters."""
    return bool(value) and all(c in _LETTERS for c in value)


def take_letters(text: str) -> tuple[str, str]:
    """Split ``text`` into its leading run of ASCII letters and the remainder."""
    end = 0
    while end < len(text) and text[end] in _LETTERS:
        end += 1
    return text[:end], text[end:]


def _take_until(text: str, stop: frozenset[str]) -> tuple[str, str]:
    end = 0
    while end < len(text) and text[end] not in stop:
        end += 1
    return text[:end], text[end:]


def parse_params(text: str) -> tuple[Params, str]:
    """Parse zero or more middle params and an optional trailing param.

    Returns the parsed params and whatever input they did not consume.
    """
    params = Params()
    rest = text
    while len(rest) > 1 and rest[0] == " " and rest[1] != ":" and rest[1] not in _MIDDLE_STOP:
        middle, rest = _take_until(rest[1:], _MIDDLE_STOP)
        params.middle.append(middle)
    if rest.startswith(" :"):
        params.trailing, rest = _take_until(rest[2:], _TRAILING_STOP)
    return params, rest


def build_command(keyword: str, params: Params) -> Command:
    """Validate keyword arity and build the matching command."""
    if keyword == "NICK":
        if len(params.middle) == 1 and params.trailing is None:
            nickname = params.middle[0]
            if not is_nickname(nickname):
                raise ParseMessageError(
                    f"Invalid nickname: {nickname!r}", reason="invalid_nickname"
                )
            return SetNickname(nickname)
        raise ParseMessageError("Incorrect params for command: NICK", reason="wrong_arity")
    if keyword == "MSG":
        if not params.middle and params.trailing is not None:
            return SendText(params.trailing)
        raise ParseMessageError("Incorrect params for command: MSG", reason="wrong_arity")
    if keyword == "QUIT":
        return Disconnect()
    raise ParseMessageError(f"Unrecognized command: {keyword}", reason="unrecognized_command")


def parse_command(text: str) -> Command:
    """Parse a full command (keyword plus params) with nothing left over."""
    keyword, rest = take_letters(text)
    if not keyword:
        raise ParseMessageError("Missing command keyword", reason="malformed")
    params, rest = parse_params(rest)
    if rest:
        raise ParseMessageError(
            f"Unexpected input after command {keyword}: {rest!r}", reason="malformed"
        )
    return build_command(keyword, params)


def render_command(command: Command) -> str:
    """Render a command as wire text without prefix or CRLF."""
    if isinstance(command, SetNickname):
        return f"NICK {command.nickname}"
    if isinstance(command, SendText):
        return f"MSG :{command.text}"
    if isinstance(command, Disconnect):
        return "QUIT"
    raise TypeError(f"Unsupported command type: {type(command).__name__}")
