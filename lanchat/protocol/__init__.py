"""Wire protocol package.

BNF for the protocol:

    Message    ::= (Prefix Space)? Command CRLF
    Prefix     ::= ':' Nickname
    Command    ::= Letter+ Params*
    Params     ::= (Space Middle)* (Space ':' Trailing)?
    Middle     ::= NoColonCRLFSpace (':' | NoColonCRLFSpace)*
    Trailing   ::= ( ':' | Space | NoColonCRLFSpace )*
    Nickname   ::= ascii_alphabetical+
"""

from .codec import DecoderState, LineCodec  # noqa: F401
from .command import (  # noqa: F401
    Command,
    Disconnect,
    Params,
    SendText,
    SetNickname,
    parse_command,
    parse_params,
    render_command,
)
from .message import CRLF, ParsedMessage, parse_message  # noqa: F401

__all__ = [
    "CRLF",
    "Command",
    "DecoderState",
    "Disconnect",
    "LineCodec",
    "Params",
    "ParsedMessage",
    "SendText",
    "SetNickname",
    "parse_command",
    "parse_message",
    "parse_params",
    "render_command",
]
