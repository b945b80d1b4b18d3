"""Internal messages.

Types used for passing messages from a client connection to the server actor
and for the actor's per-message reply.
"""

from __future__ import annotations

import asyncio
from collections.abc import Hashable
from dataclasses import dataclass, field
from enum import Enum, auto

from ..protocol.message import ParsedMessage

# Transport-level peer address; opaque to the protocol, unique per live connection.
Address = Hashable


class Response(Enum):
    """A response that the actor sends back to the task handling a connection."""

    ACK = auto()
    HANG_UP = auto()


class ReplySlot:
    """Single-use, single-value channel from the actor back to one connection."""

    def __init__(self) -> None:
        self._future: asyncio.Future[Response] = asyncio.get_running_loop().create_future()

    @property
    def sent(self) -> bool:
        return self._future.done()

    def send(self, response: Response) -> bool:
        """Deliver ``response``. Returns False if the slot was already used or abandoned."""
        if self._future.done():
            return False
        self._future.set_result(response)
        return True

    def abandon(self) -> None:
        """Give up waiting; later ``send`` calls become no-ops."""
        if not self._future.done():
            self._future.cancel()

    async def wait(self) -> Response:
        return await self._future


@dataclass(slots=True)
class InboundEvent:
    """A message from a connection, addressed to the server actor."""

    addr: Address
    message: ParsedMessage
    reply: ReplySlot = field(default_factory=ReplySlot)
