"""Server actor: sole owner of connection identities.

All nickname state lives in this object and is only touched from ``run``,
one inbound event at a time. Connections talk to it exclusively through the
inbound queue and their reply slot.
"""

from __future__ import annotations

import asyncio
import logging

from ..constants import DEFAULT_NICKNAME
from ..errors.internal import BroadcastClosedError
from ..protocol.command import Disconnect, SendText, SetNickname
from ..protocol.message import ParsedMessage
from .broadcast import BroadcastChannel
from .internal_message import Address, InboundEvent, Response


class ServerActor:
    """Applies client commands and fans chat lines out to every connection."""

    def __init__(
        self,
        inbox: asyncio.Queue[InboundEvent | None],
        broadcast: BroadcastChannel,
        default_nickname: str = DEFAULT_NICKNAME,
    ) -> None:
        self._inbox = inbox
        self._broadcast = broadcast
        self._default_nickname = default_nickname
        self._nicknames: dict[Address, str] = {}
        self.processed = 0

    async def run(self) -> None:
        """Process events until a ``None`` shutdown sentinel is received."""
        logging.info("🎬 Server actor started")
        while True:
            event = await self._inbox.get()
            try:
                if event is None:
                    break
                self.handle(event)
            finally:
                self._inbox.task_done()
        logging.info(
            f"🏁 Server actor stopped processed={self.processed} "
            f"registered={len(self._nicknames)}"
        )

    def handle(self, event: InboundEvent) -> None:
        """Apply one event. Never raises for well-formed messages."""
        self.processed += 1
        addr = event.addr
        nickname = self._nicknames.get(addr, self._default_nickname)
        command = event.message.command

        if isinstance(command, SetNickname):
            self._nicknames[addr] = command.nickname
            logging.debug(f"🏷️ Nickname set addr={addr} old={nickname} new={command.nickname}")
            self._reply(event, Response.ACK)
        elif isinstance(command, SendText):
            line = ParsedMessage(command=command, prefix=nickname).render()
            try:
                delivered = self._broadcast.publish(line)
            except BroadcastClosedError:
                delivered = 0
            logging.debug(f"📣 Broadcast from {nickname} addr={addr} receivers={delivered}")
            self._reply(event, Response.ACK)
        elif isinstance(command, Disconnect):
            removed = self._nicknames.pop(addr, None)
            logging.debug(f"🚪 Disconnect addr={addr} nickname={removed or self._default_nickname}")
            self._reply(event, Response.HANG_UP)

    @staticmethod
    def _reply(event: InboundEvent, response: Response) -> None:
        if not event.reply.send(response):
            logging.debug(f"📪 Reply dropped addr={event.addr} response={response.name}")
