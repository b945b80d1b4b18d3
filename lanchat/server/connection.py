"""Per-connection bridge between a socket, the server actor and the fanout."""

from __future__ import annotations

import asyncio
import contextlib
import logging

from ..constants import (
    CONNECTION_CLOSE_TIMEOUT_SECONDS,
    MAX_LINE_LENGTH,
    READ_CHUNK_SIZE,
)
from ..errors.handling import log_error
from ..errors.internal import (
    BroadcastClosedError,
    BroadcastLaggedError,
    CodecError,
    LineTooLongError,
)
from ..protocol.codec import LineCodec
from ..protocol.command import Disconnect
from ..protocol.message import ParsedMessage
from .broadcast import BroadcastReceiver
from .internal_message import Address, InboundEvent, ReplySlot, Response

_TRANSPORT_ERRORS = (ConnectionError, OSError, asyncio.IncompleteReadError)


class ConnectionBridge:
    """Owns one client connection for its whole lifetime.

    Inbound lines are decoded and handed to the actor strictly one at a time:
    the next line is only submitted once the actor replied to the previous
    one. Broadcast lines are forwarded to the socket concurrently.
    """

    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        addr: Address,
        inbox: asyncio.Queue[InboundEvent | None],
        receiver: BroadcastReceiver,
        *,
        max_line_length: int = MAX_LINE_LENGTH,
        read_chunk_size: int = READ_CHUNK_SIZE,
        close_timeout: float = CONNECTION_CLOSE_TIMEOUT_SECONDS,
    ) -> None:
        self.reader = reader
        self.writer = writer
        self.addr = addr
        self.inbox = inbox
        self.receiver = receiver
        self.codec = LineCodec(max_line_length)
        self.read_chunk_size = read_chunk_size
        self.close_timeout = close_timeout
        self.close_reason: str | None = None

    async def run(self) -> str:
        """Serve the connection until it hangs up or fails; returns the reason."""
        logging.info(f"🔌 Connection opened addr={self.addr}")
        try:
            self.close_reason = await self._pump()
            if self.close_reason != "hangup":
                await self._evict()
        finally:
            self.receiver.close()
            await self._close_transport()
            logging.info(f"👋 Connection closed addr={self.addr} reason={self.close_reason or 'cancelled'}")
        return self.close_reason

    async def _pump(self) -> str:
        read_task = asyncio.create_task(self._read_loop())
        forward_task = asyncio.create_task(self._forward_loop())
        tasks = {read_task, forward_task}
        try:
            done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
            # Reading decides the outcome when both finish together
            finished = read_task if read_task in done else forward_task
            return finished.result()
        finally:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

    async def _read_loop(self) -> str:
        buf = bytearray()
        while True:
            try:
                data = await self.reader.read(self.read_chunk_size)
            except _TRANSPORT_ERRORS as e:
                log_error("Connection read failed", e, context={"addr": self.addr}, level=logging.WARNING)
                return "transport_error"
            if not data:
                return "eof"
            buf += data
            while True:
                try:
                    message = self.codec.decode(buf)
                except LineTooLongError as e:
                    logging.warning(
                        f"✂️ Line too long, discarding addr={self.addr} max_length={e.max_length}"
                    )
                    continue
                except CodecError as e:
                    logging.debug(f"🗑️ Dropped line addr={self.addr} error={e}")
                    continue
                if message is None:
                    break
                if await self._submit(message) is Response.HANG_UP:
                    return "hangup"

    async def _forward_loop(self) -> str:
        out = bytearray()
        while True:
            try:
                line = await self.receiver.recv()
            except BroadcastLaggedError as e:
                logging.warning(f"🐢 Broadcast lag addr={self.addr} skipped={e.skipped}")
                continue
            except BroadcastClosedError:
                return "server_shutdown"
            self.codec.encode(line, out)
            try:
                self.writer.write(bytes(out))
                await self.writer.drain()
            except _TRANSPORT_ERRORS as e:
                log_error("Connection write failed", e, context={"addr": self.addr}, level=logging.WARNING)
                return "transport_error"
            finally:
                out.clear()

    async def _submit(self, message: ParsedMessage) -> Response:
        # Client lines never carry provenance
        if message.prefix is not None:
            message = ParsedMessage(command=message.command)
        reply = ReplySlot()
        await self.inbox.put(InboundEvent(self.addr, message, reply))
        try:
            return await reply.wait()
        finally:
            reply.abandon()

    async def _evict(self) -> None:
        """Tell the actor this address is gone so its nickname is released."""
        try:
            await asyncio.wait_for(
                self._submit(ParsedMessage(command=Disconnect())),
                timeout=self.close_timeout,
            )
        except TimeoutError:
            logging.warning(f"⏱️ Eviction not acknowledged addr={self.addr}")

    async def _close_transport(self) -> None:
        self.writer.close()
        with contextlib.suppress(*_TRANSPORT_ERRORS, TimeoutError):
            await asyncio.wait_for(
                self.writer.wait_closed(), timeout=self.close_timeout
            )
