"""Listener and lifecycle wiring for the chat server."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from ..config.model import ServerConfig
from ..errors.handling import handle_retryable_error
from ..errors.internal import BroadcastClosedError
from .actor import ServerActor
from .broadcast import BroadcastChannel
from .connection import ConnectionBridge
from .internal_message import InboundEvent


class ChatServer:
    """Owns the listener, the actor task and every connection task."""

    def __init__(self, config: ServerConfig | None = None) -> None:
        self.config = config or ServerConfig()
        self.inbox: asyncio.Queue[InboundEvent | None] = asyncio.Queue(
            maxsize=self.config.inbound_queue_size
        )
        self.broadcast = BroadcastChannel(self.config.broadcast_capacity)
        self.actor = ServerActor(self.inbox, self.broadcast)
        self._server: asyncio.Server | None = None
        self._actor_task: asyncio.Task[None] | None = None
        self._connections: set[asyncio.Task[Any]] = set()

    @property
    def address(self) -> tuple[str, int]:
        """Host and port the listener is bound to."""
        if not self._server or not self._server.sockets:
            raise RuntimeError("Server is not listening")
        sockname = self._server.sockets[0].getsockname()
        return sockname[0], sockname[1]

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    async def start(self) -> None:
        """Start the actor and bind the listener, retrying transient bind errors."""
        if self._server is not None:
            return
        self._actor_task = asyncio.create_task(self.actor.run(), name="lanchat-actor")
        try:
            self._server = await handle_retryable_error(
                self._bind, "bind listener", max_attempts=self.config.bind_attempts
            )
        except BaseException:
            await self._stop_actor()
            raise
        host, port = self.address
        logging.info(f"🚀 Listening on {host}:{port}")

    async def _bind(self, attempt: int) -> asyncio.Server:
        logging.debug(f"🔗 Binding {self.config.host}:{self.config.port} attempt={attempt}")
        return await asyncio.start_server(
            self._handle_client, self.config.host, self.config.port
        )

    async def serve_forever(self) -> None:
        await self.start()
        assert self._server is not None
        await self._server.serve_forever()

    async def _handle_client(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        addr = writer.get_extra_info("peername") or id(writer)
        try:
            receiver = self.broadcast.subscribe()
        except BroadcastClosedError:
            logging.debug(f"🚫 Refusing connection during shutdown addr={addr}")
            writer.close()
            return
        task = asyncio.current_task()
        if task is not None:
            self._connections.add(task)
        try:
            bridge = ConnectionBridge(
                reader,
                writer,
                addr,
                self.inbox,
                receiver,
                max_line_length=self.config.max_line_length,
                read_chunk_size=self.config.read_chunk_size,
                close_timeout=self.config.connection_close_timeout,
            )
            await bridge.run()
        finally:
            if task is not None:
                self._connections.discard(task)

    async def close(self) -> None:
        """Stop accepting, drop every connection, then stop the actor."""
        logging.info("🔻 Chat server shutdown initiated")
        if self._server is not None:
            self._server.close()
        connections = list(self._connections)
        for task in connections:
            task.cancel()
        await asyncio.gather(*connections, return_exceptions=True)
        if self._server is not None:
            await self._server.wait_closed()
            self._server = None
        self.broadcast.close()
        await self._stop_actor()
        logging.info("✅ Chat server shutdown complete")

    async def _stop_actor(self) -> None:
        if self._actor_task is None:
            return
        if not self._actor_task.done():
            await self.inbox.put(None)
        await asyncio.gather(self._actor_task, return_exceptions=True)
        self._actor_task = None

    async def __aenter__(self) -> ChatServer:
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()


async def run_server(config: ServerConfig, stop: asyncio.Event | None = None) -> None:
    """Run a server until ``stop`` is set (or forever when it is None)."""
    async with ChatServer(config) as server:
        if stop is None:
            await server.serve_forever()
        else:
            await stop.wait()
        logging.debug(f"🧮 Events processed={server.actor.processed}")
