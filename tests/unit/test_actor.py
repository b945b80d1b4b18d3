"""
Unit tests for the server actor.
"""

import asyncio

import pytest

from lanchat.protocol.command import Disconnect, SendText, SetNickname
from lanchat.protocol.message import ParsedMessage
from lanchat.server.actor import ServerActor
from lanchat.server.broadcast import BroadcastChannel
from lanchat.server.internal_message import InboundEvent, ReplySlot, Response

ADDR_A = ("10.0.0.1", 5000)
ADDR_B = ("10.0.0.2", 5000)


def _event(addr, command):
    return InboundEvent(addr, ParsedMessage(command))


@pytest.mark.asyncio
class TestServerActor:
    """Command application, nickname scoping and replies."""

    async def _setup(self):
        self.inbox = asyncio.Queue(maxsize=10)
        self.channel = BroadcastChannel(capacity=10)
        self.receiver = self.channel.subscribe()
        self.actor = ServerActor(self.inbox, self.channel)

    async def test_msg_renders_with_registered_nickname(self):
        await self._setup()
        self.actor.handle(_event(ADDR_A, SetNickname("olly")))
        self.actor.handle(_event(ADDR_A, SendText("hi")))
        assert self.receiver.try_recv() == ":olly MSG :hi\r\n"

    async def test_msg_from_unknown_address_uses_default_identity(self):
        await self._setup()
        self.actor.handle(_event(ADDR_A, SetNickname("olly")))
        self.actor.handle(_event(ADDR_B, SendText("hi")))
        assert self.receiver.try_recv() == ":unknown MSG :hi\r\n"

    async def test_nick_can_be_changed(self):
        await self._setup()
        self.actor.handle(_event(ADDR_A, SetNickname("olly")))
        self.actor.handle(_event(ADDR_A, SetNickname("bob")))
        self.actor.handle(_event(ADDR_A, SendText("x")))
        assert self.receiver.try_recv() == ":bob MSG :x\r\n"

    async def test_quit_clears_nickname(self):
        await self._setup()
        self.actor.handle(_event(ADDR_A, SetNickname("olly")))
        self.actor.handle(_event(ADDR_A, Disconnect()))
        # A new connection reusing the same address
        self.actor.handle(_event(ADDR_A, SendText("hi")))
        assert self.receiver.try_recv() == ":unknown MSG :hi\r\n"

    async def test_replies(self):
        await self._setup()
        nick = _event(ADDR_A, SetNickname("olly"))
        msg = _event(ADDR_A, SendText("hi"))
        quit_ = _event(ADDR_A, Disconnect())
        for event in (nick, msg, quit_):
            self.actor.handle(event)
        assert await nick.reply.wait() is Response.ACK
        assert await msg.reply.wait() is Response.ACK
        assert await quit_.reply.wait() is Response.HANG_UP

    async def test_abandoned_reply_does_not_break_actor(self):
        await self._setup()
        event = _event(ADDR_A, SendText("hi"))
        event.reply.abandon()
        self.actor.handle(event)
        assert self.receiver.try_recv() == ":unknown MSG :hi\r\n"
        assert self.actor.processed == 1

    async def test_msg_after_broadcast_closed_still_acks(self):
        await self._setup()
        self.channel.close()
        event = _event(ADDR_A, SendText("late"))
        self.actor.handle(event)
        assert await event.reply.wait() is Response.ACK

    async def test_custom_default_nickname(self):
        await self._setup()
        actor = ServerActor(self.inbox, self.channel, default_nickname="guest")
        actor.handle(_event(ADDR_A, SendText("yo")))
        assert self.receiver.try_recv() == ":guest MSG :yo\r\n"

    async def test_run_processes_in_order_until_sentinel(self):
        await self._setup()
        task = asyncio.create_task(self.actor.run())
        await self.inbox.put(_event(ADDR_A, SetNickname("olly")))
        await self.inbox.put(_event(ADDR_A, SendText("one")))
        await self.inbox.put(_event(ADDR_B, SendText("two")))
        await self.inbox.put(None)
        await asyncio.wait_for(task, timeout=1)
        assert self.receiver.try_recv() == ":olly MSG :one\r\n"
        assert self.receiver.try_recv() == ":unknown MSG :two\r\n"
        assert self.actor.processed == 3
        assert self.inbox.empty()


@pytest.mark.asyncio
async def test_reply_slot_is_single_use():
    slot = ReplySlot()
    assert not slot.sent
    assert slot.send(Response.ACK)
    assert slot.sent
    assert not slot.send(Response.HANG_UP)
    assert await slot.wait() is Response.ACK
