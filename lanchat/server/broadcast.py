"""Bounded multi-consumer fanout of rendered outbound lines.

Every subscriber sees every line published after it subscribed, in order, as
long as it keeps up. The channel retains only the last ``capacity`` lines. A
subscriber that falls further behind than that gets a single
``BroadcastLaggedError`` carrying the number of lines it missed, and its next
receive returns the oldest line still retained.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque

from ..errors.internal import BroadcastClosedError, BroadcastLaggedError


class BroadcastChannel:
    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._buffer: deque[str] = deque(maxlen=capacity)
        # Sequence number the next published line will get
        self._next_seq = 0
        self._receiver_count = 0
        self._closed = False
        self._wakeup = asyncio.Event()

    @property
    def receiver_count(self) -> int:
        return self._receiver_count

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def _oldest_seq(self) -> int:
        return self._next_seq - len(self._buffer)

    def subscribe(self) -> BroadcastReceiver:
        """Return a receiver that starts at the next published line."""
        if self._closed:
            raise BroadcastClosedError("Cannot subscribe to a closed broadcast channel")
        self._receiver_count += 1
        return BroadcastReceiver(self, self._next_seq)

    def publish(self, line: str) -> int:
        """Publish ``line`` to every current subscriber without blocking.

        Returns the number of subscribers the line was queued for; with no
        subscribers the line is dropped and 0 is returned.
        """
        if self._closed:
            raise BroadcastClosedError("Cannot publish to a closed broadcast channel")
        if self._receiver_count == 0:
            logging.debug("📭 Broadcast dropped, no subscribers")
            return 0
        self._buffer.append(line)
        self._next_seq += 1
        self._notify()
        return self._receiver_count

    def close(self) -> None:
        """Stop accepting lines; receivers drain what is retained, then see closed."""
        if self._closed:
            return
        self._closed = True
        self._notify()

    def _notify(self) -> None:
        self._wakeup.set()
        self._wakeup = asyncio.Event()

    def _unsubscribe(self) -> None:
        self._receiver_count -= 1


class BroadcastReceiver:
    def __init__(self, channel: BroadcastChannel, next_seq: int) -> None:
        self._channel = channel
        self._next_seq = next_seq
        self._closed = False

    @property
    def pending(self) -> int:
        """Lines published since this receiver last caught up (including lost ones)."""
        return self._channel._next_seq - self._next_seq  # noqa: SLF001

    def try_recv(self) -> str | None:
        """Return the next line, or None when nothing new is available.

        Raises:
            BroadcastLaggedError: lines were overwritten before being read.
            BroadcastClosedError: the channel is closed and fully drained.
        """
        if self._closed:
            raise BroadcastClosedError("Receiver has been closed")
        channel = self._channel
        oldest = channel._oldest_seq  # noqa: SLF001
        if self._next_seq < oldest:
            skipped = oldest - self._next_seq
            self._next_seq = oldest
            raise BroadcastLaggedError(skipped)
        if self._next_seq < channel._next_seq:  # noqa: SLF001
            line = channel._buffer[self._next_seq - oldest]  # noqa: SLF001
            self._next_seq += 1
            return line
        if channel.closed:
            raise BroadcastClosedError("Broadcast channel closed")
        return None

    async def recv(self) -> str:
        """Wait for the next line. Raises like ``try_recv``."""
        while True:
            wakeup = self._channel._wakeup  # noqa: SLF001
            line = self.try_recv()
            if line is not None:
                return line
            await wakeup.wait()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._channel._unsubscribe()  # noqa: SLF001

    def __enter__(self) -> BroadcastReceiver:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
