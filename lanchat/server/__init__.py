"""Chat server package.

Contains the server actor, the broadcast fanout, the per-connection bridge
and the listener lifecycle.
"""

from .actor import ServerActor  # noqa: F401
from .broadcast import BroadcastChannel, BroadcastReceiver  # noqa: F401
from .connection import ConnectionBridge  # noqa: F401
from .internal_message import Address, InboundEvent, ReplySlot, Response  # noqa: F401
from .run import ChatServer, run_server  # noqa: F401

__all__ = [
    "Address",
    "BroadcastChannel",
    "BroadcastReceiver",
    "ChatServer",
    "ConnectionBridge",
    "InboundEvent",
    "ReplySlot",
    "Response",
    "ServerActor",
    "run_server",
]
