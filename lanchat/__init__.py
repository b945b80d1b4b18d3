"""LAN chat server.

A line-oriented TCP chat server: clients set a nickname, send messages that
are relayed to every connected client, and quit.
"""

__version__ = "1.0.0"
