import pytest
import pytest_asyncio

from lanchat.config.model import ServerConfig
from lanchat.protocol.codec import LineCodec
from lanchat.server.run import ChatServer


@pytest.fixture
def codec():
    """Codec with a small limit so over-length lines are easy to build."""
    return LineCodec(max_length=100)


@pytest.fixture
def server_config():
    return ServerConfig(host="127.0.0.1", port=0, bind_attempts=1, connection_close_timeout=1)


@pytest_asyncio.fixture
async def chat_server(server_config):
    """A running server bound to an ephemeral localhost port."""
    server = ChatServer(server_config)
    await server.start()
    try:
        yield server
    finally:
        await server.close()
