from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..constants import (
    BIND_MAX_ATTEMPTS,
    BROADCAST_CAPACITY,
    CONNECTION_CLOSE_TIMEOUT_SECONDS,
    INBOUND_QUEUE_SIZE,
    LANCHAT_HOST,
    LANCHAT_PORT,
    MAX_LINE_LENGTH,
    MIN_LINE_LENGTH,
    READ_CHUNK_SIZE,
)


class ServerConfig(BaseModel):
    """Runtime settings for the chat server.

    Attributes:
        host: Interface the listener binds to.
        port: TCP port; 0 asks the OS for a free one.
        max_line_length: Maximum protocol line length in bytes, CRLF included.
        inbound_queue_size: Capacity of the queue feeding the server actor.
        broadcast_capacity: Lines retained for slow connections before they lag.
        read_chunk_size: Bytes requested per socket read.
        bind_attempts: Attempts to bind the listener before giving up.
        connection_close_timeout: Seconds to wait for an eviction reply or a
            socket close before giving up on a connection.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    host: str = LANCHAT_HOST
    port: int = Field(default=LANCHAT_PORT, ge=0, le=65535)
    max_line_length: int = Field(default=MAX_LINE_LENGTH, ge=MIN_LINE_LENGTH)
    inbound_queue_size: int = Field(default=INBOUND_QUEUE_SIZE, ge=1)
    broadcast_capacity: int = Field(default=BROADCAST_CAPACITY, ge=1)
    read_chunk_size: int = Field(default=READ_CHUNK_SIZE, ge=1)
    bind_attempts: int = Field(default=BIND_MAX_ATTEMPTS, ge=1)
    connection_close_timeout: float = Field(default=CONNECTION_CLOSE_TIMEOUT_SECONDS, gt=0)

    @field_validator("host", mode="before")
    @classmethod
    def validate_host(cls, v: Any) -> str:
        """Strip whitespace and reject empty hosts."""
        if not isinstance(v, str):
            raise ValueError("host must be a string")
        stripped = v.strip()
        if not stripped:
            raise ValueError("host must not be empty")
        return stripped

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ServerConfig:
        """Create a ServerConfig from a dictionary.

        Args:
            data: Mapping of field names to raw values.

        Returns:
            Validated ServerConfig instance.
        """
        return cls.model_validate(dict(data))

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump()
