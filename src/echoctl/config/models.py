"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, echoctl.toml only contains overrides.
Server and client share the single canonical port.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from echoctl.domain.framing import GREETING, encode_line

DEFAULT_PORT = 5487


class ServerConfig(BaseModel):
    """[server] section.

    An empty ``host`` listens on all interfaces. ``timeout`` applies to each
    accepted connection; None blocks indefinitely.
    """

    model_config = {"frozen": True}

    host: str = ""
    port: int = Field(default=DEFAULT_PORT, ge=0, le=65535)
    backlog: int = Field(default=5, ge=0)
    concurrent: bool = False
    workers: int = Field(default=4, ge=1)
    timeout: float | None = Field(default=None, gt=0)
    poll_interval: float = Field(default=0.5, gt=0)


class ClientConfig(BaseModel):
    """[client] section."""

    model_config = {"frozen": True}

    host: str = "localhost"
    port: int = Field(default=DEFAULT_PORT, ge=0, le=65535)
    message: str = GREETING
    timeout: float | None = Field(default=None, gt=0)

    @field_validator("message")
    @classmethod
    def message_is_single_line(cls, value: str) -> str:
        encode_line(value)
        return value
