"""Blocking TCP echo client: connect, send one line, read one line."""

from __future__ import annotations

import logging
import socket

from echoctl.config.models import ClientConfig
from echoctl.domain.errors import ConnectError, StreamError
from echoctl.domain.framing import GREETING, decode_line, encode_line, strip_delimiter
from echoctl.infrastructure.streams import LineStream

logger = logging.getLogger(__name__)


class EchoClient:
    """Single-shot echo client.

    Each :meth:`run` opens its own connection and closes it before
    returning; nothing is reused between runs.
    """

    def __init__(self, config: ClientConfig) -> None:
        self.config = config

    def run(self, message: str | None = None) -> str:
        """Send *message* (default: the configured message) and return the reply.

        Raises:
            ValueError: If *message* spans more than one line.
            ConnectError: If the server cannot be reached.
            StreamError: If sending or receiving fails, or the server
                closes without replying.
        """
        text = self.config.message if message is None else message
        body = strip_delimiter(encode_line(text))
        host, port = self.config.host, self.config.port

        try:
            sock = socket.create_connection((host, port), timeout=self.config.timeout)
        except OSError as exc:
            raise ConnectError(
                f"cannot connect to {host}:{port}: {exc}", host=host, port=port
            ) from exc
        logger.debug("Connected to %s:%d", host, port)

        with LineStream(sock, (host, port)) as stream:
            stream.write_line(body)
            reply = stream.read_line()
        if reply is None:
            raise StreamError(
                f"{host}:{port} closed the connection without replying", host=host, port=port
            )
        return decode_line(reply)


def run(host: str, port: int, message: str = GREETING) -> str:
    """Send one line to ``host:port`` and return the echoed line."""
    return EchoClient(ClientConfig(host=host, port=port)).run(message)
