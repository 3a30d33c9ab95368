"""Error taxonomy for echo connections.

Every error carries the endpoint it concerns and keeps the originating
``OSError`` as ``__cause__`` when raised from one.

- :class:`BindError`: the listening port cannot be acquired (process-scoped).
- :class:`ConnectError`: an outbound connection cannot be established
  (process-scoped for the client run).
- :class:`StreamError`: a read or write failed mid-connection
  (connection-scoped on the server).
"""

from __future__ import annotations


class EchoError(Exception):
    """Base class for all echoctl errors."""

    code = "ECHO_FAILED"

    def __init__(self, message: str, *, host: str | None = None, port: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.host = host
        self.port = port

    @property
    def endpoint(self) -> str | None:
        """``host:port`` string, or None when no endpoint is known."""
        if self.port is None:
            return None
        return f"{self.host or '*'}:{self.port}"


class BindError(EchoError):
    """The server could not bind or listen on its port."""

    code = "BIND_FAILED"


class ConnectError(EchoError, ConnectionError):
    """The client could not reach the server."""

    code = "CONNECT_FAILED"


class StreamError(EchoError):
    """A read or write failed after the connection was established."""

    code = "STREAM_FAILED"
