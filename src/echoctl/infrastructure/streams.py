"""Line I/O over a connected socket.

:class:`LineStream` owns the buffered reader and writer made from one socket
and releases both (and the socket) on exit, even when a write fails.
"""

from __future__ import annotations

import socket
from types import TracebackType
from typing import BinaryIO

from echoctl.domain.errors import StreamError
from echoctl.domain.framing import frame, strip_delimiter


class LineStream:
    """Read and write newline-framed lines on one socket.

    Parameters:
        sock: A connected socket. Ownership passes to the stream.
        peer: ``(host, port)`` of the remote side, used in error reports.
    """

    def __init__(self, sock: socket.socket, peer: tuple[str, int]) -> None:
        self._sock = sock
        self.peer = peer
        self._reader: BinaryIO = sock.makefile("rb")
        self._writer: BinaryIO = sock.makefile("wb")

    def __enter__(self) -> LineStream:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def read_line(self) -> bytes | None:
        """Block until one line arrives and return its body.

        Returns None when the peer closes before sending anything.
        A partial line followed by end of stream is returned as is.
        """
        try:
            raw = self._reader.readline()
        except OSError as exc:
            raise self._error("read failed", exc) from exc
        if not raw:
            return None
        return strip_delimiter(raw)

    def write_line(self, body: bytes) -> None:
        """Write *body* plus the delimiter and flush."""
        try:
            self._writer.write(frame(body))
            self._writer.flush()
        except OSError as exc:
            raise self._error("write failed", exc) from exc

    def close(self) -> None:
        """Release the reader, the writer, and the socket."""
        try:
            self._writer.close()
        except OSError:
            # Unflushed data to a peer that already left.
            pass
        finally:
            self._reader.close()
            self._sock.close()

    def _error(self, what: str, exc: OSError) -> StreamError:
        host, port = self.peer[0], self.peer[1]
        return StreamError(f"{what} for {host}:{port}: {exc}", host=host, port=port)
