"""Blocking TCP echo server.

One listening socket, one accept loop. Each accepted connection gets one
line read and the same line written back, then is closed. Connections are
handled one at a time unless ``ServerConfig.concurrent`` hands them to a
``ThreadPoolExecutor``; no state is shared between connections. In
concurrent mode at most ``workers`` connections are accepted and in
flight; the rest wait in the listen backlog.

INVARIANT: A failure while servicing one connection never stops the loop.
"""

from __future__ import annotations

import functools
import logging
import selectors
import socket
import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from types import TracebackType

import structlog

from echoctl.config.models import DEFAULT_PORT, ServerConfig
from echoctl.domain.errors import BindError, StreamError
from echoctl.domain.framing import decode_line
from echoctl.infrastructure.streams import LineStream

logger = logging.getLogger(__name__)

LineCallback = Callable[[str], None]


class EchoServer:
    """Accept connections and echo one line on each.

    Parameters:
        config: Listening address and loop options.
        on_line: Called with each echoed line, decoded for display.
            Runs on the thread that serviced the connection.
    """

    def __init__(self, config: ServerConfig, *, on_line: LineCallback | None = None) -> None:
        self.config = config
        self._on_line = on_line
        self._listener: socket.socket | None = None
        self._shutdown_request = threading.Event()
        self._stopped = threading.Event()
        self._stopped.set()
        self._futures: set[Future[None]] = set()

    def __enter__(self) -> EchoServer:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def address(self) -> tuple[str, int] | None:
        """The bound ``(host, port)``, or None before :meth:`bind`."""
        if self._listener is None:
            return None
        host, port = self._listener.getsockname()[:2]
        return host, port

    def bind(self) -> tuple[str, int]:
        """Create the listening socket.

        Raises:
            BindError: If the address cannot be bound or listened on.
        """
        if self._listener is not None:
            assert self.address is not None
            return self.address

        host, port = self.config.host, self.config.port
        try:
            infos = socket.getaddrinfo(
                host or None,
                port,
                type=socket.SOCK_STREAM,
                flags=socket.AI_PASSIVE,
            )
            family, socktype, proto, _, sockaddr = infos[0]
            listener = socket.socket(family, socktype, proto)
        except OSError as exc:
            raise BindError(
                f"cannot bind {host or '*'}:{port}: {exc}", host=host, port=port
            ) from exc

        try:
            listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            listener.bind(sockaddr)
            listener.listen(self.config.backlog)
        except OSError as exc:
            listener.close()
            raise BindError(
                f"cannot bind {host or '*'}:{port}: {exc}", host=host, port=port
            ) from exc

        self._listener = listener
        bound = self.address
        assert bound is not None
        logger.info("Listening on %s:%d", *bound)
        return bound

    def serve_forever(self) -> None:
        """Accept and echo until :meth:`shutdown` is called.

        Binds first if :meth:`bind` was not called.
        """
        self.bind()
        assert self._listener is not None
        self._stopped.clear()

        executor: ThreadPoolExecutor | None = None
        slots: threading.BoundedSemaphore | None = None
        if self.config.concurrent:
            executor = ThreadPoolExecutor(
                max_workers=self.config.workers, thread_name_prefix="echo"
            )
            # One slot per worker: connections beyond that wait in the backlog.
            slots = threading.BoundedSemaphore(self.config.workers)
        try:
            with selectors.DefaultSelector() as selector:
                selector.register(self._listener, selectors.EVENT_READ)
                while not self._shutdown_request.is_set():
                    if slots is not None and not slots.acquire(timeout=self.config.poll_interval):
                        continue
                    accepted = self._next_connection(selector)
                    if accepted is None:
                        if slots is not None:
                            slots.release()
                        continue
                    conn, peer = accepted
                    if executor is None or slots is None:
                        self._service(conn, peer)
                        continue
                    future = executor.submit(self._service, conn, peer)
                    self._futures.add(future)
                    future.add_done_callback(functools.partial(self._finished, slots))
        finally:
            if executor is not None:
                executor.shutdown(wait=True)
            self._shutdown_request.clear()
            self._stopped.set()

    def shutdown(self, timeout: float | None = None) -> None:
        """Stop :meth:`serve_forever` and wait for it to return."""
        self._shutdown_request.set()
        self._stopped.wait(timeout)

    def close(self) -> None:
        """Close the listening socket."""
        if self._listener is not None:
            self._listener.close()
            self._listener = None

    def handle_connection(self, conn: socket.socket, peer: tuple[str, int]) -> bytes | None:
        """Echo one line on *conn* and close it.

        Returns the echoed line body, or None when the peer sent nothing.

        Raises:
            StreamError: If the read or the write fails.
        """
        if self.config.timeout is not None:
            conn.settimeout(self.config.timeout)
        with LineStream(conn, peer) as stream:
            body = stream.read_line()
            if body is None:
                logger.debug("Connection closed before any data")
                return None
            stream.write_line(body)
        logger.debug("Echoed %d bytes", len(body))
        return body

    def _next_connection(
        self, selector: selectors.BaseSelector
    ) -> tuple[socket.socket, tuple[str, int]] | None:
        if not selector.select(self.config.poll_interval):
            return None
        return self._accept()

    def _accept(self) -> tuple[socket.socket, tuple[str, int]] | None:
        assert self._listener is not None
        try:
            conn, addr = self._listener.accept()
        except OSError as exc:
            logger.warning("Accept failed: %s", exc)
            # The listener stays readable on EMFILE; back off instead of spinning.
            self._shutdown_request.wait(self.config.poll_interval)
            return None
        conn.setblocking(True)
        return conn, (addr[0], addr[1])

    def _finished(self, slots: threading.BoundedSemaphore, future: Future[None]) -> None:
        self._futures.discard(future)
        slots.release()
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.error("Connection handler crashed", exc_info=exc)

    def _service(self, conn: socket.socket, peer: tuple[str, int]) -> None:
        with structlog.contextvars.bound_contextvars(peer=f"{peer[0]}:{peer[1]}"):
            logger.debug("Accepted connection")
            try:
                body = self.handle_connection(conn, peer)
            except StreamError as exc:
                logger.warning("Connection failed: %s", exc)
                return
            if body is None or self._on_line is None:
                return
            try:
                self._on_line(decode_line(body))
            except Exception:
                logger.exception("Display failed")


def start(port: int = DEFAULT_PORT, *, on_line: LineCallback | None = None) -> None:
    """Serve on all interfaces at *port*. Never returns.

    Raises:
        BindError: If *port* is unavailable.
    """
    with EchoServer(ServerConfig(port=port), on_line=on_line) as server:
        server.serve_forever()
