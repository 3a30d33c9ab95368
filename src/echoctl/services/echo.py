"""SendService and ServeService: the two echo operations.

Process-scoped errors (bind, connect, stream on the client) become failed
results here; connection-scoped server errors never reach this layer.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from echoctl.domain.errors import BindError, ConnectError, StreamError
from echoctl.infrastructure.client import EchoClient
from echoctl.infrastructure.server import EchoServer, LineCallback
from echoctl.services.base import BaseService
from echoctl.services.result import Op, ServiceResult

if TYPE_CHECKING:
    from echoctl.config.settings import EchoSettings

logger = logging.getLogger(__name__)


class SendService(BaseService):
    """One client run against the configured server."""

    def send(self, message: str | None = None, **overrides: Any) -> ServiceResult:
        """Send one line and return the echoed reply.

        *overrides* replace ``[client]`` settings (``host``, ``port``,
        ``timeout``); None values are ignored.
        """
        op: Op = "send"
        config = self._settings.client_config(**overrides)
        try:
            reply = EchoClient(config).run(message)
        except (ConnectError, StreamError) as exc:
            logger.debug("send failed", exc_info=True)
            return ServiceResult.failure(op, exc)

        return ServiceResult.success(op, {"reply": reply}, host=config.host, port=config.port)


class ServeService(BaseService):
    """Run the echo server with the configured options."""

    def __init__(self, settings: EchoSettings) -> None:
        super().__init__(settings)
        self.server: EchoServer | None = None

    def serve(
        self,
        on_line: LineCallback | None = None,
        *,
        on_ready: LineCallback | None = None,
        **overrides: Any,
    ) -> ServiceResult:
        """Bind and serve until the server is shut down.

        *on_line* receives every echoed line. *on_ready* receives the bound
        ``host:port`` once the listening socket exists. *overrides* replace
        ``[server]`` settings; None values are ignored.
        """
        op: Op = "serve"
        config = self._settings.server_config(**overrides)
        with EchoServer(config, on_line=on_line) as server:
            self.server = server
            try:
                host, port = server.bind()
            except BindError as exc:
                return ServiceResult.failure(op, exc)
            if on_ready is not None:
                on_ready(f"{host}:{port}")
            server.serve_forever()

        return ServiceResult.success(op, {"host": host, "port": port}, concurrent=config.concurrent)
