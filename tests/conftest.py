"""Shared pytest fixtures and test helpers for echoctl tests."""

from __future__ import annotations

import logging
import os
import socket
import threading
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from echoctl.config.models import ClientConfig, ServerConfig
from echoctl.infrastructure.server import EchoServer

LOOPBACK = "127.0.0.1"


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every test from an empty directory with no ECHOCTL_* environment.

    Keeps a developer's own echoctl.toml or exported variables from leaking
    into settings discovery.
    """
    for name in list(os.environ):
        if name.startswith("ECHOCTL_"):
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Undo configure_logging() calls made by CLI invocations."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    echo = logging.getLogger("echoctl")
    echo_level = echo.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    echo.setLevel(echo_level)


ServerFactory = Callable[..., EchoServer]


@pytest.fixture
def start_server() -> Generator[ServerFactory]:
    """Start EchoServer instances on ephemeral loopback ports.

    The listening socket is bound before the serving thread starts, so
    clients can connect as soon as the factory returns. Every server is
    shut down and closed at teardown.
    """
    started: list[tuple[EchoServer, threading.Thread]] = []

    def _start(on_line: Callable[[str], None] | None = None, **options: Any) -> EchoServer:
        config = ServerConfig(host=LOOPBACK, port=0, poll_interval=0.05, **options)
        server = EchoServer(config, on_line=on_line)
        server.bind()
        thread = threading.Thread(target=server.serve_forever, daemon=True)
        thread.start()
        started.append((server, thread))
        return server

    yield _start

    for server, thread in started:
        server.shutdown(timeout=5)
        thread.join(timeout=5)
        server.close()


@pytest.fixture
def echo_server(start_server: ServerFactory) -> EchoServer:
    """A sequential echo server on an ephemeral loopback port."""
    return start_server()


@pytest.fixture
def closed_port() -> int:
    """A loopback port with nothing listening on it."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind((LOOPBACK, 0))
        return s.getsockname()[1]


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def client_config(server: EchoServer, **kwargs: Any) -> ClientConfig:
    """ClientConfig pointing at a running test server."""
    assert server.address is not None
    host, port = server.address
    return ClientConfig(host=host, port=port, **kwargs)


def raw_exchange(server: EchoServer, payload: bytes, *, timeout: float = 5.0) -> bytes:
    """Send raw bytes, half-close, and read everything the server returns."""
    assert server.address is not None
    with socket.create_connection(server.address, timeout=timeout) as sock:
        sock.sendall(payload)
        sock.shutdown(socket.SHUT_WR)
        chunks: list[bytes] = []
        while chunk := sock.recv(4096):
            chunks.append(chunk)
    return b"".join(chunks)
