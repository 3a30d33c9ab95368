"""Tests for Pydantic config models."""

import pytest
from pydantic import ValidationError

from echoctl.config.models import DEFAULT_PORT, ClientConfig, ServerConfig


class TestServerConfig:
    def test_defaults(self) -> None:
        cfg = ServerConfig()
        assert cfg.host == ""
        assert cfg.port == DEFAULT_PORT == 5487
        assert cfg.backlog == 5
        assert cfg.concurrent is False
        assert cfg.workers == 4
        assert cfg.timeout is None

    def test_frozen(self) -> None:
        cfg = ServerConfig()
        with pytest.raises(ValidationError):
            cfg.port = 1  # type: ignore[misc]

    @pytest.mark.parametrize("port", [-1, 65536])
    def test_port_range(self, port: int) -> None:
        with pytest.raises(ValidationError):
            ServerConfig(port=port)

    def test_port_zero_allowed(self) -> None:
        assert ServerConfig(port=0).port == 0

    def test_workers_positive(self) -> None:
        with pytest.raises(ValidationError):
            ServerConfig(workers=0)


class TestClientConfig:
    def test_defaults(self) -> None:
        cfg = ClientConfig()
        assert cfg.host == "localhost"
        assert cfg.port == 5487
        assert cfg.message == "hola"
        assert cfg.timeout is None

    def test_client_and_server_share_port(self) -> None:
        assert ClientConfig().port == ServerConfig().port

    def test_rejects_multiline_message(self) -> None:
        with pytest.raises(ValidationError):
            ClientConfig(message="a\nb")

    def test_timeout_positive(self) -> None:
        with pytest.raises(ValidationError):
            ClientConfig(timeout=0)
