"""Tests for the error taxonomy."""

import pytest

from echoctl.domain.errors import BindError, ConnectError, EchoError, StreamError


class TestErrorTaxonomy:
    @pytest.mark.parametrize(
        ("cls", "code"),
        [
            (BindError, "BIND_FAILED"),
            (ConnectError, "CONNECT_FAILED"),
            (StreamError, "STREAM_FAILED"),
        ],
    )
    def test_codes(self, cls: type[EchoError], code: str) -> None:
        err = cls("boom")
        assert isinstance(err, EchoError)
        assert err.code == code
        assert str(err) == "boom"
        assert err.message == "boom"

    def test_connect_error_is_builtin_connection_error(self) -> None:
        err = ConnectError("refused", host="localhost", port=5487)
        assert isinstance(err, ConnectionError)
        with pytest.raises(ConnectionError):
            raise err

    def test_endpoint(self) -> None:
        assert StreamError("x", host="10.0.0.1", port=80).endpoint == "10.0.0.1:80"

    def test_endpoint_wildcard_host(self) -> None:
        assert BindError("x", host="", port=5487).endpoint == "*:5487"

    def test_endpoint_unknown(self) -> None:
        assert EchoError("x").endpoint is None
