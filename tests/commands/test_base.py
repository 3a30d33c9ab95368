"""Tests for the shared command pieces in commands._base."""

from __future__ import annotations

import click
import pytest
from click.testing import CliRunner

from echoctl.commands._base import EchoCommand, EchoGroup, endpoint_options, single_line


def _endpoint_command() -> click.Command:
    @click.command(cls=EchoCommand, examples="  demo --port 1")
    @endpoint_options(host_help="H.", port_help="P.", timeout_help="T.")
    def demo(host: str | None, port: int | None, timeout: float | None) -> None:
        click.echo(f"{host}|{port}|{timeout}")

    return demo


class TestEndpointOptions:
    def test_defaults_are_none(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(_endpoint_command(), [])
        assert result.output.strip() == "None|None|None"

    def test_values_parsed(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            _endpoint_command(), ["--host", "h", "--port", "9000", "--timeout", "1.5"]
        )
        assert result.output.strip() == "h|9000|1.5"

    @pytest.mark.parametrize("args", [["--port", "70000"], ["--port", "-1"], ["--timeout", "0"]])
    def test_out_of_range_rejected(self, cli_runner: CliRunner, args: list[str]) -> None:
        result = cli_runner.invoke(_endpoint_command(), args)
        assert result.exit_code == 2

    def test_help_order(self, cli_runner: CliRunner) -> None:
        output = cli_runner.invoke(_endpoint_command(), ["--help"]).output
        assert output.index("--host") < output.index("--port") < output.index("--timeout")


class TestExamples:
    def test_command_examples(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(_endpoint_command(), ["--examples"])
        assert result.exit_code == 0
        assert "demo --port 1" in result.output

    def test_group_without_examples_has_no_flag(self, cli_runner: CliRunner) -> None:
        group = EchoGroup(name="bare")
        assert all(p.name != "examples" for p in group.params)

    def test_group_defaults_subcommands_to_echo_command(self) -> None:
        group = EchoGroup(name="g")

        @group.command(examples="  g sub")
        def sub() -> None:
            pass

        assert isinstance(sub, EchoCommand)
        assert sub.examples == "  g sub"


class TestSingleLine:
    def test_none_passes(self) -> None:
        assert single_line(click.Context(click.Command("x")), click.Argument(["m"]), None) is None

    def test_newline_rejected(self) -> None:
        ctx = click.Context(click.Command("x"))
        with pytest.raises(click.BadParameter):
            single_line(ctx, click.Argument(["m"]), "a\nb")
