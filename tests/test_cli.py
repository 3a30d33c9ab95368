"""Tests for the root echoctl CLI."""

import pytest
from click.testing import CliRunner

from echoctl import __version__
from echoctl.cli import cli


def test_cli_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "echoctl" in result.output


def test_cli_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_cli_no_args(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage" in result.output


@pytest.mark.parametrize("flag", ["--json", "-q", "-v", "--log-json"])
def test_global_flag_accepted(cli_runner: CliRunner, flag: str) -> None:
    result = cli_runner.invoke(cli, [flag, "--version"])
    assert result.exit_code == 0


def test_config_option_accepted(cli_runner: CliRunner, tmp_path) -> None:
    config = tmp_path / "custom.toml"
    config.write_text("[client]\nport = 7001\n")
    result = cli_runner.invoke(cli, ["-c", str(config), "send", "--help"])
    assert result.exit_code == 0


def test_missing_config_file_reported(cli_runner: CliRunner, tmp_path) -> None:
    missing = tmp_path / "typo.toml"
    result = cli_runner.invoke(cli, ["-c", str(missing), "send"])
    assert result.exit_code == 1
    assert "Config file not found" in result.output


def test_invalid_toml_reported(cli_runner: CliRunner, tmp_path) -> None:
    (tmp_path / "echoctl.toml").write_text("[client\n")
    result = cli_runner.invoke(cli, ["send"])
    assert result.exit_code == 1
    assert "Invalid TOML" in result.output


@pytest.mark.parametrize("command", ["serve", "send"])
def test_command_registered(cli_runner: CliRunner, command: str) -> None:
    result = cli_runner.invoke(cli, [command, "--help"])
    assert result.exit_code == 0, f"{command} --help failed: {result.output}"


def test_all_commands_in_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    for name in ("serve", "send"):
        assert name in result.output, f"{name} missing from --help"
