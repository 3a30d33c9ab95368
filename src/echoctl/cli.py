"""Root CLI group for echoctl with global flags and command registration."""

from __future__ import annotations

import click

from echoctl import __version__
from echoctl.commands import register_commands
from echoctl.commands._base import EchoGroup
from echoctl.commands._context import AppContext
from echoctl.config.settings import EchoSettings


@click.group(
    cls=EchoGroup,
    invoke_without_command=True,
    examples="""\
  # Terminal 1: run the server
  echoctl serve

  # Terminal 2: send the greeting and print the echo
  echoctl send

  # Use a project config file
  echoctl -c ./echoctl.toml send""",
)
@click.version_option(version=__version__, prog_name="echoctl")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """echoctl: line-oriented TCP echo server and client."""
    ctx.ensure_object(dict)
    settings = EchoSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
