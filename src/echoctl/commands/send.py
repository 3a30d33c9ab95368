"""send — one client run: send a line, print the echoed reply."""

from __future__ import annotations

import click

from echoctl.commands._base import EchoCommand, endpoint_options, single_line
from echoctl.commands._context import AppContext


@click.command(
    cls=EchoCommand,
    examples="""\
  # Send the configured greeting to localhost:5487
  echoctl send

  # Send a custom line to another server
  echoctl send "hello there" --host echo.example.org --port 9000

  # Print only the reply, for scripts
  echoctl -q send ping""",
)
@click.argument("message", required=False, callback=single_line)
@endpoint_options(
    host_help="Server host.",
    port_help="Server port.",
    timeout_help="Connect/read timeout in seconds.",
)
@click.pass_obj
def send(
    app: AppContext,
    message: str | None,
    host: str | None,
    port: int | None,
    timeout: float | None,
) -> None:
    """Send MESSAGE (default: the configured greeting) and print the echo."""
    from echoctl.services.echo import SendService

    result = SendService(app.settings).send(message, host=host, port=port, timeout=timeout)
    app.emit(result)
