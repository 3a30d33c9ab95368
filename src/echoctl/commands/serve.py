"""serve — run the echo server until the process is terminated."""

from __future__ import annotations

import json

import click

from echoctl.commands._base import EchoCommand, endpoint_options
from echoctl.commands._context import AppContext


@click.command(
    cls=EchoCommand,
    examples="""\
  # Listen on all interfaces, port from echoctl.toml (default 5487)
  echoctl serve

  # Loopback only, custom port
  echoctl serve --host 127.0.0.1 --port 9000

  # Hand each connection to a worker thread
  echoctl serve --concurrent --workers 8

  # Drop connections that stay silent for 5 seconds
  echoctl serve --timeout 5""",
)
@endpoint_options(
    host_help="Bind address (empty for all interfaces).",
    port_help="Listen port.",
    timeout_help="Per-connection read/write timeout in seconds.",
)
@click.option(
    "--concurrent/--sequential",
    default=None,
    help="Service connections on worker threads instead of one at a time.",
)
@click.option(
    "--workers",
    default=None,
    type=click.IntRange(min=1),
    help="Worker threads, also the limit on open connections.",
)
@click.pass_obj
def serve(
    app: AppContext,
    host: str | None,
    port: int | None,
    concurrent: bool | None,
    workers: int | None,
    timeout: float | None,
) -> None:
    """Accept connections and echo one line on each."""
    from echoctl.services.echo import ServeService

    json_output = app.settings.json_output

    def show_line(line: str) -> None:
        click.echo(json.dumps({"line": line}, ensure_ascii=False) if json_output else line)

    def show_ready(endpoint: str) -> None:
        if not app.settings.quiet:
            click.echo(f"Listening on {endpoint}", err=True)

    try:
        result = ServeService(app.settings).serve(
            show_line,
            on_ready=show_ready,
            host=host,
            port=port,
            concurrent=concurrent,
            workers=workers,
            timeout=timeout,
        )
    except KeyboardInterrupt:
        click.echo("Interrupted, server stopped.", err=True)
        raise SystemExit(130) from None
    app.emit(result)
