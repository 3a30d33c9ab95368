"""Shared Click pieces for echoctl commands.

``EchoCommand`` and ``EchoGroup`` take an ``examples`` text shown by an
eager ``--examples`` flag. :func:`endpoint_options` adds the ``--host``,
``--port`` and ``--timeout`` options common to ``serve`` and ``send``.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

import click

from echoctl.domain.framing import encode_line

_F = TypeVar("_F", bound=Callable[..., Any])


def _examples_option(examples: str) -> click.Option:
    def show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)

    return click.Option(
        ["--examples"],
        is_flag=True,
        expose_value=False,
        is_eager=True,
        callback=show_examples,
        help="Show usage examples.",
    )


class _ExamplesMixin:
    params: list[click.Parameter]

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(_examples_option(examples))


class EchoCommand(_ExamplesMixin, click.Command):
    """Click Command that supports an ``--examples`` flag."""


class EchoGroup(_ExamplesMixin, click.Group):
    """Root group; subcommands default to :class:`EchoCommand`."""

    command_class = EchoCommand


def endpoint_options(*, host_help: str, port_help: str, timeout_help: str) -> Callable[[_F], _F]:
    """Add ``--host``, ``--port`` and ``--timeout``, all defaulting to None.

    None means "use the configured value", so settings layers still apply.
    """

    def decorator(func: _F) -> _F:
        func = click.option(
            "--timeout",
            default=None,
            type=click.FloatRange(min=0, min_open=True),
            help=timeout_help,
        )(func)
        func = click.option(
            "--port", default=None, type=click.IntRange(0, 65535), help=port_help
        )(func)
        return click.option("--host", default=None, help=host_help)(func)

    return decorator


def single_line(ctx: click.Context, _param: click.Parameter, value: str | None) -> str | None:
    """Reject a message that would not fit on one wire line."""
    if value is None:
        return None
    try:
        encode_line(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc), ctx=ctx) from exc
    return value
