"""Subcommand modules for echoctl.

Provides register_commands() which uses deferred imports to keep
``echoctl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the standalone commands on the root CLI group."""
    from echoctl.commands.send import send
    from echoctl.commands.serve import serve

    cli.add_command(serve)
    cli.add_command(send)
