"""Allow ``python -m echoctl``."""

from echoctl.cli import cli

cli()
