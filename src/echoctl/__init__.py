"""echoctl: line-oriented TCP echo server and client."""

__version__ = "0.1.0"
