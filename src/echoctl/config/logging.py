"""structlog configuration for echoctl.

Two output modes, both on stderr:
- Human (default): console lines, prefixed with ``[peer]`` while a server
  connection is being serviced
- JSON (--log-json): one object per line, ``peer`` kept as its own field

Records from the server and client loggers carry a ``component`` field.
"""

from __future__ import annotations

import logging
import sys

import structlog
from structlog.typing import EventDict, Processor, WrappedLogger

SERVER_LOGGER = "echoctl.infrastructure.server"
CLIENT_LOGGER = "echoctl.infrastructure.client"

_COMPONENTS = {SERVER_LOGGER: "server", CLIENT_LOGGER: "client"}


def add_component(_logger: WrappedLogger, _method: str, event_dict: EventDict) -> EventDict:
    """Tag server and client records with ``component``."""
    component = _COMPONENTS.get(event_dict.get("logger", ""))
    if component is not None:
        event_dict["component"] = component
    return event_dict


def prefix_peer(_logger: WrappedLogger, _method: str, event_dict: EventDict) -> EventDict:
    """Move ``peer`` in front of the message for console output."""
    peer = event_dict.pop("peer", None)
    if peer is not None:
        event_dict["event"] = f"[{peer}] {event_dict.get('event', '')}"
    return event_dict


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
) -> None:
    """Configure structlog processors and output routing.

    Args:
        verbose: Enable DEBUG-level output. When False, only WARNING+.
        log_json: Use JSON renderer instead of console renderer.
    """
    echo_level = logging.DEBUG if verbose else logging.WARNING

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_component,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    render_chain: list[Processor] = [
        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
    ]
    if log_json:
        render_chain += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        render_chain += [prefix_peer, structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=render_chain,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger("echoctl").setLevel(echo_level)
