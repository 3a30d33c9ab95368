"""BaseService: shared foundation for echoctl services.

Every service receives the frozen :class:`EchoSettings` at construction
time and resolves its section (``[server]`` or ``[client]``) per call, so
command-line overrides never mutate the settings object.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from echoctl.config.settings import EchoSettings


class BaseService:
    """Base for service-layer classes."""

    def __init__(self, settings: EchoSettings) -> None:
        self._settings = settings
