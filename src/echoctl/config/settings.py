"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``ECHOCTL_*`` prefix, ``__`` for nested sections
  3. TOML file    — ``echoctl.toml`` discovered via walk-up
  4. Code defaults — baked into the section models

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource` that
reuses the ``find_config`` walk-up discovery from
:mod:`echoctl.config.discovery`.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any, TypeVar

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from echoctl.config.discovery import find_config
from echoctl.config.models import ClientConfig, ServerConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from an ``echoctl.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                import click

                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


_SectionT = TypeVar("_SectionT", ServerConfig, ClientConfig)

# Thread-local storage for TOML path during construction.
_tls = threading.local()


class EchoSettings(BaseSettings):
    """Unified settings for the echoctl CLI.

    Stored in ``click.Context.obj`` at the CLI root level, frozen after
    construction. Per-command overrides (``--host``, ``--port``) are applied
    with :meth:`server_config` / :meth:`client_config`, which return
    validated copies of the section instead of mutating the settings.

    Attributes:
        config_path: The TOML file that was loaded, or None.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "ECHOCTL_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    server: ServerConfig = Field(default_factory=ServerConfig)
    client: ClientConfig = Field(default_factory=ClientConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        search_root: Path | None = None,
        **cli_flags: Any,
    ) -> EchoSettings:
        """Construct settings from CLI invocation.

        Discovers ``echoctl.toml`` via walk-up from *search_root* (default:
        cwd), or uses the explicit *config_path*, and merges CLI flags as
        highest-priority overrides.

        Raises:
            click.ClickException: If *config_path* does not name a file.
        """
        toml_path: Path | None = None
        if config_path:
            toml_path = Path(config_path)
            if not toml_path.is_file():
                import click

                raise click.ClickException(f"Config file not found: {config_path}")
        else:
            toml_path = find_config(search_root)

        _tls.toml_path = toml_path
        try:
            return cls(config_path=toml_path, **cli_flags)
        finally:
            _tls.toml_path = None

    def server_config(self, **overrides: Any) -> ServerConfig:
        """The ``[server]`` section with non-None *overrides* applied."""
        return _apply(self.server, overrides)

    def client_config(self, **overrides: Any) -> ClientConfig:
        """The ``[client]`` section with non-None *overrides* applied."""
        return _apply(self.client, overrides)


def _apply(section: _SectionT, overrides: dict[str, Any]) -> _SectionT:
    updates = {key: value for key, value in overrides.items() if value is not None}
    if not updates:
        return section
    return type(section).model_validate({**section.model_dump(), **updates})
