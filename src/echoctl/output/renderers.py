"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`; every
op a service produces has an entry in ``_OP_RENDERERS``.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.text import Text

from echoctl.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from echoctl.services.result import ServiceResult


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS[result.op]
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode.

    A successful send prints only the echoed line, so the output can be
    piped as is.
    """
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op}: {msg}"
    if result.op == "send":
        return str(result.data.get("reply", ""))
    return f"OK: {result.op}"


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="echo.ok")
    op = Text(result.op, style="echo.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any, style: str = "") -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}:", style="echo.key")
    console.print(k, Text(str(value), style=style), end="", soft_wrap=True)
    console.print()


def _render_meta(console: Console, result: ServiceResult) -> None:
    if not result.meta:
        return
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        console.print(Text(f"    {k}: {v}"))


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="echo.error")
    console.print(label, Text.assemble((result.op, "echo.op"), ": ", msg), soft_wrap=True)

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


def _render_send(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "reply", result.data.get("reply", ""), style="echo.line")
    if verbose:
        _render_meta(console, result)


def _render_serve(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    endpoint = f"{result.data.get('host')}:{result.data.get('port')}"
    _field(console, "stopped", endpoint, style="echo.endpoint")
    if verbose:
        _render_meta(console, result)


_OP_RENDERERS: dict[str, Callable[..., None]] = {
    "send": _render_send,
    "serve": _render_serve,
}
