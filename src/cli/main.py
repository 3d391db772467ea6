"""CLI de dropi-mcp (Typer).

Por qué una CLI además del servidor:
- `serve` es lo que lanza el host MCP.
- `tools`, `call` y `doctor` permiten probar la configuración y las
  operaciones sin un host.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from adapters.mcp_server import dumps_envelope, serve_stdio
from cli import doctor
from cli.ui_components import build_catalog_table, build_failure_panel, print_banner
from core.config import AppSettings
from core.domain.catalog import CATALOG
from core.services.dispatcher import create_dispatcher

app = typer.Typer(no_args_is_help=True, help="MCP server for the Dropi logistics API.")
app.add_typer(doctor.app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)


def configure_logging(level: str) -> None:
    """Logs a stderr; stdout queda libre para el protocolo MCP."""

    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="%H:%M:%S",
        handlers=[RichHandler(console=_err_console, show_path=False)],
        force=True,
    )


@app.command()
def serve() -> None:
    """Run the MCP server over stdio."""

    settings = AppSettings()
    configure_logging(settings.log_level)
    asyncio.run(serve_stdio(settings))


@app.command()
def tools() -> None:
    """List the operations exposed to MCP hosts."""

    print_banner(_console)
    _console.print(build_catalog_table(CATALOG))


async def _invoke(settings: AppSettings, name: str, arguments: dict[str, Any]) -> Any:
    async with create_dispatcher(settings) as dispatcher:
        return await dispatcher.invoke(name, arguments)


@app.command()
def call(
    name: str = typer.Argument(..., help="Operation name, e.g. dropi_get_orders."),
    args: Optional[str] = typer.Option(None, "--args", "-a", help="JSON object with the arguments."),
) -> None:
    """Invoke one operation and print its result envelope."""

    settings = AppSettings()
    configure_logging(settings.log_level)

    arguments: Any = {}
    if args:
        try:
            arguments = json.loads(args)
        except json.JSONDecodeError as exc:
            raise typer.BadParameter(f"invalid JSON: {exc}") from exc
    if not isinstance(arguments, dict):
        raise typer.BadParameter("arguments must be a JSON object")

    envelope = asyncio.run(_invoke(settings, name, arguments))
    if isinstance(envelope, dict) and envelope.get("success") is False:
        _err_console.print(build_failure_panel(envelope))
        raise typer.Exit(code=1)
    _console.print_json(dumps_envelope(envelope))


def run() -> None:
    app()
