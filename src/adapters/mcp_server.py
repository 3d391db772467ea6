"""MCP server over stdio.

Thin host boundary: `list_tools` advertises the catalog and `call_tool`
forwards to the dispatcher. Logs must go to stderr because stdout carries
the MCP JSON stream.
"""

from __future__ import annotations

import json
import logging
from decimal import Decimal
from typing import Any

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from core.config import AppSettings
from core.domain.catalog import OperationDescriptor
from core.domain.models import Failure
from core.services.dispatcher import OperationDispatcher, create_dispatcher

logger = logging.getLogger(__name__)

SERVER_NAME = "dropi-mcp"
SERVER_VERSION = "1.0.3"


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    return str(value)


def dumps_envelope(envelope: Any) -> str:
    return json.dumps(envelope, indent=2, ensure_ascii=False, default=_json_default)


def to_tool(descriptor: OperationDescriptor) -> types.Tool:
    return types.Tool(
        name=descriptor.name,
        description=descriptor.description,
        inputSchema=descriptor.input_schema(),
    )


def render_envelope(envelope: Any) -> list[types.TextContent]:
    return [types.TextContent(type="text", text=dumps_envelope(envelope))]


def build_server(dispatcher: OperationDispatcher) -> Server:
    server: Server = Server(SERVER_NAME, version=SERVER_VERSION)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [to_tool(descriptor) for descriptor in dispatcher.list_operations()]

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any] | None) -> list[types.TextContent]:
        result = await dispatcher.dispatch(name, arguments)
        # The SDK turns a raised error into an isError result for the host.
        if isinstance(result, Failure) and result.kind.is_protocol:
            raise ValueError(result.message)
        return render_envelope(result.envelope())

    return server


async def serve_stdio(settings: AppSettings | None = None) -> None:
    """Ejecuta el servidor hasta que el host cierre stdin."""

    settings = settings or AppSettings()
    async with create_dispatcher(settings) as dispatcher:
        server = build_server(dispatcher)
        async with stdio_server() as (read_stream, write_stream):
            logger.info("Dropi MCP server running against %s", settings.base_url)
            await server.run(read_stream, write_stream, server.create_initialization_options())
