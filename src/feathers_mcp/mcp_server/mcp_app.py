"""
MCP low-level server wired to the tool catalog and dispatcher.
"""

from __future__ import annotations

import json
from typing import Any, Optional

import mcp.types as types
from mcp.server.lowlevel.server import Server

from feathers_mcp import __version__
from feathers_mcp.routing.dispatcher import Dispatcher
from feathers_mcp.routing.types import ToolError
from feathers_mcp.shared.config import get_config
from feathers_mcp.shared.observability import get_logger

from .catalog import ToolCatalog
from .handlers import call_tool_handler, list_tools_handler

logger = get_logger(__name__)

_instructions = (
    "FeathersJS documentation assistant. Call list_available_tools to see "
    "what is available; every tool validates its arguments against the "
    "advertised input schema."
)


class ToolCallFailed(Exception):
    """
    Raised into the MCP SDK so it reports the call with ``isError``.

    The SDK only forwards ``str(exc)``, so structured details (field
    violations, sanitized stack) are appended as JSON after the summary line.
    """

    def __init__(self, error: ToolError):
        text = f"[{error.code.value}] {error.message}"
        if error.details is not None:
            text += "\n" + json.dumps(error.details, sort_keys=True, default=str)
        super().__init__(text)
        self.error = error


def build_mcp_server(
    catalog: ToolCatalog,
    dispatcher: Dispatcher,
    name: Optional[str] = None,
) -> Server:
    server = Server(
        name or get_config().app.name,
        version=__version__,
        instructions=_instructions,
    )
    list_tools = list_tools_handler(catalog)
    call_tool = call_tool_handler(dispatcher)

    @server.list_tools()
    async def _list_tools() -> list[types.Tool]:
        listing = await list_tools()
        return [
            types.Tool(
                name=tool.name,
                description=tool.description,
                inputSchema=tool.input_schema,
            )
            for tool in listing.tools
        ]

    # Arguments are validated by the dispatcher, not the SDK
    @server.call_tool(validate_input=False)
    async def _call_tool(name: str, arguments: dict[str, Any] | None):
        result = await call_tool(name, arguments or {})
        if result.is_error:
            raise ToolCallFailed(result.error)
        return [
            types.TextContent(type="text", text=block.text)
            for block in result.content
        ]

    logger.info("MCP server built", tools=len(catalog))
    return server
